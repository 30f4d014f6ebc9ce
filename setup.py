from setuptools import setup, find_packages

import os

install_requires = [
    "colorama",
    "pyyaml",
    "tqdm",
    "stevedore>1.20.0",
]

extras_require = {
    "config": ["tomlkit>=0.11", "typeguard>=3"],
    "test": ["pytest", "tomlkit>=0.11", "typeguard>=3"],
}

# Get spdxtv version from the VERSION file.
version_file = os.path.join(os.path.dirname(__file__), "VERSION")
with open(version_file) as f:
    spdxtv_version = f.read().strip()

with open(os.path.join(os.path.dirname(__file__), "README.md")) as f:
    long_description = f.read()

setup(
    name="spdxtv",
    version=spdxtv_version,
    license="GPLv3",
    description="Read, validate and write SPDX documents in the tag-value format",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Software Development :: Build Tools",
    ],
    python_requires=">=3.9",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"spdxtv": ["py.typed"]},
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "spdxtv.codec": [
            "tag = spdxtv.codec.tagvalue:TagValueCodec",
            "json = spdxtv.codec.jsondoc:JSONCodec",
            "yaml = spdxtv.codec.jsondoc:YAMLCodec",
        ],
        "console_scripts": ["spdxtv = spdxtv.cli:main"],
    },
)
