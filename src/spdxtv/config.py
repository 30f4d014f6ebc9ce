"""Read spdxtv config file."""
from __future__ import annotations
from dataclasses import fields, dataclass

from typing import TYPE_CHECKING, get_type_hints, ClassVar

try:
    from typeguard import TypeCheckError, check_type

    CONFIG_CHECK_TYPE = True
except ImportError:  # defensive code
    CONFIG_CHECK_TYPE = False


import logging
import os

if TYPE_CHECKING:
    from typing import Type, TypeVar

    T = TypeVar("T", bound="ConfigSection")


def known_config_files() -> list[str]:
    """Return the configuration files to look for, in loading order."""
    if "SPDXTV_CONFIG" in os.environ:
        return [os.environ["SPDXTV_CONFIG"]]
    return [
        os.path.join(
            os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")),
            "spdxtv.toml",
        ),
        os.path.expanduser("~/spdxtv.toml"),
    ]


@dataclass
class ConfigSection:
    title: ClassVar[str]

    @classmethod
    def load(cls: Type[T]) -> T:
        """Load a section of the configuration file.

        To load a new section, subclass ConfigSection and document the
        fields that you expect to parse, e.g.::

            @dataclass
            class TagValueConfig(ConfigSection):
                title = "tagvalue"
                case_sensitive : bool = False

        tagvalue_config = TagValueConfig.load()

        If the package typeguard is installed type defined in the metaclass
        will be verified.
        """
        schema = get_type_hints(cls)
        cls_fields = {f.name: schema[f.name] for f in fields(cls) if f.name != "title"}
        kwargs = {}

        for k, v in Config.load_section(cls.title).items():
            if k in cls_fields:
                ftype = cls_fields[k]
                try:
                    if CONFIG_CHECK_TYPE:
                        check_type(v, ftype)
                except TypeCheckError as err:
                    logging.error(f"{cls.title}.{k}: {err}")
                else:
                    kwargs[k] = v

        return cls(**kwargs)  # type: ignore


class Config:
    """Load spdxtv configuration file and validate each section.

    This class expose the .load_section(<section>) method that is used by
    ConfigSection subclasses to get the content of their section before
    validation.

    Note that without the tomlkit package the configuration is not read.
    """

    data: ClassVar[dict] = {}
    loaded: ClassVar[bool] = False

    @classmethod
    def load_section(cls, section: str) -> dict:
        """Load a configuration section content.

        :param section: if contains "." nested subsection will be found. For
            instance "tagvalue.lexer" will return the section:

            [tagvalue]
              [tagvalue.lexer]
        :return: the configuration dict
        """
        if not cls.loaded:
            cls.load()

        subsections = section.split(".")
        result = cls.data
        for subsection in subsections:
            result = result.get(subsection, {})

        return result

    @classmethod
    def load_file(cls, filename: str) -> None:
        """Load a configuration file.

        :param filename: configuration file to load
        """
        try:
            from tomlkit import parse
            from tomlkit.exceptions import TOMLKitError
        except ImportError:  # defensive code
            logging.error(f"cannot load {filename} (cannot import tomlkit)")
        else:
            with open(filename) as f:
                try:
                    cls.data.update(parse(f.read()).unwrap())
                except TOMLKitError as e:
                    logging.error(str(e))

    @classmethod
    def load(cls) -> None:
        """Load the configuration file(s).

        Note that this method is automatically called the first time
        .load_section() is called.
        """
        cls.loaded = True
        for config_file in known_config_files():
            if os.path.isfile(config_file):
                cls.load_file(config_file)

    @classmethod
    def reset(cls) -> None:
        """Forget loaded data so that the next access reloads the files."""
        cls.data = {}
        cls.loaded = False
