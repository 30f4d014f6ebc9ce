"""Property names of the tag-value format."""

from __future__ import annotations

PROPERTIES = (
    "SPDXVersion",
    "SpecVersion",
    "DataLicense",
    "DocumentComment",
    "Creator",
    "Created",
    "CreatorComment",
    "LicenseListVersion",
    "PackageName",
    "PackageVersion",
    "PackageFileName",
    "PackageSupplier",
    "PackageOriginator",
    "PackageDownloadLocation",
    "PackageVerificationCode",
    "PackageChecksum",
    "PackageHomePage",
    "PackageSourceInfo",
    "PackageLicenseConcluded",
    "PackageLicenseInfoFromFiles",
    "PackageLicenseDeclared",
    "PackageLicenseComments",
    "PackageCopyrightText",
    "PackageSummary",
    "PackageDescription",
    "FileName",
    "FileType",
    "FileChecksum",
    "LicenseConcluded",
    "LicenseInfoInFile",
    "LicenseComments",
    "FileCopyrightText",
    "FileComment",
    "FileNotice",
    "FileContributor",
    "FileDependency",
    "ArtifactOfProjectName",
    "ArtifactOfProjectHomePage",
    "ArtifactOfProjectURI",
    "LicenseID",
    "ExtractedText",
    "LicenseName",
    "LicenseCrossReference",
    "LicenseComment",
    "Reviewer",
    "ReviewDate",
    "ReviewComment",
)

PROPERTIES_LOWER = {p.lower(): p for p in PROPERTIES}

# Values of these properties are always written between <text> tags
MULTILINE_PROPERTIES = frozenset(
    (
        "DocumentComment",
        "CreatorComment",
        "LicenseComment",
        "LicenseComments",
        "ReviewComment",
        "FileComment",
        "FileNotice",
        "FileCopyrightText",
        "PackageLicenseComments",
        "PackageCopyrightText",
        "PackageSummary",
        "PackageDescription",
        "ExtractedText",
        "PackageSourceInfo",
    )
)

# A blank line is written before these properties as they open a new section
SECTION_PROPERTIES = frozenset(
    ("FileName", "LicenseID", "PackageName", "Reviewer", "ArtifactOfProjectName")
)


def is_valid_property(prop: str, case_sensitive: bool = True) -> bool:
    """Return True if prop is a known property name.

    :param prop: the property name
    :param case_sensitive: if False, compare names ignoring case
    """
    if case_sensitive:
        return prop in PROPERTIES
    return prop.lower() in PROPERTIES_LOWER


def canonical_property(prop: str) -> str:
    """Return the property name in its usual case.

    Unknown property names are returned unchanged.
    """
    return PROPERTIES_LOWER.get(prop.lower(), prop)


def is_multiline(prop: str, value: str) -> bool:
    """Return True if the value must be written between <text> tags."""
    return prop in MULTILINE_PROPERTIES or "\n" in value
