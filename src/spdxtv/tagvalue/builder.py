"""Build an SPDX document out of tag-value tokens.

Tag-value documents are flat: the element a property applies to is the last
element opened by a property such as ``PackageName`` or ``FileName``. The
:class:`Builder` keeps these current elements in a :class:`Scope` and maps
each property to the element of the expected kind.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from typing import TYPE_CHECKING

import spdxtv.log
from spdxtv.error import (
    AlreadyDefined,
    InvalidChecksumFormat,
    NoClosedParen,
    PropertyNotRecognized,
)
from spdxtv.licence import parse_expression
from spdxtv.model import (
    ArtifactOf,
    Checksum,
    Document,
    ExtractedLicence,
    Package,
    Review,
    ValueCreator,
    ValueDate,
    ValueStr,
    VerificationCode,
)
from spdxtv.tagvalue.lexer import Comment

if TYPE_CHECKING:
    from typing import Any, Callable, Iterable, Optional
    from spdxtv.model import File, Meta
    from spdxtv.tagvalue.lexer import Pair, Token

    Action = Callable[["Builder", Any, Pair], None]

logger = spdxtv.log.getLogger("tagvalue.builder")

EXCLUDES_R = re.compile(r"^\s*excludes:\s*", re.I)


@dataclass
class Scope:
    """Elements properties currently apply to."""

    package: Optional[Package] = None
    file: Optional[File] = None
    artifact: Optional[ArtifactOf] = None
    licence: Optional[ExtractedLicence] = None
    review: Optional[Review] = None


def _check_unset(target: Any, attr: str, pair: Pair) -> None:
    if getattr(target, attr) is not None:
        raise AlreadyDefined(f"Property already defined: {pair.key}", meta=pair.meta)


def _set(attr: str, kind: type[ValueStr] = ValueStr) -> Action:
    def action(builder: Builder, target: Any, pair: Pair) -> None:
        _check_unset(target, attr, pair)
        setattr(target, attr, kind(pair.value, pair.meta))

    return action


def _append(attr: str, kind: type[ValueStr] = ValueStr) -> Action:
    def action(builder: Builder, target: Any, pair: Pair) -> None:
        getattr(target, attr).append(kind(pair.value, pair.meta))

    return action


def _set_licence(attr: str) -> Action:
    def action(builder: Builder, target: Any, pair: Pair) -> None:
        _check_unset(target, attr, pair)
        setattr(target, attr, parse_expression(pair.value, pair.meta))

    return action


def _append_licence(attr: str) -> Action:
    def action(builder: Builder, target: Any, pair: Pair) -> None:
        getattr(target, attr).append(parse_expression(pair.value, pair.meta))

    return action


def parse_checksum(value: str, meta: Optional[Meta] = None) -> Checksum:
    """Parse a ``Algorithm: Value`` checksum.

    :raise InvalidChecksumFormat: if value does not have exactly one colon
    """
    parts = value.split(":")
    if len(parts) != 2:
        raise InvalidChecksumFormat(meta=meta)
    return Checksum(
        algorithm=ValueStr(parts[0].strip(), meta),
        value=ValueStr(parts[1].strip(), meta),
        meta=meta,
    )


def _set_checksum(builder: Builder, target: Any, pair: Pair) -> None:
    _check_unset(target, "checksum", pair)
    target.checksum = parse_checksum(pair.value, pair.meta)


def parse_verification_code(
    value: str, meta: Optional[Meta] = None
) -> VerificationCode:
    """Parse a package verification code.

    The code may be followed by the list of excluded files, e.g.::

        d6a770ba38583ed4bb4525bd96e50461655d2758 (excludes: ./a.spdx, b.c)

    :raise NoClosedParen: when the list of excluded files is not closed
    """
    open_idx = value.find("(")
    if open_idx <= 0:
        return VerificationCode(ValueStr(value.strip(), meta), meta=meta)

    close_idx = value.rfind(")")
    if close_idx < open_idx:
        raise NoClosedParen(meta=meta)

    excluded = EXCLUDES_R.sub("", value[open_idx + 1 : close_idx])
    return VerificationCode(
        ValueStr(value[:open_idx].strip(), meta),
        excluded_files=[ValueStr(f.strip(), meta) for f in excluded.split(",")]
        if excluded.strip()
        else [],
        meta=meta,
    )


def _set_verification_code(builder: Builder, target: Any, pair: Pair) -> None:
    _check_unset(target, "verification_code", pair)
    target.verification_code = parse_verification_code(pair.value, pair.meta)


class Builder:
    """Map tag-value properties onto a Document.

    Properties are given one at a time with :meth:`apply`, in document order.
    """

    def __init__(self, document: Optional[Document] = None):
        """Initialize a Builder.

        :param document: the document to fill, a new one by default
        """
        self.document = document if document is not None else Document()
        self.scope = Scope()

    def target(self, kind: str) -> Any:
        """Return the current element of the given kind, or None."""
        if kind == "document":
            return self.document
        elif kind == "creation":
            return self.document.creation_info
        return getattr(self.scope, kind)

    def apply(self, token: Token) -> None:
        """Apply a token to the document being built.

        Comments are ignored. An empty value still sets its property, so a
        later value for the same scalar is rejected and an empty licence is
        an error.

        :raise PropertyNotRecognized: if the property is unknown or if no
            element it can apply to has been opened
        :raise BuildError: if the value cannot be applied
        :raise LicenceExpressionError: if a licence value is invalid
        """
        if isinstance(token, Comment):
            return

        entry = PROPERTY_TABLE.get(token.key)
        if entry is None:
            raise PropertyNotRecognized(token.key, meta=token.meta)

        kind, action = entry
        if kind is None:
            target = None
        else:
            target = self.target(kind)
            if target is None:
                raise PropertyNotRecognized(token.key, meta=token.meta)

        action(self, target, token)

    def open_package(self, target: None, pair: Pair) -> None:
        package = Package(name=ValueStr(pair.value, pair.meta), meta=pair.meta)
        self.document.packages.append(package)
        self.scope.package = package
        self.scope.file = None
        self.scope.artifact = None
        logger.debug("package %s", pair.value, meta=pair.meta)

    def open_file(self, target: None, pair: Pair) -> None:
        file = self.document.file_index.get(pair.value)
        if file is None:
            file = self.document.get_or_add_file(pair.value, pair.meta)
        else:
            # Complete a file created by a dependency, or reopen a file
            # shared by several packages.
            file.name.meta = pair.meta
            file.meta = pair.meta

        package = self.scope.package
        if package is not None and not any(f is file for f in package.files):
            package.files.append(file)
        self.scope.file = file
        self.scope.artifact = None
        logger.debug("file %s", pair.value, meta=pair.meta)

    def add_dependency(self, target: File, pair: Pair) -> None:
        target.dependencies.append(
            self.document.get_or_add_file(pair.value, pair.meta)
        )

    def open_artifact(self, target: File, pair: Pair) -> None:
        artifact = ArtifactOf(name=ValueStr(pair.value, pair.meta), meta=pair.meta)
        target.artifact_of.append(artifact)
        self.scope.artifact = artifact

    def open_licence(self, target: None, pair: Pair) -> None:
        licence = ExtractedLicence(id=ValueStr(pair.value, pair.meta), meta=pair.meta)
        self.document.extracted_licences.append(licence)
        self.scope.licence = licence

    def open_review(self, target: None, pair: Pair) -> None:
        review = Review(reviewer=ValueCreator(pair.value, pair.meta), meta=pair.meta)
        self.document.reviews.append(review)
        self.scope.review = review


# Property name to (kind of the element it applies to, action). Properties
# with no kind open a new element and are always accepted.
PROPERTY_TABLE: dict[str, tuple[Optional[str], Action]] = {
    # Document
    "SPDXVersion": ("document", _set("spec_version")),
    "SpecVersion": ("document", _set("spec_version")),
    "DataLicense": ("document", _set("data_licence")),
    "DocumentComment": ("document", _set("comment")),
    # Creation information
    "Creator": ("creation", _append("creators", ValueCreator)),
    "Created": ("creation", _set("created", ValueDate)),
    "CreatorComment": ("creation", _set("comment")),
    "LicenseListVersion": ("creation", _set("licence_list_version")),
    # Package
    "PackageName": (None, Builder.open_package),
    "PackageVersion": ("package", _set("version")),
    "PackageFileName": ("package", _set("file_name")),
    "PackageSupplier": ("package", _set("supplier", ValueCreator)),
    "PackageOriginator": ("package", _set("originator", ValueCreator)),
    "PackageDownloadLocation": ("package", _set("download_location")),
    "PackageVerificationCode": ("package", _set_verification_code),
    "PackageChecksum": ("package", _set_checksum),
    "PackageHomePage": ("package", _set("home_page")),
    "PackageSourceInfo": ("package", _set("source_info")),
    "PackageLicenseConcluded": ("package", _set_licence("licence_concluded")),
    "PackageLicenseInfoFromFiles": (
        "package",
        _append_licence("licence_info_from_files"),
    ),
    "PackageLicenseDeclared": ("package", _set_licence("licence_declared")),
    "PackageLicenseComments": ("package", _set("licence_comments")),
    "PackageCopyrightText": ("package", _set("copyright_text")),
    "PackageSummary": ("package", _set("summary")),
    "PackageDescription": ("package", _set("description")),
    # File
    "FileName": (None, Builder.open_file),
    "FileType": ("file", _set("type")),
    "FileChecksum": ("file", _set_checksum),
    "LicenseConcluded": ("file", _set_licence("licence_concluded")),
    "LicenseInfoInFile": ("file", _append_licence("licence_info_in_file")),
    "LicenseComments": ("file", _set("licence_comments")),
    "FileCopyrightText": ("file", _set("copyright_text")),
    "FileComment": ("file", _set("comment")),
    "FileNotice": ("file", _set("notice")),
    "FileContributor": ("file", _append("contributors")),
    "FileDependency": ("file", Builder.add_dependency),
    "ArtifactOfProjectName": ("file", Builder.open_artifact),
    # Artifact
    "ArtifactOfProjectHomePage": ("artifact", _set("home_page")),
    "ArtifactOfProjectURI": ("artifact", _set("project_uri")),
    # Extracted licence
    "LicenseID": (None, Builder.open_licence),
    "ExtractedText": ("licence", _set("text")),
    "LicenseName": ("licence", _append("names")),
    "LicenseCrossReference": ("licence", _append("cross_references")),
    "LicenseComment": ("licence", _set("comment")),
    # Review
    "Reviewer": (None, Builder.open_review),
    "ReviewDate": ("review", _set("date", ValueDate)),
    "ReviewComment": ("review", _set("comment")),
}


def build(tokens: Iterable[Token]) -> Document:
    """Build a Document from tag-value tokens.

    :param tokens: tokens as produced by :func:`spdxtv.tagvalue.lexer.lex`
    :raise ParseError: on the first property that cannot be applied; the
        document being built is dropped
    """
    builder = Builder()
    for token in tokens:
        builder.apply(token)
    logger.debug(
        "document built: %d packages, %d files",
        len(builder.document.packages),
        len(builder.document.files),
    )
    return builder.document
