"""Write SPDX documents in the tag-value format."""

from __future__ import annotations

import io

from typing import TYPE_CHECKING

import spdxtv.log
from spdxtv.tagvalue.lexer import Comment
from spdxtv.tagvalue.properties import SECTION_PROPERTIES, is_multiline

if TYPE_CHECKING:
    from typing import Iterable, Optional, TextIO
    from spdxtv.model import (
        AnyLicence,
        Checksum,
        CreationInfo,
        Document,
        ExtractedLicence,
        File,
        Package,
        Review,
        ValueStr,
        VerificationCode,
    )
    from spdxtv.tagvalue.lexer import Token

logger = spdxtv.log.getLogger("tagvalue.writer")

COMMENT = "__comment"


def checksum_str(checksum: Optional[Checksum]) -> Optional[str]:
    if checksum is None or (not checksum.algorithm.value and not checksum.value.value):
        return None
    return f"{checksum.algorithm}: {checksum.value}"


def verification_code_str(code: Optional[VerificationCode]) -> Optional[str]:
    if code is None:
        return None
    if not code.excluded_files:
        return code.value.value
    excluded = ", ".join(f.value for f in code.excluded_files)
    return f"{code.value} (Excludes: {excluded})"


def _str(value: Optional[ValueStr]) -> Optional[str]:
    return None if value is None else value.value


def _licence(value: Optional[AnyLicence]) -> Optional[str]:
    return None if value is None else value.licence_id


class Formatter:
    """Pretty-printer for the tag-value format.

    The formatter remembers what it wrote last to separate sections with
    blank lines.
    """

    def __init__(self, out: TextIO):
        """Initialize a Formatter.

        :param out: the stream to write to
        """
        self.out = out
        self.last_written = ""

    def spaces(self, now: str) -> None:
        """Write a blank line if now starts a new section."""
        if self.last_written in ("", COMMENT):
            return
        if now == COMMENT or now in SECTION_PROPERTIES:
            self.out.write("\n")

    def comment(self, value: str) -> None:
        """Write a comment line.

        :param value: the comment text, without the leading ``#``
        """
        self.spaces(COMMENT)
        if value and not value[0].isspace() and not value.startswith("#"):
            value = " " + value
        self.last_written = COMMENT
        self.out.write(f"#{value}\n")

    def property(self, key: str, value: Optional[str]) -> None:
        """Write a property.

        :param key: the property name
        :param value: the property value, an empty value is written as
            ``Key:`` and None writes nothing
        """
        if value is None:
            return
        self.spaces(key)
        if value and is_multiline(key, value):
            value = f"<text>{value}</text>"
        self.last_written = key
        self.out.write(f"{key}: {value}\n" if value else f"{key}:\n")

    def properties(self, *pairs: tuple[str, Optional[str]]) -> None:
        for key, value in pairs:
            self.property(key, value)

    def property_list(self, key: str, values: Iterable[str]) -> None:
        for value in values:
            self.property(key, value)

    def tokens(self, tokens: Iterable[Token]) -> None:
        """Pretty-print a stream of tokens.

        Empty values are dropped, except for properties opening a new
        section so that the following properties still apply to it.

        :param tokens: tokens as returned by :func:`spdxtv.tagvalue.lexer.lex`
        """
        for token in tokens:
            if isinstance(token, Comment):
                self.comment(token.value)
            elif token.value or token.key in SECTION_PROPERTIES:
                self.property(token.key, token.value)

    def document(self, doc: Document) -> None:
        """Write a document and all its elements."""
        self.properties(
            ("SPDXVersion", _str(doc.spec_version)),
            ("DataLicense", _str(doc.data_licence)),
            ("DocumentComment", _str(doc.comment)),
        )
        self.creation_info(doc.creation_info)

        in_package = {id(f) for package in doc.packages for f in package.files}
        # A file only known through a dependency is written by the
        # FileDependency line of the first file depending on it.
        seen_as_dependency: set[int] = set()
        for file in doc.files:
            if id(file) not in in_package and not (
                id(file) in seen_as_dependency and file.is_placeholder()
            ):
                self.file(file)
            seen_as_dependency.update(id(d) for d in file.dependencies)

        written: set[int] = set()
        for package in doc.packages:
            self.package(package)
            for file in package.files:
                if id(file) in written:
                    self.property("FileName", file.name.value)
                else:
                    self.file(file)
                    written.add(id(file))

        for review in doc.reviews:
            self.review(review)
        for licence in doc.extracted_licences:
            self.extracted_licence(licence)

    def creation_info(self, info: CreationInfo) -> None:
        self.property_list("Creator", (c.value for c in info.creators))
        self.properties(
            ("Created", _str(info.created)),
            ("CreatorComment", _str(info.comment)),
            ("LicenseListVersion", _str(info.licence_list_version)),
        )

    def package(self, package: Package) -> None:
        self.properties(
            ("PackageName", package.name.value),
            ("PackageVersion", _str(package.version)),
            ("PackageFileName", _str(package.file_name)),
            ("PackageSupplier", _str(package.supplier)),
            ("PackageOriginator", _str(package.originator)),
            ("PackageDownloadLocation", _str(package.download_location)),
            ("PackageVerificationCode", verification_code_str(package.verification_code)),
            ("PackageChecksum", checksum_str(package.checksum)),
            ("PackageHomePage", _str(package.home_page)),
            ("PackageSourceInfo", _str(package.source_info)),
            ("PackageLicenseConcluded", _licence(package.licence_concluded)),
            ("PackageLicenseDeclared", _licence(package.licence_declared)),
        )
        self.property_list(
            "PackageLicenseInfoFromFiles",
            (lic.licence_id for lic in package.licence_info_from_files),
        )
        self.properties(
            ("PackageLicenseComments", _str(package.licence_comments)),
            ("PackageCopyrightText", _str(package.copyright_text)),
            ("PackageSummary", _str(package.summary)),
            ("PackageDescription", _str(package.description)),
        )

    def file(self, file: File) -> None:
        self.properties(
            ("FileName", file.name.value),
            ("FileType", _str(file.type)),
            ("FileChecksum", checksum_str(file.checksum)),
            ("LicenseConcluded", _licence(file.licence_concluded)),
        )
        self.property_list(
            "LicenseInfoInFile", (lic.licence_id for lic in file.licence_info_in_file)
        )
        self.properties(
            ("LicenseComments", _str(file.licence_comments)),
            ("FileCopyrightText", _str(file.copyright_text)),
            ("FileComment", _str(file.comment)),
            ("FileNotice", _str(file.notice)),
        )
        self.property_list("FileContributor", (c.value for c in file.contributors))
        self.property_list("FileDependency", (d.name.value for d in file.dependencies))
        for artifact in file.artifact_of:
            self.properties(
                ("ArtifactOfProjectName", _str(artifact.name)),
                ("ArtifactOfProjectHomePage", _str(artifact.home_page)),
                ("ArtifactOfProjectURI", _str(artifact.project_uri)),
            )

    def review(self, review: Review) -> None:
        self.properties(
            ("Reviewer", review.reviewer.value),
            ("ReviewDate", _str(review.date)),
            ("ReviewComment", _str(review.comment)),
        )

    def extracted_licence(self, licence: ExtractedLicence) -> None:
        self.properties(
            ("LicenseID", licence.id.value),
            ("ExtractedText", _str(licence.text)),
        )
        self.property_list("LicenseName", (n.value for n in licence.names))
        self.property_list(
            "LicenseCrossReference", (r.value for r in licence.cross_references)
        )
        self.property("LicenseComment", _str(licence.comment))


def write(doc: Document, out: TextIO) -> None:
    """Write a document in the tag-value format.

    :param doc: the document to write
    :param out: the text stream to write to
    """
    Formatter(out).document(doc)


def dumps(doc: Document) -> str:
    """Return the tag-value text of a document."""
    out = io.StringIO()
    write(doc, out)
    logger.debug("document written (%d characters)", out.tell())
    return out.getvalue()
