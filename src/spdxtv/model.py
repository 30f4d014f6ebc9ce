"""Describe an SPDX document.

The classes defined here hold an SPDX document as read from (or written to)
the tag-value format by :mod:`spdxtv.tagvalue`, and checked by
:mod:`spdxtv.validation`. The model follows the SPDX 1.2 specification
https://spdx.org/spdx-specification-12-web-version

Values read from a document keep the lines they were read from (see
:class:`Meta`) so that validation findings can point back to the source.
Line information is never part of equality: two documents are equal when
they carry the same information, wherever it came from.
"""

from __future__ import annotations

import re

from dataclasses import dataclass, field
from datetime import datetime, timezone

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from typing import Any, Literal, Optional, Union

    AnyLicence = Union[
        "LicenceReference", "ConjunctiveLicenceSet", "DisjunctiveLicenceSet"
    ]

NOASSERTION: Literal["NOASSERTION"] = "NOASSERTION"
"""Indicates that the preparer of the SPDX document is not making any assertion
regarding the value of this field.
"""
NONE_VALUE: Literal["NONE"] = "NONE"
"""When this value is used as the object of a property it indicates that the
preparer of the SpdxDocument believes that there is no value for the property.
"""

DATA_LICENCE = "CC0-1.0"
"""The only license an SPDX document may be released under."""

DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
"""Format of Created and ReviewDate values."""

CREATOR_R = re.compile(r"^\s*([^:]*?)\s*:\s*(.*?)\s*(?:\(([^()]*)\))?\s*$", re.S)


@dataclass(frozen=True)
class Meta:
    """Lines (1-based, inclusive) an element was read from."""

    line_start: int
    line_end: int

    def __str__(self) -> str:
        if self.line_start == self.line_end:
            return str(self.line_start)
        return f"{self.line_start}-{self.line_end}"


@dataclass
class ValueStr:
    """A string value and the lines it was read from."""

    value: str
    meta: Optional[Meta] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.value


class ValueCreator(ValueStr):
    """A ``<Kind>: <Name> (<email>)`` value.

    The raw value is kept as is; :attr:`kind`, :attr:`name` and :attr:`email`
    are empty strings when the value does not have the expected shape.
    """

    def _parts(self) -> tuple[str, str, str]:
        m = CREATOR_R.match(self.value)
        if m is None:
            return "", "", ""
        return m.group(1), m.group(2), (m.group(3) or "").strip()

    @property
    def kind(self) -> str:
        """Kind of creator, usually Person, Organization or Tool."""
        return self._parts()[0]

    @property
    def name(self) -> str:
        return self._parts()[1]

    @property
    def email(self) -> str:
        return self._parts()[2]


class ValueDate(ValueStr):
    """A date value in the ``YYYY-MM-DDThh:mm:ssZ`` format."""

    @property
    def time(self) -> Optional[datetime]:
        """Return the parsed date, or None if the value is not well-formed."""
        try:
            return datetime.strptime(self.value, DATE_FORMAT).replace(
                tzinfo=timezone.utc
            )
        except ValueError:
            return None


def _str(value: Optional[ValueStr]) -> Optional[str]:
    return None if value is None else value.value


def _json_update(result: dict[str, Any], key: str, value: Any) -> None:
    """Add key to result unless value is empty."""
    if value is None or value == []:
        return
    if isinstance(value, ValueStr):
        value = value.value
    result[key] = value


@dataclass
class Checksum:
    """Algorithm and value of a package or file checksum."""

    algorithm: ValueStr
    value: ValueStr
    meta: Optional[Meta] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"{self.algorithm}: {self.value}"

    def to_json_dict(self) -> dict[str, str]:
        return {"algorithm": self.algorithm.value, "checksumValue": self.value.value}

    @classmethod
    def from_json_dict(cls, obj: dict[str, Any]) -> Checksum:
        return cls(
            algorithm=ValueStr(str(obj.get("algorithm", ""))),
            value=ValueStr(str(obj.get("checksumValue", ""))),
        )


@dataclass
class VerificationCode:
    """Package verification code and the files excluded from it."""

    value: ValueStr
    excluded_files: list[ValueStr] = field(default_factory=list)
    meta: Optional[Meta] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        if not self.excluded_files:
            return self.value.value
        excluded = ", ".join(f.value for f in self.excluded_files)
        return f"{self.value} (excludes: {excluded})"

    def to_json_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"packageVerificationCodeValue": self.value.value}
        _json_update(
            result,
            "packageVerificationCodeExcludedFiles",
            [f.value for f in self.excluded_files],
        )
        return result

    @classmethod
    def from_json_dict(cls, obj: dict[str, Any]) -> VerificationCode:
        return cls(
            value=ValueStr(str(obj.get("packageVerificationCodeValue", ""))),
            excluded_files=[
                ValueStr(str(f))
                for f in obj.get("packageVerificationCodeExcludedFiles", [])
            ],
        )


@dataclass
class LicenceReference:
    """A single license: an SPDX License List id, a ``LicenseRef-`` id,
    NOASSERTION or NONE.
    """

    id: str
    meta: Optional[Meta] = field(default=None, compare=False, repr=False)

    @property
    def licence_id(self) -> str:
        return self.id

    def is_reference(self) -> bool:
        """Return True for document-local ``LicenseRef-`` ids (any case)."""
        return self.id.lower().startswith("licenseref")


@dataclass
class LicenceSet:
    """Members of a conjunctive or disjunctive license set."""

    separator: ClassVar[str] = ""

    members: list[AnyLicence] = field(default_factory=list)
    meta: Optional[Meta] = field(default=None, compare=False, repr=False)

    @property
    def licence_id(self) -> str:
        """Return the expression of the set, always between parentheses."""
        return "(" + self.separator.join(m.licence_id for m in self.members) + ")"


class ConjunctiveLicenceSet(LicenceSet):
    """All the member licenses apply."""

    separator = " and "


class DisjunctiveLicenceSet(LicenceSet):
    """Any of the member licenses may be chosen."""

    separator = " or "


def _licence_from_json(value: Optional[str]) -> Optional[AnyLicence]:
    from spdxtv.licence import parse_expression

    if value is None:
        return None
    return parse_expression(value)


@dataclass
class ArtifactOf:
    """Project a file is an artifact of."""

    name: Optional[ValueStr] = None
    home_page: Optional[ValueStr] = None
    project_uri: Optional[ValueStr] = None
    meta: Optional[Meta] = field(default=None, compare=False, repr=False)

    def to_json_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        _json_update(result, "name", self.name)
        _json_update(result, "homePage", self.home_page)
        _json_update(result, "projectUri", self.project_uri)
        return result

    @classmethod
    def from_json_dict(cls, obj: dict[str, Any]) -> ArtifactOf:
        return cls(
            name=_value(obj, "name"),
            home_page=_value(obj, "homePage"),
            project_uri=_value(obj, "projectUri"),
        )


def _value(
    obj: dict[str, Any], key: str, kind: type[ValueStr] = ValueStr
) -> Optional[ValueStr]:
    if key not in obj or obj[key] is None:
        return None
    return kind(str(obj[key]))


@dataclass(eq=False)
class File:
    """Describe a file.

    Files are identified by their name within a document. A file referenced
    through a dependency before its own definition exists as a placeholder
    holding only its name, later completed in place.

    :ivar ValueStr name: file name, relative to the package root
    :ivar list[File] dependencies: files this one is derived from; those are
        the very File objects of the document, never copies
    """

    name: ValueStr
    type: Optional[ValueStr] = None
    checksum: Optional[Checksum] = None
    licence_concluded: Optional[AnyLicence] = None
    licence_info_in_file: list[AnyLicence] = field(default_factory=list)
    licence_comments: Optional[ValueStr] = None
    copyright_text: Optional[ValueStr] = None
    comment: Optional[ValueStr] = None
    notice: Optional[ValueStr] = None
    contributors: list[ValueStr] = field(default_factory=list)
    artifact_of: list[ArtifactOf] = field(default_factory=list)
    dependencies: list[File] = field(default_factory=list)
    meta: Optional[Meta] = field(default=None, repr=False)

    def _key(self) -> tuple:
        return (
            self.name,
            self.type,
            self.checksum,
            self.licence_concluded,
            self.licence_info_in_file,
            self.licence_comments,
            self.copyright_text,
            self.comment,
            self.notice,
            self.contributors,
            self.artifact_of,
            # Compare dependencies by name so that cycles do not recurse
            [d.name.value for d in self.dependencies],
        )

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, File):
            return NotImplemented
        return self._key() == other._key()

    __hash__ = object.__hash__

    def is_placeholder(self) -> bool:
        """Return True if the file only has a name."""
        return self == File(name=self.name)

    def to_json_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"fileName": self.name.value}
        _json_update(result, "fileType", self.type)
        if self.checksum is not None:
            result["checksums"] = [self.checksum.to_json_dict()]
        if self.licence_concluded is not None:
            result["licenseConcluded"] = self.licence_concluded.licence_id
        _json_update(
            result,
            "licenseInfoInFiles",
            [lic.licence_id for lic in self.licence_info_in_file],
        )
        _json_update(result, "licenseComments", self.licence_comments)
        _json_update(result, "copyrightText", self.copyright_text)
        _json_update(result, "comment", self.comment)
        _json_update(result, "noticeText", self.notice)
        _json_update(result, "fileContributors", [c.value for c in self.contributors])
        _json_update(
            result, "artifactOf", [a.to_json_dict() for a in self.artifact_of]
        )
        _json_update(
            result, "fileDependencies", [d.name.value for d in self.dependencies]
        )
        return result

    @classmethod
    def from_json_dict(cls, obj: dict[str, Any]) -> File:
        """Initialize a :class:`File` from a :class:`dict`.

        Dependencies are left empty: they can only be resolved once all the
        files of the document are known, see :meth:`Document.from_json_dict`.
        """  # noqa RST304
        checksums = obj.get("checksums") or []
        return cls(
            name=ValueStr(str(obj.get("fileName", ""))),
            type=_value(obj, "fileType"),
            checksum=Checksum.from_json_dict(checksums[0]) if checksums else None,
            licence_concluded=_licence_from_json(obj.get("licenseConcluded")),
            licence_info_in_file=[
                parse_licence for parse_licence in map(
                    _licence_from_json, obj.get("licenseInfoInFiles", [])
                )
                if parse_licence is not None
            ],
            licence_comments=_value(obj, "licenseComments"),
            copyright_text=_value(obj, "copyrightText"),
            comment=_value(obj, "comment"),
            notice=_value(obj, "noticeText"),
            contributors=[ValueStr(str(c)) for c in obj.get("fileContributors", [])],
            artifact_of=[
                ArtifactOf.from_json_dict(a) for a in obj.get("artifactOf", [])
            ],
        )


@dataclass
class Package:
    """Describe a package.

    :ivar ValueStr name: full name of the package as given by the originator
    :ivar ValueCreator supplier: actual distribution source for the package
    :ivar ValueCreator originator: where the package originally came from
    :ivar VerificationCode verification_code: digest summarizing the package
        files, and the files left out of the computation
    :ivar list[File] files: files contained in the package. The same File
        objects are listed in :attr:`Document.files`.
    """

    name: ValueStr
    version: Optional[ValueStr] = None
    file_name: Optional[ValueStr] = None
    supplier: Optional[ValueCreator] = None
    originator: Optional[ValueCreator] = None
    download_location: Optional[ValueStr] = None
    verification_code: Optional[VerificationCode] = None
    checksum: Optional[Checksum] = None
    home_page: Optional[ValueStr] = None
    source_info: Optional[ValueStr] = None
    licence_concluded: Optional[AnyLicence] = None
    licence_info_from_files: list[AnyLicence] = field(default_factory=list)
    licence_declared: Optional[AnyLicence] = None
    licence_comments: Optional[ValueStr] = None
    copyright_text: Optional[ValueStr] = None
    summary: Optional[ValueStr] = None
    description: Optional[ValueStr] = None
    files: list[File] = field(default_factory=list)
    meta: Optional[Meta] = field(default=None, compare=False, repr=False)

    def to_json_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name.value}
        _json_update(result, "versionInfo", self.version)
        _json_update(result, "packageFileName", self.file_name)
        _json_update(result, "supplier", self.supplier)
        _json_update(result, "originator", self.originator)
        _json_update(result, "downloadLocation", self.download_location)
        if self.verification_code is not None:
            result["packageVerificationCode"] = self.verification_code.to_json_dict()
        if self.checksum is not None:
            result["checksums"] = [self.checksum.to_json_dict()]
        _json_update(result, "homepage", self.home_page)
        _json_update(result, "sourceInfo", self.source_info)
        if self.licence_concluded is not None:
            result["licenseConcluded"] = self.licence_concluded.licence_id
        _json_update(
            result,
            "licenseInfoFromFiles",
            [lic.licence_id for lic in self.licence_info_from_files],
        )
        if self.licence_declared is not None:
            result["licenseDeclared"] = self.licence_declared.licence_id
        _json_update(result, "licenseComments", self.licence_comments)
        _json_update(result, "copyrightText", self.copyright_text)
        _json_update(result, "summary", self.summary)
        _json_update(result, "description", self.description)
        _json_update(result, "hasFiles", [f.name.value for f in self.files])
        return result

    @classmethod
    def from_json_dict(cls, obj: dict[str, Any]) -> Package:
        """Initialize a :class:`Package` from a :class:`dict`.

        The ``hasFiles`` entry is resolved by :meth:`Document.from_json_dict`.
        """  # noqa RST304
        checksums = obj.get("checksums") or []
        verification_code = obj.get("packageVerificationCode")
        return cls(
            name=ValueStr(str(obj.get("name", ""))),
            version=_value(obj, "versionInfo"),
            file_name=_value(obj, "packageFileName"),
            supplier=_value(obj, "supplier", ValueCreator),  # type: ignore
            originator=_value(obj, "originator", ValueCreator),  # type: ignore
            download_location=_value(obj, "downloadLocation"),
            verification_code=VerificationCode.from_json_dict(verification_code)
            if verification_code is not None
            else None,
            checksum=Checksum.from_json_dict(checksums[0]) if checksums else None,
            home_page=_value(obj, "homepage"),
            source_info=_value(obj, "sourceInfo"),
            licence_concluded=_licence_from_json(obj.get("licenseConcluded")),
            licence_info_from_files=[
                lic
                for lic in map(_licence_from_json, obj.get("licenseInfoFromFiles", []))
                if lic is not None
            ],
            licence_declared=_licence_from_json(obj.get("licenseDeclared")),
            licence_comments=_value(obj, "licenseComments"),
            copyright_text=_value(obj, "copyrightText"),
            summary=_value(obj, "summary"),
            description=_value(obj, "description"),
        )


@dataclass
class Review:
    """Review of the document by a person, organization or tool."""

    reviewer: ValueCreator
    date: Optional[ValueDate] = None
    comment: Optional[ValueStr] = None
    meta: Optional[Meta] = field(default=None, compare=False, repr=False)

    def to_json_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"reviewer": self.reviewer.value}
        _json_update(result, "reviewDate", self.date)
        _json_update(result, "comment", self.comment)
        return result

    @classmethod
    def from_json_dict(cls, obj: dict[str, Any]) -> Review:
        return cls(
            reviewer=ValueCreator(str(obj.get("reviewer", ""))),
            date=_value(obj, "reviewDate", ValueDate),  # type: ignore
            comment=_value(obj, "comment"),
        )


@dataclass
class ExtractedLicence:
    """A license not in the SPDX License List, defined in the document.

    Its id is a ``LicenseRef-`` id used by license expressions.
    """

    id: ValueStr
    names: list[ValueStr] = field(default_factory=list)
    text: Optional[ValueStr] = None
    cross_references: list[ValueStr] = field(default_factory=list)
    comment: Optional[ValueStr] = None
    meta: Optional[Meta] = field(default=None, compare=False, repr=False)

    @property
    def licence_id(self) -> str:
        return self.id.value

    def to_json_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"licenseId": self.id.value}
        _json_update(result, "extractedText", self.text)
        _json_update(result, "names", [n.value for n in self.names])
        _json_update(result, "seeAlsos", [r.value for r in self.cross_references])
        _json_update(result, "comment", self.comment)
        return result

    @classmethod
    def from_json_dict(cls, obj: dict[str, Any]) -> ExtractedLicence:
        return cls(
            id=ValueStr(str(obj.get("licenseId", ""))),
            names=[ValueStr(str(n)) for n in obj.get("names", [])],
            text=_value(obj, "extractedText"),
            cross_references=[ValueStr(str(r)) for r in obj.get("seeAlsos", [])],
            comment=_value(obj, "comment"),
        )


@dataclass
class CreationInfo:
    """Document where and by whom the SPDX document has been created."""

    creators: list[ValueCreator] = field(default_factory=list)
    created: Optional[ValueDate] = None
    licence_list_version: Optional[ValueStr] = None
    comment: Optional[ValueStr] = None
    meta: Optional[Meta] = field(default=None, compare=False, repr=False)

    def to_json_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        _json_update(result, "creators", [c.value for c in self.creators])
        _json_update(result, "created", self.created)
        _json_update(result, "licenseListVersion", self.licence_list_version)
        _json_update(result, "comment", self.comment)
        return result

    @classmethod
    def from_json_dict(cls, obj: dict[str, Any]) -> CreationInfo:
        return cls(
            creators=[ValueCreator(str(c)) for c in obj.get("creators", [])],
            created=_value(obj, "created", ValueDate),  # type: ignore
            licence_list_version=_value(obj, "licenseListVersion"),
            comment=_value(obj, "comment"),
        )


@dataclass
class Document:
    """Describe the SPDX Document.

    The document owns all its elements. Files are listed once in
    :attr:`files`, whether they belong to a package, to several, or are only
    known as a dependency of another file; :attr:`file_index` finds them by
    name.
    """

    spec_version: Optional[ValueStr] = None
    data_licence: Optional[ValueStr] = None
    comment: Optional[ValueStr] = None
    creation_info: CreationInfo = field(default_factory=CreationInfo)
    packages: list[Package] = field(default_factory=list)
    files: list[File] = field(default_factory=list)
    reviews: list[Review] = field(default_factory=list)
    extracted_licences: list[ExtractedLicence] = field(default_factory=list)
    file_index: dict[str, File] = field(
        default_factory=dict, compare=False, repr=False
    )
    meta: Optional[Meta] = field(default=None, compare=False, repr=False)

    def add_file(self, file: File) -> File:
        """Append a file to the document and index it by name.

        :param file: the file to add
        :return: the added file
        """
        self.files.append(file)
        self.file_index.setdefault(file.name.value, file)
        return file

    def get_or_add_file(self, name: str, meta: Optional[Meta] = None) -> File:
        """Return the file called name, creating an empty one if needed.

        :param name: the file name
        :param meta: lines of the element creating the file, if any
        """
        file = self.file_index.get(name)
        if file is None:
            file = self.add_file(File(name=ValueStr(name, meta), meta=meta))
        return file

    def to_json_dict(self) -> dict[str, Any]:
        """Generate a dictionary that can be dumped into a JSON."""
        result: dict[str, Any] = {}
        _json_update(result, "spdxVersion", self.spec_version)
        _json_update(result, "dataLicense", self.data_licence)
        _json_update(result, "comment", self.comment)
        result["creationInfo"] = self.creation_info.to_json_dict()
        _json_update(result, "packages", [p.to_json_dict() for p in self.packages])
        _json_update(result, "files", [f.to_json_dict() for f in self.files])
        _json_update(result, "reviewers", [r.to_json_dict() for r in self.reviews])
        _json_update(
            result,
            "hasExtractedLicensingInfos",
            [lic.to_json_dict() for lic in self.extracted_licences],
        )
        return result

    @classmethod
    def from_json_dict(cls, doc_dict: dict[str, Any]) -> Document:
        """Create a :class:`Document` out of a JSON :class:`dict`.

        Files listed by packages or as dependencies but absent from the
        ``files`` entry are created empty, as the tag-value builder does.

        :param doc_dict: The :class:`dict` containing JSON values to initialize
            this :class:`Document` with.

        :returns: A new :class:`Document` initialized with the JSON values of
            *doc_dict*.
        """  # noqa RST304
        doc = cls(
            spec_version=_value(doc_dict, "spdxVersion"),
            data_licence=_value(doc_dict, "dataLicense"),
            comment=_value(doc_dict, "comment"),
            creation_info=CreationInfo.from_json_dict(
                doc_dict.get("creationInfo") or {}
            ),
        )

        file_dicts = doc_dict.get("files", [])
        for file_dict in file_dicts:
            doc.add_file(File.from_json_dict(file_dict))

        # Now that all files are known, resolve dependencies by name
        for file, file_dict in zip(list(doc.files), file_dicts):
            for dep in file_dict.get("fileDependencies", []):
                file.dependencies.append(doc.get_or_add_file(str(dep)))

        for package_dict in doc_dict.get("packages", []):
            package = Package.from_json_dict(package_dict)
            for name in package_dict.get("hasFiles", []):
                package.files.append(doc.get_or_add_file(str(name)))
            doc.packages.append(package)

        for review_dict in doc_dict.get("reviewers", []):
            doc.reviews.append(Review.from_json_dict(review_dict))
        for lic_dict in doc_dict.get("hasExtractedLicensingInfos", []):
            doc.extracted_licences.append(ExtractedLicence.from_json_dict(lic_dict))
        return doc
