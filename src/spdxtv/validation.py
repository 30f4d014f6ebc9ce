"""Validate SPDX documents.

Validation never stops at the first problem: all the findings of a document
are collected as :class:`ValidationError` values, each either an error or a
warning. A document is valid when there is no error; warnings point at
values that are accepted but not in their canonical form.

Identifiers of the SPDX License List are checked against a license registry,
any object with a ``contains(licence_id) -> bool`` method such as
:class:`spdxtv.licence.LicenceList`.

Methods of :class:`Validator` return False when they added an error and True
otherwise (warnings do not count), so that checks can be chained.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re
from urllib.parse import urlparse

from typing import TYPE_CHECKING

import spdxtv.log
from spdxtv.model import (
    DATA_LICENCE,
    NOASSERTION,
    NONE_VALUE,
    ConjunctiveLicenceSet,
    DisjunctiveLicenceSet,
    LicenceReference,
)

if TYPE_CHECKING:
    from typing import Optional, Protocol, Sequence
    from spdxtv.model import (
        AnyLicence,
        ArtifactOf,
        Checksum,
        Document,
        ExtractedLicence,
        File,
        Meta,
        Package,
        Review,
        ValueCreator,
        ValueDate,
        ValueStr,
        VerificationCode,
    )

    class LicenceRegistry(Protocol):
        def contains(self, licence_id: str) -> bool:
            ...


logger = spdxtv.log.getLogger("validation")

SUPPORTED_VERSIONS = ((1, 0), (1, 1), (1, 2))
"""SPDX versions (major, minor) this package knows how to validate."""

DEFAULT_CHECKSUM_ALGORITHM = "SHA1"

# Length of the hexadecimal value of known checksum algorithms
CHECKSUM_LENGTHS = {
    "MD5": 32,
    "SHA1": 40,
    "SHA256": 64,
    "SHA-256": 64,
    "SHA384": 96,
    "SHA-384": 96,
    "SHA512": 128,
    "SHA-512": 128,
}

FILE_TYPES_V1 = ("BINARY", "SOURCE", "ARCHIVE", "OTHER")
FILE_TYPES_V2 = FILE_TYPES_V1 + ("AUDIO", "VIDEO", "APPLICATION", "TEXT", "IMAGE")

DOCUMENT_CREATORS = ("Tool", "Organization", "Person")
REVIEWERS = ("Person", "Organization", "Tool")
PACKAGE_CREATORS = ("Person", "Organization")

SPEC_VERSION_R = re.compile(r"^SPDX-(\d+)\.(\d+)")
SPDX_PREFIX_R = re.compile(r"spdx-?", re.I)
VERSION_R = re.compile(r"^(\d+)\.(\d+)")
HEX_R = re.compile(r"^[a-f0-9]*$")
LICENCE_REF_R = re.compile(r"^LicenseRef-[a-zA-Z0-9+.-]+$")
LICENCE_REF_OLD_R = re.compile(r"^LicenseRef-[0-9]+$")


class Severity(Enum):
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass(frozen=True)
class ValidationError:
    """A validation finding.

    :ivar str message: description of the problem
    :ivar Severity severity: ERROR makes the document invalid, WARNING does not
    :ivar Meta meta: lines of the offending value, when known
    """

    message: str
    severity: Severity
    meta: Optional[Meta] = None

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.message}"


def _v(value: Optional[ValueStr]) -> str:
    return "" if value is None else value.value


def _m(value: Optional[ValueStr]) -> Optional[Meta]:
    return None if value is None else value.meta


def correct_case_match(value: str, correct: Sequence[str]) -> tuple[bool, int]:
    """Look for value in correct.

    :return: a tuple (exact, index) where index is the position of the match
        in correct, -1 if value is not found even ignoring case, and exact
        tells whether the case matches too
    """
    for idx, item in enumerate(correct):
        if item == value:
            return True, idx
    for idx, item in enumerate(correct):
        if item.lower() == value.lower():
            return False, idx
    return False, -1


def is_licence_ref(licence_id: str) -> bool:
    return licence_id.lower().startswith("licenseref")


class Validator:
    """Validate documents or parts of documents.

    Unless a whole document is validated with :meth:`document`, set the SPDX
    version first, either with :meth:`spec_version` or by setting
    :attr:`major` and :attr:`minor`.
    """

    def __init__(self, registry: LicenceRegistry):
        """Initialize a Validator.

        :param registry: license registry used to check SPDX License List
            identifiers
        """
        self.registry = registry
        self.major = 0
        self.minor = 0
        self.licence_list_major = 0
        self.licence_list_minor = 0

        # LicenseRef- identifiers used and defined, and where
        self.used: dict[str, Optional[Meta]] = {}
        self.defined: dict[str, Optional[Meta]] = {}

        # Result of the validation of elements already seen, by id()
        self.validated: dict[int, bool] = {}
        self.files: dict[str, File] = {}
        self.errors: list[ValidationError] = []

    @property
    def used_licences(self) -> set[str]:
        """Return the LicenseRef- identifiers used so far."""
        return set(self.used)

    def add_error(self, message: str, meta: Optional[Meta] = None) -> None:
        self.errors.append(ValidationError(message, Severity.ERROR, meta))

    def add_warning(self, message: str, meta: Optional[Meta] = None) -> None:
        self.errors.append(ValidationError(message, Severity.WARNING, meta))

    def has_errors(self) -> bool:
        return any(e.severity == Severity.ERROR for e in self.errors)

    def has_warnings(self) -> bool:
        return any(e.severity == Severity.WARNING for e in self.errors)

    def single_line_error(self, value: Optional[ValueStr], prop: str) -> bool:
        if "\n" in _v(value):
            self.add_error(f"{prop} must be a single line.", _m(value))
            return False
        return True

    def single_line_warning(self, value: Optional[ValueStr], prop: str) -> bool:
        """Add a warning if value spans several lines.

        :return: False if a warning was added
        """
        if "\n" in _v(value):
            self.add_warning(f"{prop} should be a single line.", _m(value))
            return False
        return True

    def mandatory_text(
        self,
        value: Optional[ValueStr],
        prop: str,
        noassertion: bool = False,
        none: bool = False,
    ) -> bool:
        """Check that value is set.

        :param value: the value to check
        :param prop: property name used in messages
        :param noassertion: if True, NOASSERTION is accepted
        :param none: if True, NONE is accepted
        """
        text = _v(value)
        if not text:
            self.add_error(f"{prop} cannot be empty.", _m(value))
            return False
        if (not noassertion and text == NOASSERTION) or (
            not none and text == NONE_VALUE
        ):
            self.add_error(f"{prop} cannot be {text}.", _m(value))
            return False
        return True

    def date(self, value: Optional[ValueDate], prop: str = "Date") -> bool:
        if value is None or value.time is None:
            self.add_error(f"{prop}: Invalid date format.", _m(value))
            return False
        return True

    def url(
        self,
        value: Optional[ValueStr],
        prop: str,
        noassertion: bool = False,
        none: bool = False,
    ) -> bool:
        """Check that value is a URL with a scheme."""
        text = _v(value)
        if (noassertion and text == NOASSERTION) or (none and text == NONE_VALUE):
            return True
        if not text:
            self.add_error(f"{prop} cannot be empty.", _m(value))
            return False
        try:
            scheme = urlparse(text).scheme
        except ValueError:
            scheme = ""
        if not scheme:
            self.add_error(f"{prop}: Invalid URL.", _m(value))
            return False
        return True

    def spec_version(self, value: Optional[ValueStr]) -> bool:
        """Check the SPDX version and record it in major and minor.

        ``SPDX-M.m`` is valid; a warning is added for variants such as
        ``spdx-M.m`` or ``M.m``.
        """
        text = _v(value)
        m = SPEC_VERSION_R.match(text)
        if m is not None:
            self.major, self.minor = int(m.group(1)), int(m.group(2))
            return True

        m = VERSION_R.match(SPDX_PREFIX_R.sub("", text))
        if m is not None:
            self.major, self.minor = int(m.group(1)), int(m.group(2))
            self.add_warning(
                f"SpecVersion was parsed to SPDX-{self.major}.{self.minor}"
                " but it is in an invalid format.",
                _m(value),
            )
            return True

        self.add_error(
            "Invalid SpecVersion format. The rest of the validation might be"
            " incorrect or incomplete.",
            _m(value),
        )
        return False

    def version_supported(self, meta: Optional[Meta] = None) -> bool:
        if (self.major, self.minor) in SUPPORTED_VERSIONS:
            return True
        self.add_error(
            f"SPDX Specification version SPDX-{self.major}.{self.minor}"
            " is not supported.",
            meta,
        )
        return False

    def data_licence(self, value: Optional[ValueStr]) -> bool:
        text = _v(value)
        if text == DATA_LICENCE:
            return True
        if text.upper() == DATA_LICENCE.upper():
            self.add_warning(
                f"Data License should be exactly '{DATA_LICENCE}' (uppercase CC).",
                _m(value),
            )
            return True
        self.add_error(f"Invalid Data License. Must be '{DATA_LICENCE}'.", _m(value))
        return False

    def creator(
        self,
        value: Optional[ValueCreator],
        prop: str,
        kinds: Sequence[str],
        no_email: Sequence[int] = (),
        noassertion: bool = False,
        none: bool = False,
    ) -> bool:
        """Check a ``Kind: Name (email)`` value.

        :param value: the value to check
        :param prop: property name used in messages
        :param kinds: accepted kinds, compared ignoring case (a warning is
            added when only the case differs)
        :param no_email: indexes in kinds of the kinds that should not have an
            email address, a warning is added if they do
        :param noassertion: if True, NOASSERTION is accepted
        :param none: if True, NONE is accepted
        """
        text = _v(value)
        if (noassertion and text == NOASSERTION) or (none and text == NONE_VALUE):
            return True
        if not self.mandatory_text(value, prop, noassertion, none):
            return False
        assert value is not None

        kind, name, email = value.kind, value.name, value.email
        if not kind or not name:
            self.add_error(
                f'{prop} does not have the correct syntax: "kind: name (email)"',
                value.meta,
            )
            return False

        exact, idx = correct_case_match(kind, kinds)
        if idx < 0:
            self.add_error(
                f'{prop} of type "{kind}" is not valid.'
                f" Valid options: {', '.join(kinds)}",
                value.meta,
            )
            return False
        if not exact:
            self.add_warning(f'Incorrect or no capitalization in "{kind}".', value.meta)

        if idx in no_email and email:
            self.add_warning(f"{kinds[idx]} should not have e-mail addresses.", value.meta)
        return True

    def checksum(self, checksum: Checksum) -> bool:
        """Check algorithm and value of a checksum.

        Algorithms other than SHA1 get a warning; unknown algorithms and
        values that are not lowercase hexadecimal strings of the length of
        the algorithm are errors.
        """
        if id(checksum) in self.validated:
            return self.validated[id(checksum)]

        if not self.mandatory_text(
            checksum.algorithm, "Checksum Algorithm"
        ) or not self.mandatory_text(checksum.value, "Checksum Value"):
            self.validated[id(checksum)] = False
            return False

        algorithm = checksum.algorithm.value
        value = checksum.value.value
        length = CHECKSUM_LENGTHS.get(algorithm)
        result = True

        if length is None:
            self.add_error(
                f"Unknown checksum algorithm {algorithm}. Valid options:"
                f" {', '.join(CHECKSUM_LENGTHS)}",
                checksum.meta,
            )
            result = False
        else:
            if algorithm != DEFAULT_CHECKSUM_ALGORITHM:
                self.add_warning(
                    f"The checksum algorithm recommended for"
                    f" SPDX-{self.major}.{self.minor} is"
                    f" {DEFAULT_CHECKSUM_ALGORITHM} but now using {algorithm}.",
                    checksum.meta,
                )
            if len(value) != length or not HEX_R.match(value):
                self.add_error(
                    f"Checksum value for algorithm {algorithm} must be"
                    f" hexadecimal of length {length}.",
                    checksum.meta,
                )
                result = False

        self.validated[id(checksum)] = result
        return result

    def verification_code(self, code: Optional[VerificationCode]) -> bool:
        if code is None:
            self.add_error("Package Verification Code is mandatory.")
            return False
        if id(code) in self.validated:
            return self.validated[id(code)]

        result = True
        value = code.value.value
        if len(value) != 40 or not HEX_R.match(value):
            self.add_error(
                "Package Verification Code value must be exactly 40 lowercase"
                " hexadecimal digits.",
                code.meta,
            )
            result = False
        for excluded in code.excluded_files:
            result = (
                self.mandatory_text(excluded, "Package Verification Code Excluded File")
                and result
            )
        self.validated[id(code)] = result
        return result

    def use_licence(self, licence_id: str, meta: Optional[Meta]) -> None:
        self.used.setdefault(licence_id, meta)

    def define_licence(self, licence_id: str, meta: Optional[Meta]) -> None:
        """Record a licence defined by the document.

        A warning is added if it is already defined.
        """
        if licence_id in self.defined:
            at = self.defined[licence_id]
            where = f" at lines {at}" if at is not None else ""
            self.add_warning(f"Licence {licence_id} already defined{where}.", meta)
        self.defined[licence_id] = meta

    def licence_ref_id(
        self, licence_id: str, meta: Optional[Meta], prop: str
    ) -> bool:
        """Check the characters of a LicenseRef- identifier.

        Identifiers that do not follow the naming convention of the SPDX
        version only get a warning.

        :return: False if a warning was added
        """
        if self.major > 1 or (self.major == 1 and self.minor >= 2):
            pattern = LICENCE_REF_R
            valid_chars = "a-z A-Z 0-9 + - ."
        else:
            pattern = LICENCE_REF_OLD_R
            valid_chars = "0-9"
        if pattern.match(licence_id):
            return True
        self.add_warning(
            f"{prop}: Licence ID Reference has unsupported characters."
            f" Valid characters for SPDX-{self.major}.{self.minor} are: {valid_chars}",
            meta,
        )
        return False

    def any_licence(
        self,
        licence: AnyLicence,
        prop: str,
        allow_sets: bool = True,
        noassertion: bool = False,
        none: bool = False,
    ) -> bool:
        """Check a license expression.

        :param licence: the expression to check
        :param prop: property name used in messages
        :param allow_sets: if False, a warning is added for each license set;
            their members are still checked
        :param noassertion: if True, NOASSERTION is accepted
        :param none: if True, NONE is accepted
        """
        if isinstance(licence, LicenceReference):
            if (noassertion and licence.id == NOASSERTION) or (
                none and licence.id == NONE_VALUE
            ):
                return True
            if is_licence_ref(licence.id):
                self.licence_ref_id(licence.id, licence.meta, prop)
                self.use_licence(licence.id, licence.meta)
                return True
            if not self.registry.contains(licence.id):
                self.add_error(
                    f"{licence.id}: Licence Reference not in SPDX Licence List"
                    " and not a custom licence reference.",
                    licence.meta,
                )
                return False
            return True

        assert isinstance(licence, (ConjunctiveLicenceSet, DisjunctiveLicenceSet))
        if not allow_sets:
            kind = (
                "Conjunctive"
                if isinstance(licence, ConjunctiveLicenceSet)
                else "Disjunctive"
            )
            self.add_warning(
                f"{prop}: Sets are not allowed but found a {kind} Licence Set.",
                licence.meta,
            )
        result = True
        for member in licence.members:
            result = self.any_licence(member, prop) and result
        return result

    def document_creator(self, value: ValueCreator) -> bool:
        return self.creator(value, "Document Creator", DOCUMENT_CREATORS, no_email=(0,))

    def creation_info(self, doc: Document) -> bool:
        info = doc.creation_info
        valid_creators = 0
        meta = info.meta
        for creator in info.creators:
            meta = creator.meta
            if self.document_creator(creator):
                valid_creators += 1

        result = True
        if valid_creators == 0:
            self.add_error("At least one valid creator is required.", meta)
            result = False

        result = self.date(info.created, "Created") and result

        llv = info.licence_list_version
        if llv is not None and llv.value:
            m = VERSION_R.match(llv.value)
            if m is None:
                self.add_error("Invalid format for LicenseListVersion.", llv.meta)
                result = False
            else:
                self.licence_list_major = int(m.group(1))
                self.licence_list_minor = int(m.group(2))
        return result

    def package(self, package: Package) -> bool:
        if id(package) in self.validated:
            return self.validated[id(package)]

        r = self.mandatory_text(package.name, "Package Name")
        r = self.single_line_error(package.name, "Package Name") and r
        r = self.single_line_error(package.version, "Package Version") and r
        r = self.single_line_error(package.file_name, "Package File Name") and r

        if _v(package.supplier):
            r = (
                self.creator(
                    package.supplier,
                    "Package Supplier",
                    PACKAGE_CREATORS,
                    noassertion=True,
                )
                and r
            )
        if _v(package.originator):
            r = (
                self.creator(
                    package.originator,
                    "Package Originator",
                    PACKAGE_CREATORS,
                    noassertion=True,
                )
                and r
            )

        r = (
            self.url(
                package.download_location,
                "Package Download Location",
                noassertion=True,
                none=True,
            )
            and r
        )
        r = self.verification_code(package.verification_code) and r
        if package.checksum is not None:
            r = self.checksum(package.checksum) and r
        if _v(package.home_page):
            r = (
                self.url(
                    package.home_page, "Package Home Page", noassertion=True, none=True
                )
                and r
            )
        r = (
            self.mandatory_text(
                package.copyright_text,
                "Package Copyright Text",
                noassertion=True,
                none=True,
            )
            and r
        )

        for attr, prop in (
            ("licence_concluded", "Package Licence Concluded"),
            ("licence_declared", "Package Licence Declared"),
        ):
            licence = getattr(package, attr)
            if licence is None:
                self.add_error(f"{prop} cannot be empty.", package.meta)
                r = False
            else:
                r = self.any_licence(licence, prop, noassertion=True, none=True) and r

        for licence in package.licence_info_from_files:
            r = (
                self.any_licence(
                    licence,
                    "Licence Info From Files",
                    allow_sets=False,
                    noassertion=True,
                    none=True,
                )
                and r
            )

        for file in package.files:
            r = self.file(file) and r

        self.validated[id(package)] = r
        return r

    def file(self, file: File) -> bool:
        if id(file) in self.validated:
            return self.validated[id(file)]

        r = self.mandatory_text(file.name, "File Name")
        if r:
            known = self.files.get(file.name.value)
            if known is None:
                self.files[file.name.value] = file
            elif known is not file:
                where = f" at line {known.meta.line_start}" if known.meta else ""
                self.add_error(f"File already defined{where}.", file.meta)
                r = False

        # Mark the file before looking at its dependencies, which may
        # lead back to it.
        self.validated[id(file)] = r

        r = self.single_line_error(file.name, "File Name") and r

        if file.type is not None and file.type.value:
            file_types = FILE_TYPES_V2 if self.major >= 2 else FILE_TYPES_V1
            exact, idx = correct_case_match(file.type.value, file_types)
            if idx < 0:
                self.add_error(
                    f"Incorrect File Type {file.type.value}. Permitted values for"
                    f" SPDX-{self.major}.{self.minor} are: {', '.join(file_types)}.",
                    file.type.meta,
                )
                r = False
            elif not exact:
                self.add_warning(
                    f"Incorrect File Type case {file.type.value}."
                    f" Correct value is '{file_types[idx]}'.",
                    file.type.meta,
                )

        if file.checksum is None:
            self.add_error("File Checksum is mandatory.", file.meta)
            r = False
        else:
            r = self.checksum(file.checksum) and r

        if file.licence_concluded is None:
            self.add_error("File Licence Concluded cannot be empty.", file.meta)
            r = False
        else:
            r = (
                self.any_licence(
                    file.licence_concluded,
                    "File Licence Concluded",
                    noassertion=True,
                    none=True,
                )
                and r
            )
        for licence in file.licence_info_in_file:
            r = (
                self.any_licence(
                    licence,
                    "Licence Info in File",
                    allow_sets=False,
                    noassertion=True,
                    none=True,
                )
                and r
            )

        r = (
            self.mandatory_text(
                file.copyright_text,
                "File Copyright Text",
                noassertion=True,
                none=True,
            )
            and r
        )

        for dependency in file.dependencies:
            r = self.file(dependency) and r

        for contributor in file.contributors:
            r = (
                self.mandatory_text(contributor, "File Contributor")
                and self.single_line_error(contributor, "File Contributor")
                and r
            )

        for artifact in file.artifact_of:
            r = self.artifact_of(artifact) and r

        self.validated[id(file)] = r
        return r

    def artifact_of(self, artifact: ArtifactOf) -> bool:
        if id(artifact) in self.validated:
            return self.validated[id(artifact)]

        home_page = _v(artifact.home_page)
        if not (
            _v(artifact.name)
            or _v(artifact.project_uri)
            or (home_page and home_page != "UNKNOWN")
        ):
            self.add_error("Artifact is empty.", artifact.meta)
            self.validated[id(artifact)] = False
            return False

        r = True
        if artifact.project_uri is not None:
            r = self.url(artifact.project_uri, "Artifact Project URI")
        if artifact.home_page is not None and home_page != "UNKNOWN":
            r = self.url(artifact.home_page, "Artifact Home Page") and r
        self.validated[id(artifact)] = r
        return r

    def extracted_licence(self, licence: ExtractedLicence) -> bool:
        if id(licence) in self.validated:
            return self.validated[id(licence)]

        r = True
        if not is_licence_ref(licence.id.value):
            self.add_error("Not a valid licence reference format.", licence.id.meta)
            r = False
        else:
            self.licence_ref_id(
                licence.id.value, licence.id.meta, "Extracted Licence ID"
            )

        if not licence.names:
            self.add_error(
                "Licences not in the SPDX Licence List must have at least one"
                " name defined.",
                licence.meta,
            )
            r = False
        if not licence.cross_references:
            self.add_error(
                "Licences not in the SPDX Licence List must have at least one"
                " reference URI.",
                licence.meta,
            )
            r = False

        for name in licence.names:
            r = self.mandatory_text(name, "Extracted Licence Name") and r
            r = self.single_line_error(name, "Extracted Licence Name") and r
        for reference in licence.cross_references:
            r = self.url(reference, "Extracted Licence Cross Reference") and r

        self.validated[id(licence)] = r
        return r

    def review(self, review: Review) -> bool:
        if not review.reviewer.value and review.date is None:
            return True
        r = not review.reviewer.value or self.creator(
            review.reviewer, "Reviewer", REVIEWERS, no_email=(2,)
        )
        return self.date(review.date, "Review Date") and r

    def licence_references(self) -> bool:
        """Check that LicenseRef- identifiers used are defined.

        Identifiers used but not defined are errors, identifiers defined but
        not used are warnings.
        """
        r = True
        for licence_id, meta in self.used.items():
            if licence_id not in self.defined:
                self.add_error(
                    f'Licence reference "{licence_id}" used but not defined.', meta
                )
                r = False
        for licence_id, meta in self.defined.items():
            if licence_id not in self.used:
                self.add_warning(
                    f'Licence reference "{licence_id}" defined but not used.', meta
                )
        return r

    def document(self, doc: Document) -> bool:
        """Validate a whole document.

        :return: False if errors were found
        """
        if self.spec_version(doc.spec_version):
            self.version_supported(_m(doc.spec_version))
        self.data_licence(doc.data_licence)
        self.creation_info(doc)

        for package in doc.packages:
            self.package(package)

        if self.major == 1 and len(doc.packages) > 1:
            self.add_error(
                "A document cannot have more than one package in SPDX-1.x.",
                doc.packages[1].meta,
            )
        elif self.major == 1 and not doc.packages:
            self.add_error("A document must have one Package in SPDX-1.x.")

        for file in doc.files:
            self.file(file)

        for licence in doc.extracted_licences:
            self.extracted_licence(licence)
            self.define_licence(licence.licence_id, licence.id.meta)

        for review in doc.reviews:
            self.review(review)

        self.licence_references()
        return not self.has_errors()


def validate(doc: Document, registry: LicenceRegistry) -> list[ValidationError]:
    """Validate a document.

    :param doc: the document to validate, left unchanged
    :param registry: license registry used to check SPDX License List
        identifiers
    :return: the errors and warnings found, the document is valid if none of
        them is an error
    """
    validator = Validator(registry)
    validator.document(doc)
    logger.debug(
        "%d findings (%s)",
        len(validator.errors),
        "valid" if not validator.has_errors() else "invalid",
    )
    return validator.errors
