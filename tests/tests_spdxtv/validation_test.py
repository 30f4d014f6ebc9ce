import copy

from spdxtv.model import (
    Checksum,
    ConjunctiveLicenceSet,
    LicenceReference,
    Meta,
    ValueCreator,
    ValueDate,
    ValueStr,
    VerificationCode,
)
from spdxtv.licence import parse_expression
from spdxtv.tagvalue import build_from_text
from spdxtv.validation import (
    Severity,
    ValidationError,
    Validator,
    correct_case_match,
    validate,
)


def severities(validator):
    return [e.severity for e in validator.errors]


def spdx1(registry, minor=2):
    validator = Validator(registry)
    validator.major, validator.minor = 1, minor
    return validator


def test_validate_valid_document(registry, valid_text):
    doc = build_from_text(valid_text)
    expected = copy.deepcopy(doc)
    assert validate(doc, registry) == []
    assert doc == expected


def test_validate_undefined_licence(registry, valid_text):
    doc = build_from_text(
        valid_text.replace("LicenseInfoInFile: MIT", "LicenseInfoInFile: LicenseRef-9")
    )
    findings = validate(doc, registry)
    assert len(findings) == 1
    assert findings[0].severity == Severity.ERROR
    assert "LicenseRef-9" in findings[0].message
    assert findings[0].meta == Meta(28, 28)


def test_validate_unused_licence(registry, valid_text):
    text = valid_text + (
        "\nLicenseID: LicenseRef-2\n"
        "LicenseName: Two\n"
        "LicenseCrossReference: http://example.com/two\n"
    )
    findings = validate(build_from_text(text), registry)
    assert [str(f) for f in findings] == [
        'WARNING: Licence reference "LicenseRef-2" defined but not used.'
    ]

    text = valid_text + "\nLicenseID: LicenseRef-1\nLicenseName: Again\n"
    findings = validate(build_from_text(text), registry)
    assert [f.severity for f in findings] == [Severity.ERROR, Severity.WARNING]
    assert "reference URI" in findings[0].message
    assert "already defined" in findings[1].message


def test_validate_sample(registry, translator_text):
    findings = validate(build_from_text(translator_text), registry)
    errors = [f for f in findings if f.severity == Severity.ERROR]
    # Apache-1.0 is used twice but is not in the registry, LicenseRef-1 to 4
    # are not defined
    assert len(errors) == 6
    assert sum(1 for e in errors if e.message.startswith("Apache-1.0")) == 2
    assert sum(1 for e in errors if "used but not defined" in e.message) == 4


def test_spdx1_packages(registry, valid_text):
    findings = validate(build_from_text(valid_text + "\nPackageName: other\n"), registry)
    assert any("more than one package" in f.message for f in findings)

    findings = validate(build_from_text("SPDXVersion: SPDX-1.2\n"), registry)
    assert any("must have one Package" in f.message for f in findings)


def test_spec_version(registry):
    validator = Validator(registry)
    assert validator.spec_version(ValueStr("SPDX-1.2"))
    assert (validator.major, validator.minor) == (1, 2)
    assert validator.errors == []

    for variant in ("spdx-1.2", "1.2", "SPDX1.2"):
        validator = Validator(registry)
        assert validator.spec_version(ValueStr(variant))
        assert (validator.major, validator.minor) == (1, 2)
        assert severities(validator) == [Severity.WARNING]

    validator = Validator(registry)
    assert not validator.spec_version(ValueStr("spdx-1"))
    assert severities(validator) == [Severity.ERROR]

    validator = Validator(registry)
    validator.spec_version(ValueStr("SPDX-2.0"))
    assert not validator.version_supported()
    assert "not supported" in validator.errors[0].message


def test_data_licence(registry):
    validator = Validator(registry)
    assert validator.data_licence(ValueStr("CC0-1.0"))
    assert validator.data_licence(ValueStr("cc0-1.0"))
    assert severities(validator) == [Severity.WARNING]
    assert not validator.data_licence(ValueStr("MIT"))
    assert not validator.data_licence(None)
    assert severities(validator) == [Severity.WARNING, Severity.ERROR, Severity.ERROR]


def test_checksum(registry):
    def check(algorithm, value):
        validator = spdx1(registry)
        result = validator.checksum(Checksum(ValueStr(algorithm), ValueStr(value)))
        return result, severities(validator)

    sha1 = "2fd4e1c67a2d28fced849ee1bb76e7391b93eb12"
    assert check("SHA1", sha1) == (True, [])
    assert check("SHA1", sha1[:-1]) == (False, [Severity.ERROR])
    assert check("SHA1", sha1.upper()) == (False, [Severity.ERROR])
    assert check("MD5", "d41d8cd98f00b204e9800998ecf8427e") == (
        True,
        [Severity.WARNING],
    )
    assert check("CRC32", "abcd") == (False, [Severity.ERROR])
    assert check("SHA1", "") == (False, [Severity.ERROR])


def test_checksum_checked_once(registry):
    validator = spdx1(registry)
    checksum = Checksum(ValueStr("MD5"), ValueStr("abc"))
    assert not validator.checksum(checksum)
    assert not validator.checksum(checksum)
    assert severities(validator) == [Severity.WARNING, Severity.ERROR]


def test_verification_code(registry):
    validator = spdx1(registry)
    assert validator.verification_code(
        VerificationCode(ValueStr("d6a770ba38583ed4bb4525bd96e50461655d2758"))
    )
    assert not validator.verification_code(VerificationCode(ValueStr("d6a770ba")))
    assert not validator.verification_code(None)
    assert severities(validator) == [Severity.ERROR, Severity.ERROR]


def test_creators(registry):
    def check(value):
        validator = spdx1(registry)
        result = validator.document_creator(ValueCreator(value))
        return result, severities(validator)

    assert check("Person: Jane Doe (jane@example.com)") == (True, [])
    assert check("Organization: ACME") == (True, [])
    assert check("Tool: spdxtv (spdxtv@example.com)") == (True, [Severity.WARNING])
    assert check("tool: spdxtv") == (True, [Severity.WARNING])
    assert check("Robot: R2D2") == (False, [Severity.ERROR])
    assert check("Person:") == (False, [Severity.ERROR])
    assert check("Jane Doe") == (False, [Severity.ERROR])
    assert check("") == (False, [Severity.ERROR])


def test_package_creators(registry):
    validator = spdx1(registry)
    assert not validator.creator(
        ValueCreator("Tool: foo"), "Package Supplier", ("Person", "Organization")
    )
    assert validator.creator(
        ValueCreator("NOASSERTION"),
        "Package Supplier",
        ("Person", "Organization"),
        noassertion=True,
    )
    assert severities(validator) == [Severity.ERROR]


def test_dates(registry):
    validator = spdx1(registry)
    assert validator.date(ValueDate("2014-01-29T18:30:22Z"))
    assert not validator.date(ValueDate("2014-01-29 18:30:22"))
    assert not validator.date(None)
    assert severities(validator) == [Severity.ERROR, Severity.ERROR]


def test_any_licence(registry):
    validator = spdx1(registry)
    assert validator.any_licence(parse_expression("(MIT or Apache-2.0)"), "p")
    assert validator.any_licence(LicenceReference("NOASSERTION"), "p", noassertion=True)
    assert not validator.any_licence(LicenceReference("NOASSERTION"), "p")
    assert not validator.any_licence(LicenceReference("mit"), "p")
    assert severities(validator) == [Severity.ERROR, Severity.ERROR]


def test_licence_sets_not_allowed(registry):
    validator = spdx1(registry)
    licence = ConjunctiveLicenceSet(
        [LicenceReference("Unknown-1"), LicenceReference("LicenseRef-5")]
    )
    assert not validator.any_licence(licence, "Licence Info in File", allow_sets=False)
    assert severities(validator) == [Severity.WARNING, Severity.ERROR]
    assert "Conjunctive" in validator.errors[0].message
    assert validator.used_licences == {"LicenseRef-5"}


def test_licence_ref_id(registry):
    validator = spdx1(registry, minor=1)
    assert validator.licence_ref_id("LicenseRef-12", None, "p")
    assert not validator.licence_ref_id("LicenseRef-abc", None, "p")
    assert severities(validator) == [Severity.WARNING]

    validator = spdx1(registry, minor=2)
    assert validator.licence_ref_id("LicenseRef-abc.1+", None, "p")
    assert not validator.licence_ref_id("LicenseRef-a_b", None, "p")
    assert severities(validator) == [Severity.WARNING]


def test_file_types(registry, valid_text):
    def findings_for(file_type, version="SPDX-1.2"):
        text = valid_text.replace("FileType: SOURCE\nFileChecksum: SHA1: 0", (
            f"FileType: {file_type}\nFileChecksum: SHA1: 0"
        )).replace("SPDXVersion: SPDX-1.2", f"SPDXVersion: {version}")
        return [
            (f.severity, f.meta) for f in validate(build_from_text(text), registry)
        ]

    assert findings_for("BINARY") == []
    assert findings_for("binary") == [(Severity.WARNING, Meta(33, 33))]
    assert findings_for("TEXT") == [(Severity.ERROR, Meta(33, 33))]


def test_file_defined_twice(registry):
    validator = spdx1(registry)
    doc = build_from_text("FileName: a\nFileName: b\n")
    doc.files[1].name = ValueStr("a")
    validator.file(doc.files[0])
    validator.file(doc.files[1])
    assert any("File already defined at line 1" in e.message for e in validator.errors)


def test_file_dependency_cycle(registry):
    doc = build_from_text(
        "FileName: a\nFileDependency: b\nFileName: b\nFileDependency: a\n"
    )
    validator = spdx1(registry)
    assert not validator.file(doc.files[0])
    # Each file is checked once: a and b both lack a checksum, a licence
    # and a copyright
    assert len(validator.errors) == 6


def test_artifact(registry, valid_text):
    doc = build_from_text(valid_text)
    artifact = doc.files[1].artifact_of[0]

    validator = spdx1(registry)
    assert validator.artifact_of(artifact)

    artifact.project_uri = ValueStr("not a url")
    validator = spdx1(registry)
    assert not validator.artifact_of(artifact)
    assert "Invalid URL" in validator.errors[0].message


def test_multiline_values(registry):
    validator = spdx1(registry)
    assert not validator.single_line_error(ValueStr("a\nb"), "Package Name")
    assert validator.single_line_warning(ValueStr("a"), "Package Summary")
    assert not validator.single_line_warning(ValueStr("a\nb"), "Package Summary")
    assert severities(validator) == [Severity.ERROR, Severity.WARNING]


def test_correct_case_match():
    assert correct_case_match("SOURCE", ("BINARY", "SOURCE")) == (True, 1)
    assert correct_case_match("source", ("BINARY", "SOURCE")) == (False, 1)
    assert correct_case_match("OTHER", ("BINARY", "SOURCE")) == (False, -1)


def test_validation_error():
    err = ValidationError("oops", Severity.ERROR, Meta(2, 3))
    assert str(err) == "ERROR: oops"
    assert err.meta == Meta(2, 3)
