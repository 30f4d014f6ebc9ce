from spdxtv.error import (
    ConjunctionAndDisjunctionMixed,
    EmptyLicence,
    LicenceListError,
    UnbalancedParentheses,
)
from spdxtv.licence import LicenceList, find_matching_paren, parse_expression
from spdxtv.model import (
    ConjunctiveLicenceSet,
    DisjunctiveLicenceSet,
    LicenceReference,
    Meta,
)

import pytest


def test_find_matching_paren():
    assert find_matching_paren("abc") == (-1, -2)
    assert find_matching_paren("a (b (c)) d") == (2, 8)
    assert find_matching_paren("a (b") == (2, -2)
    assert find_matching_paren("(a) (b)", 1) == (4, 6)


def test_parse_single_licence():
    assert parse_expression("  MIT ") == LicenceReference("MIT")
    assert parse_expression("((MIT))") == LicenceReference("MIT")


def test_parse_disjunction():
    assert parse_expression("(GPLv3 or LicenseRef-1)") == DisjunctiveLicenceSet(
        [LicenceReference("GPLv3"), LicenceReference("LicenseRef-1")]
    )
    # Sets do not need parentheses, operators are case insensitive
    assert parse_expression("a OR b Or c") == DisjunctiveLicenceSet(
        [LicenceReference("a"), LicenceReference("b"), LicenceReference("c")]
    )


def test_parse_nested():
    licence = parse_expression("(a and b) or c")
    assert licence == DisjunctiveLicenceSet(
        [
            ConjunctiveLicenceSet([LicenceReference("a"), LicenceReference("b")]),
            LicenceReference("c"),
        ]
    )
    assert licence.licence_id == "((a and b) or c)"

    licence = parse_expression("a AND (b or (c and d))")
    assert licence.licence_id == "(a and (b or (c and d)))"
    assert parse_expression(licence.licence_id) == licence


def test_parse_errors():
    with pytest.raises(EmptyLicence):
        parse_expression("   ")
    with pytest.raises(EmptyLicence):
        parse_expression("()")
    with pytest.raises(UnbalancedParentheses):
        parse_expression("(()")
    with pytest.raises(UnbalancedParentheses):
        parse_expression("a) and (b")
    with pytest.raises(ConjunctionAndDisjunctionMixed):
        parse_expression("a and b or c")
    with pytest.raises(ConjunctionAndDisjunctionMixed):
        parse_expression("x or (a and b or c)")


def test_parse_missing_operand():
    for text in ("a and  and b", "a and b and", "or a", "a OR", "and", "(a) and"):
        with pytest.raises(EmptyLicence):
            parse_expression(text)

    with pytest.raises(EmptyLicence) as err:
        parse_expression("MIT or (a and )", Meta(4, 4))
    assert err.value.meta == Meta(4, 4)

    # Operator words inside an identifier are not operators
    assert parse_expression("Oracle-1.0") == LicenceReference("Oracle-1.0")
    assert parse_expression("Sandia") == LicenceReference("Sandia")


def test_parse_meta():
    meta = Meta(3, 4)
    licence = parse_expression("a or (b and c)", meta)
    assert licence.meta == meta
    assert licence.members[0].meta == meta
    assert licence.members[1].members[1].meta == meta

    with pytest.raises(ConjunctionAndDisjunctionMixed) as err:
        parse_expression("a and b or c", meta)
    assert err.value.meta == meta
    assert str(err.value).endswith("(line 3-4)")


def test_licence_reference():
    assert LicenceReference("LicenseRef-1").is_reference()
    assert LicenceReference("licenseref-foo").is_reference()
    assert not LicenceReference("MIT").is_reference()


def test_licence_list():
    with open("licences.txt", "w") as f:
        f.write("MIT\n\n  Apache-2.0  \nGPL-2.0\n")

    registry = LicenceList.from_file("licences.txt")
    assert len(registry) == 3
    assert registry.contains("Apache-2.0")
    assert "MIT" in registry
    assert not registry.contains("mit")
    assert not registry.contains("")

    with pytest.raises(LicenceListError) as err:
        LicenceList.from_file("missing.txt")
    assert "missing.txt" in str(err.value)


def test_licence_list_from_config():
    with open("licence-list.txt", "w") as f:
        f.write("MIT\n")
    assert LicenceList.from_config().contains("MIT")

    with open("other.txt", "w") as f:
        f.write("BSD-3-Clause\n")
    assert not LicenceList.from_config("other.txt").contains("MIT")
