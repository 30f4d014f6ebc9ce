from spdxtv.error import (
    InvalidText,
    ParseError,
    PropertyNotRecognized,
    SPDXError,
)
from spdxtv.model import Meta


def test_spdxerror():
    err = None

    try:
        raise SPDXError(None)
    except SPDXError as basicerr:
        assert str(basicerr) == "SPDXError"

    try:
        raise SPDXError(None, origin="here")
    except SPDXError as err0:
        err = err0
        assert str(err).strip() == "here: SPDXError"

    try:
        raise SPDXError("one", origin="here")
    except SPDXError as err1:
        err += err1

    try:
        raise SPDXError(["two"])
    except SPDXError as err2:
        err += err2
    assert str(err).strip() == "here: two"

    assert err.messages == ["one", "two"]

    err += "three"
    assert err.messages == ["one", "two", "three"]


def test_parse_error():
    assert str(ParseError()) == "Parse error."
    err = InvalidText(meta=Meta(4, 4))
    assert isinstance(err, ParseError)
    assert str(err) == "Some invalid formatted string found. (line 4)"
    assert str(InvalidText("custom", Meta(1, 2))) == "custom (line 1-2)"

    err = PropertyNotRecognized("FileType", Meta(3, 3))
    assert err.key == "FileType"
    assert str(err).endswith("to be defined before it: FileType (line 3)")


def test_parse_error_origin():
    assert str(InvalidText("msg", Meta(2, 2), origin="lex")) == "lex: msg (line 2)"
    assert str(InvalidText("msg", origin="lex")) == "lex: msg"
