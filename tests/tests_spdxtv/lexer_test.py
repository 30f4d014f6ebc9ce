import io

from spdxtv.error import InvalidPrefix, InvalidSuffix, InvalidText, NoCloseTag
from spdxtv.model import Meta
from spdxtv.tagvalue import Comment, Pair, lex

import pytest


def test_lex_pairs():
    tokens = list(lex("Property1: value1\nProperty2:  value2  \n"))
    assert tokens == [Pair("Property1", "value1"), Pair("Property2", "value2")]
    assert [t.meta for t in tokens] == [Meta(1, 1), Meta(2, 2)]


def test_lex_comments():
    tokens = list(lex("#comment1\n\n   # comment2\nKey: value # not a comment\n"))
    assert tokens == [
        Comment("comment1"),
        Comment(" comment2"),
        Pair("Key", "value # not a comment"),
    ]
    assert tokens[1].meta == Meta(3, 3)

    tokens = list(lex("#comment1\nKey: value\n", ignore_comments=True))
    assert tokens == [Pair("Key", "value")]


def test_lex_value_starting_with_hash():
    assert list(lex("someKey:#someValue")) == [Pair("someKey", "#someValue")]


def test_lex_value_with_colon():
    assert list(lex("Creator: Tool: spdxtv")) == [Pair("Creator", "Tool: spdxtv")]


def test_lex_multiline():
    tokens = list(
        lex("Property: <text>line1\nline2\n  line3</text>  \nNext: value\n")
    )
    assert tokens == [
        Pair("Property", "line1\nline2\n  line3"),
        Pair("Next", "value"),
    ]
    assert tokens[0].meta == Meta(1, 3)
    assert tokens[1].meta == Meta(4, 4)


def test_lex_multiline_on_one_line():
    tokens = list(lex("Property:   <text> value </text>"))
    assert tokens == [Pair("Property", "value")]
    assert tokens[0].meta == Meta(1, 1)


def test_lex_stream():
    tokens = list(lex(io.StringIO("A: 1\nB: <text>2\n3</text>\n")))
    assert tokens == [Pair("A", "1"), Pair("B", "2\n3")]


def test_lex_invalid_text():
    with pytest.raises(InvalidText) as err:
        list(lex("Key: value\nno separator here\n"))
    assert err.value.meta == Meta(2, 2)


def test_lex_invalid_prefix():
    with pytest.raises(InvalidPrefix) as err:
        list(lex("Key: prefix <text>value</text>"))
    assert err.value.meta == Meta(1, 1)


def test_lex_invalid_suffix():
    with pytest.raises(InvalidSuffix) as err:
        list(lex("Key: <text>value\nmore</text> suffix\n"))
    assert err.value.meta == Meta(2, 2)


def test_lex_no_close_tag():
    with pytest.raises(NoCloseTag) as err:
        list(lex("Key: <text>value\nline2\nline3\n"))
    assert err.value.meta == Meta(4, 4)

    with pytest.raises(NoCloseTag) as err:
        list(lex("Key: <text>value\nline2"))
    assert err.value.meta == Meta(2, 2)


def test_lex_is_lazy():
    tokens = lex("Good: 1\ngarbage\n")
    assert next(tokens) == Pair("Good", "1")
    with pytest.raises(InvalidText):
        next(tokens)


def test_lex_case():
    assert list(lex("specversion: SPDX-1.2\nPACKAGENAME: p\nMyKey: x")) == [
        Pair("SpecVersion", "SPDX-1.2"),
        Pair("PackageName", "p"),
        Pair("MyKey", "x"),
    ]
    assert list(lex("specversion: SPDX-1.2", case_sensitive=True)) == [
        Pair("specversion", "SPDX-1.2")
    ]


def test_lex_ignore_meta():
    tokens = list(lex("# c\nKey: value", ignore_meta=True))
    assert [t.meta for t in tokens] == [None, None]


def test_lex_empty_value():
    assert list(lex("FileName:\nKey:   \n")) == [Pair("FileName", ""), Pair("Key", "")]
