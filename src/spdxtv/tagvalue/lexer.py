"""Split tag-value text into tokens.

A tag-value document is a sequence of ``Key: value`` lines. A value can span
several lines when written between ``<text>`` and ``</text>``. Lines whose
first non-blank character is ``#`` are comments.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import io

from typing import TYPE_CHECKING

import spdxtv.log
from spdxtv.error import InvalidPrefix, InvalidSuffix, InvalidText, NoCloseTag
from spdxtv.model import Meta
from spdxtv.tagvalue.properties import canonical_property

if TYPE_CHECKING:
    from typing import Iterator, Optional, TextIO, Union

    Token = Union["Comment", "Pair"]

logger = spdxtv.log.getLogger("tagvalue.lexer")

OPEN_TAG = "<text>"
CLOSE_TAG = "</text>"
PROPERTY_SEP = ":"


@dataclass(frozen=True)
class Comment:
    """A comment line, value is the text following the ``#``."""

    value: str
    meta: Optional[Meta] = field(default=None, compare=False)


@dataclass(frozen=True)
class Pair:
    """A property and its value."""

    key: str
    value: str
    meta: Optional[Meta] = field(default=None, compare=False)


def lex(
    source: str | TextIO,
    ignore_comments: bool = False,
    ignore_meta: bool = False,
    case_sensitive: bool = False,
) -> Iterator[Token]:
    """Lex a tag-value document.

    Tokens are produced lazily, reading the source as they are requested.

    :param source: the document text or a text stream
    :param ignore_comments: do not produce Comment tokens
    :param ignore_meta: do not set line information on tokens
    :param case_sensitive: if False, known property names are converted to
        their usual case (e.g. ``specversion`` to ``SpecVersion``)
    :raise InvalidText: on a line that is neither a comment nor a property
    :raise InvalidPrefix: on text between the ``:`` and ``<text>``
    :raise InvalidSuffix: on text after ``</text>`` on the same line
    :raise NoCloseTag: when ``<text>`` is never closed
    """
    if isinstance(source, str):
        source = io.StringIO(source)

    def meta(start: int, end: int) -> Optional[Meta]:
        return None if ignore_meta else Meta(start, end)

    lines = iter(source)
    line_no = 0
    count = 0

    for line in lines:
        line_no += 1
        content = line.strip()
        if not content:
            continue

        if content.startswith("#"):
            if not ignore_comments:
                count += 1
                yield Comment(line.lstrip()[1:].rstrip("\r\n"), meta(line_no, line_no))
            continue

        if PROPERTY_SEP not in line:
            raise InvalidText(meta=Meta(line_no, line_no))

        key, value = line.split(PROPERTY_SEP, 1)
        key = key.strip()
        if not case_sensitive:
            key = canonical_property(key)

        start_text = value.find(OPEN_TAG)
        if start_text < 0:
            count += 1
            yield Pair(key, value.strip(), meta(line_no, line_no))
            continue

        if value[:start_text].strip():
            raise InvalidPrefix(meta=Meta(line_no, line_no))

        start_line = line_no
        text = value[start_text + len(OPEN_TAG) :]
        while CLOSE_TAG not in text:
            next_line = next(lines, None)
            if next_line is None:
                end_line = line_no + 1 if text.endswith("\n") else line_no
                raise NoCloseTag(meta=Meta(end_line, end_line))
            line_no += 1
            text += next_line

        end_text = text.index(CLOSE_TAG)
        if text[end_text + len(CLOSE_TAG) :].strip():
            raise InvalidSuffix(meta=Meta(line_no, line_no))

        count += 1
        yield Pair(key, text[:end_text].strip(), meta(start_line, line_no))

    logger.debug("%d tokens read from %d lines", count, line_no)
