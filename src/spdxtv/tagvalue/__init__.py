"""Read and write SPDX documents in the tag-value format.

Reading is done in two steps: :func:`lex` splits the text into tokens and
:func:`build` maps them onto a :class:`spdxtv.model.Document`.
:func:`build_from_text` does both using the configured lexer options.
"""

from __future__ import annotations

from dataclasses import dataclass

from typing import TYPE_CHECKING, ClassVar

from spdxtv.config import ConfigSection
from spdxtv.tagvalue.builder import Builder, build
from spdxtv.tagvalue.lexer import Comment, Pair, lex
from spdxtv.tagvalue.writer import Formatter, dumps, write

if TYPE_CHECKING:
    from typing import Optional, TextIO
    from spdxtv.model import Document

__all__ = [
    "Builder",
    "Comment",
    "Formatter",
    "Pair",
    "TagValueConfig",
    "build",
    "build_from_text",
    "dumps",
    "lex",
    "write",
]


@dataclass
class TagValueConfig(ConfigSection):
    title: ClassVar[str] = "tagvalue"

    case_sensitive: bool = False
    ignore_meta: bool = False


def build_from_text(
    source: str | TextIO, config: Optional[TagValueConfig] = None
) -> Document:
    """Read a tag-value document.

    :param source: the document text or a text stream
    :param config: lexer options, loaded from the configuration by default
    :raise ParseError: when the document cannot be read
    """
    if config is None:
        config = TagValueConfig.load()
    return build(
        lex(
            source,
            ignore_comments=True,
            ignore_meta=config.ignore_meta,
            case_sensitive=config.case_sensitive,
        )
    )
