"""Read and write SPDX documents in the supported formats.

Formats are provided by codec drivers registered in the ``spdxtv.codec``
entry point namespace:

- ``tag``: the tag-value format
- ``json`` and ``yaml``: the document as a dictionary
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import stevedore
from stevedore.exception import NoMatches

import spdxtv.log
from spdxtv.error import FormatError

if TYPE_CHECKING:
    from spdxtv.codec.base import Codec
    from spdxtv.model import Document

logger = spdxtv.log.getLogger("codec")

# File extensions and the format they are written in
EXTENSIONS = {
    ".spdx": "tag",
    ".tag": "tag",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def load_codec(format_name: str) -> Codec:
    """Return the codec driver for a format.

    :param format_name: name of the format, e.g. "tag"
    :raise FormatError: if no codec is registered under that name
    """
    try:
        plugin = stevedore.DriverManager("spdxtv.codec", format_name)
    except NoMatches as err:
        raise FormatError(
            f"unknown format {format_name}", origin="load_codec"
        ) from err
    return plugin.driver()


def format_from_filename(filename: str, default: str = "tag") -> str:
    """Guess the format of a file from its extension."""
    return EXTENSIONS.get(os.path.splitext(filename)[1].lower(), default)


def decode(data: bytes, format_name: str) -> Document:
    """Read a document.

    :param data: the serialized document
    :param format_name: name of the format data is written in
    :raise FormatError: on unknown format or undecodable data
    """
    logger.debug("decoding %d bytes as %s", len(data), format_name)
    return load_codec(format_name).decode(data)


def encode(doc: Document, format_name: str) -> bytes:
    """Serialize a document.

    :param doc: the document to serialize
    :param format_name: name of the target format
    :raise FormatError: on unknown format
    """
    logger.debug("encoding document as %s", format_name)
    return load_codec(format_name).encode(doc)
