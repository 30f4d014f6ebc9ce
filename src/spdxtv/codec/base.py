from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spdxtv.model import Document


class Codec(metaclass=abc.ABCMeta):
    """Serialization of SPDX documents.

    This is subclassed by all codec drivers, registered in the ``spdxtv.codec``
    entry point namespace.
    """

    name: str = ""

    @abc.abstractmethod
    def decode(self, data: bytes) -> Document:
        """Read a document.

        :param data: the serialized document
        :raise FormatError: when data cannot be decoded
        """
        pass  # all: no cover

    @abc.abstractmethod
    def encode(self, doc: Document) -> bytes:
        """Serialize a document.

        :param doc: the document to serialize
        :raise FormatError: when the document cannot be encoded
        """
        pass  # all: no cover
