from __future__ import annotations

from typing import TYPE_CHECKING

from spdxtv.codec.base import Codec
from spdxtv.error import FormatError
from spdxtv.tagvalue import build_from_text, dumps

if TYPE_CHECKING:
    from spdxtv.model import Document


class TagValueCodec(Codec):
    """The tag-value format.

    Parse errors are not converted to FormatError as they already tell
    which lines are wrong.
    """

    name = "tag"
    encoding = "utf-8"

    def decode(self, data: bytes) -> Document:
        try:
            text = data.decode(self.encoding)
        except UnicodeDecodeError as err:
            raise FormatError(
                f"tag-value documents must be {self.encoding} encoded: {err}",
                origin="TagValueCodec.decode",
            ) from err
        return build_from_text(text)

    def encode(self, doc: Document) -> bytes:
        return dumps(doc).encode(self.encoding)
