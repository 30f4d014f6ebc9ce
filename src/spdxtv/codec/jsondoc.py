"""JSON and YAML renditions of SPDX documents.

Both formats hold the dictionary returned by
:meth:`spdxtv.model.Document.to_json_dict`.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import yaml

from spdxtv.codec.base import Codec
from spdxtv.error import FormatError, LicenceExpressionError
from spdxtv.model import Document

try:
    from yaml import CSafeDumper as SafeDumper, CSafeLoader as SafeLoader
except ImportError:  # defensive code
    from yaml import SafeDumper, SafeLoader  # type: ignore

if TYPE_CHECKING:
    from typing import Any


class DictCodec(Codec):
    """Base class of formats holding a document dictionary."""

    def load(self, data: bytes) -> Any:
        raise NotImplementedError  # all: no cover

    def dump(self, obj: dict[str, Any]) -> bytes:
        raise NotImplementedError  # all: no cover

    def decode(self, data: bytes) -> Document:
        origin = f"{type(self).__name__}.decode"
        obj = self.load(data)
        if not isinstance(obj, dict):
            raise FormatError(
                f"expecting a {self.name} object, got {type(obj).__name__}", origin
            )
        try:
            return Document.from_json_dict(obj)
        except LicenceExpressionError as err:
            raise FormatError(f"invalid licence expression: {err}", origin) from err
        except (AttributeError, TypeError, ValueError) as err:
            raise FormatError(f"malformed {self.name} document: {err}", origin) from err

    def encode(self, doc: Document) -> bytes:
        return self.dump(doc.to_json_dict())


class JSONCodec(DictCodec):
    name = "json"

    def load(self, data: bytes) -> Any:
        try:
            return json.loads(data)
        except ValueError as err:
            raise FormatError(f"invalid JSON: {err}", "JSONCodec.decode") from err

    def dump(self, obj: dict[str, Any]) -> bytes:
        return (json.dumps(obj, indent=2) + "\n").encode("utf-8")


class YAMLCodec(DictCodec):
    name = "yaml"

    def load(self, data: bytes) -> Any:
        try:
            return yaml.load(data, Loader=SafeLoader)
        except yaml.YAMLError as err:
            raise FormatError(f"invalid YAML: {err}", "YAMLCodec.decode") from err

    def dump(self, obj: dict[str, Any]) -> bytes:
        return yaml.dump(
            obj,
            Dumper=SafeDumper,
            sort_keys=False,
            allow_unicode=True,
            encoding="utf-8",
        )
