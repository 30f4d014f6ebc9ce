"""License expressions and license lists.

A license expression is either a single license identifier or a set of
expressions joined by ``and`` (all the licenses apply) or ``or`` (any of them
may be chosen). Parentheses group sub-expressions::

    (GPL-2.0 or LicenseRef-1) and MIT

Mixing ``and`` and ``or`` at the same level is not allowed, parentheses must
be used instead.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
import re

from typing import TYPE_CHECKING, ClassVar

import spdxtv.log
from spdxtv.config import ConfigSection
from spdxtv.error import (
    ConjunctionAndDisjunctionMixed,
    EmptyLicence,
    LicenceListError,
    UnbalancedParentheses,
)
from spdxtv.model import (
    ConjunctiveLicenceSet,
    DisjunctiveLicenceSet,
    LicenceReference,
)

if TYPE_CHECKING:
    from typing import Iterable, Iterator, Optional
    from spdxtv.model import AnyLicence, Meta

logger = spdxtv.log.getLogger("licence")

AND_R = re.compile(r"\s+and\s+", re.I)
OR_R = re.compile(r"\s+or\s+", re.I)
# An operator with no operand on one of its sides
DANGLING_R = re.compile(r"^(and|or)(\s|$)|\s(and|or)$", re.I)


@dataclass
class LicenceConfig(ConfigSection):
    title: ClassVar[str] = "licences"

    list_file: str = "licence-list.txt"


def find_matching_paren(text: str, start: int = 0) -> tuple[int, int]:
    """Find the first opening parenthesis and its closing one.

    :param text: the string to look into
    :param start: index from which to look for an opening parenthesis
    :return: a tuple (open, close). open is -1 if there is no opening
        parenthesis after start, close is -2 if there is no matching closing
        parenthesis.
    """
    open_idx = text.find("(", start)
    if open_idx < 0:
        return -1, -2

    depth = 0
    for idx in range(open_idx, len(text)):
        if text[idx] == "(":
            depth += 1
        elif text[idx] == ")":
            depth -= 1
            if depth == 0:
                return open_idx, idx
    return open_idx, -2


def _top_level(text: str) -> str:
    """Return text with everything between parentheses masked.

    The result has the same length as text so that positions found in it
    are valid in text.
    """
    depth = 0
    result = []
    for c in text:
        if c == "(":
            depth += 1
            result.append("_")
        elif c == ")":
            depth -= 1
            result.append("_")
        else:
            result.append(c if depth == 0 else "_")
    return "".join(result)


def _is_balanced(text: str) -> bool:
    depth = 0
    for c in text:
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def _split(text: str, separators: list[re.Match]) -> Iterator[str]:
    start = 0
    for sep in separators:
        yield text[start : sep.start()]
        start = sep.end()
    yield text[start:]


def parse_expression(text: str, meta: Optional[Meta] = None) -> AnyLicence:
    """Parse a license expression.

    :param text: the expression
    :param meta: lines the expression was read from, set on every node of
        the result and on raised errors
    :return: a LicenceReference, or a ConjunctiveLicenceSet or
        DisjunctiveLicenceSet holding the parsed members
    :raise EmptyLicence: when the expression or one of its groups is empty
        or when an operator lacks an operand
    :raise UnbalancedParentheses: when parentheses do not match
    :raise ConjunctionAndDisjunctionMixed: when ``and`` and ``or`` are used
        at the same level
    """
    text = text.strip()
    if not text:
        raise EmptyLicence(meta=meta)

    if text.count("(") != text.count(")") or not _is_balanced(text):
        raise UnbalancedParentheses(meta=meta)

    open_idx, close_idx = find_matching_paren(text)
    if open_idx == 0 and close_idx == len(text) - 1:
        return parse_expression(text[1:-1], meta)

    masked = _top_level(text)
    conjunctions = list(AND_R.finditer(masked))
    disjunctions = list(OR_R.finditer(masked))

    if conjunctions and disjunctions:
        raise ConjunctionAndDisjunctionMixed(meta=meta)
    elif conjunctions:
        return ConjunctiveLicenceSet(
            [parse_expression(part, meta) for part in _split(text, conjunctions)],
            meta=meta,
        )
    elif disjunctions:
        return DisjunctiveLicenceSet(
            [parse_expression(part, meta) for part in _split(text, disjunctions)],
            meta=meta,
        )
    if DANGLING_R.search(text):
        raise EmptyLicence(meta=meta)
    return LicenceReference(text, meta=meta)


class LicenceList:
    """Registry of the license identifiers of the SPDX License List.

    Lookups are case sensitive.
    """

    def __init__(self, ids: Iterable[str] = ()):
        """Initialize a LicenceList.

        :param ids: license identifiers, surrounding whitespace and empty
            entries are ignored
        """
        self.ids = {lic.strip() for lic in ids if lic.strip()}

    def contains(self, licence_id: str) -> bool:
        return licence_id in self.ids

    def __contains__(self, licence_id: object) -> bool:
        return licence_id in self.ids

    def __len__(self) -> int:
        return len(self.ids)

    @classmethod
    def from_file(cls, filename: str) -> LicenceList:
        """Load a license list file, one identifier per line.

        :param filename: path to the list
        :raise LicenceListError: when the file cannot be read
        """
        try:
            with open(filename) as f:
                result = cls(f)
        except OSError as err:
            raise LicenceListError(
                f"cannot read licence list {filename}: {err}", origin="LicenceList"
            ) from err
        logger.debug("loaded %d licences from %s", len(result), filename)
        return result

    @classmethod
    def from_config(cls, filename: Optional[str] = None) -> LicenceList:
        """Load the license list set in the configuration.

        :param filename: use this file instead of the configured one
        """
        if filename is None:
            filename = LicenceConfig.load().list_file
        return cls.from_file(os.path.expanduser(filename))
