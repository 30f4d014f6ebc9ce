from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import List, Optional
    from spdxtv.model import Meta


class SPDXError(Exception):
    """Exception raised by functions defined in spdxtv."""

    def __init__(self, message: str | List[str], origin: Optional[str] = None):
        """Initialize an SPDXError.

        SPDXError can store several messages and thus be used to propagate them.

        :param message: the exception message
        :param origin: the name of the function, class, or module having raised
            the exception
        """
        super().__init__(message, origin)
        self.origin = origin
        self.messages = []
        if message is not None:
            if isinstance(message, str):
                self.messages.append(message)
            else:
                self.messages.extend(message)

    def __iadd__(self, other: str | List[str] | SPDXError) -> SPDXError:
        """Add messages to the current instance.

        :param other: a message or an SPDXError instance
        """
        if isinstance(other, SPDXError):
            self.messages.extend(other.messages)
        elif isinstance(other, str):
            self.messages.append(other)
        else:
            self.messages.extend(other)
        return self

    def __str__(self) -> str:
        if self.messages:
            error_msg = self.messages[-1]
        else:
            error_msg = self.__class__.__name__
        if self.origin:
            return f"{self.origin}: {error_msg}\n"
        else:
            return error_msg


class ParseError(SPDXError):
    """Error aborting the parse of a tag-value document.

    Each subclass comes with a default message so that raising sites only
    have to give the line range.
    """

    default_message = "Parse error."

    def __init__(
        self,
        message: Optional[str] = None,
        meta: Optional[Meta] = None,
        origin: Optional[str] = None,
    ):
        super().__init__(message or self.default_message, origin)
        self.meta = meta

    def __str__(self) -> str:
        msg = super().__str__().rstrip("\n")
        if self.meta is None:
            return msg
        return f"{msg} (line {self.meta})"


class LexError(ParseError):
    """Text that cannot be split into tag-value tokens."""


class InvalidText(LexError):
    default_message = "Some invalid formatted string found."


class InvalidPrefix(LexError):
    default_message = "No text is allowed between : and <text>."


class InvalidSuffix(LexError):
    default_message = "No text is allowed after close text tag (</text>)."


class NoCloseTag(LexError):
    default_message = "Text tag opened but not closed. Missing a </text>?"


class BuildError(ParseError):
    """Tokens that cannot be mapped onto a document."""


class PropertyNotRecognized(BuildError):
    default_message = "Invalid property or property needs another property"

    def __init__(
        self, key: str, meta: Optional[Meta] = None, origin: Optional[str] = None
    ):
        super().__init__(
            f"{self.default_message} to be defined before it: {key}", meta, origin
        )
        self.key = key


class AlreadyDefined(BuildError):
    default_message = "Property already defined"


class InvalidChecksumFormat(BuildError):
    default_message = "Invalid Package Checksum format."


class NoClosedParen(BuildError):
    default_message = "No closed parentheses at the end."


class LicenceExpressionError(ParseError):
    """A license expression that cannot be parsed."""


class EmptyLicence(LicenceExpressionError):
    default_message = "Empty licence"


class UnbalancedParentheses(LicenceExpressionError):
    default_message = "Unbalanced parentheses in licence expression."


class ConjunctionAndDisjunctionMixed(LicenceExpressionError):
    default_message = (
        "Licence sets can only have either disjunction or conjunction,"
        " not both. (AND or OR, not both)"
    )


class FormatError(SPDXError):
    """Raised by codecs when a payload cannot be decoded or encoded."""


class LicenceListError(SPDXError):
    """Raised when the licence list cannot be loaded."""
