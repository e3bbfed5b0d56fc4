"""Error taxonomy for stackxml.

Reader failures are raised as :class:`XmlError` carrying an :class:`ErrorKind`,
the source name and the 1-based line where the problem was detected. Writer
misuse is a programming error and raises :class:`ContractViolation`.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Kinds of malformed-document errors."""

    EMPTY_DOCUMENT = "empty document"
    UNCLOSED_HEADER = "unclosed header"
    UNEXPECTED_END_OF_INPUT = "unexpected end of input"
    INVALID_TAG_NAME = "invalid tag name"
    UNKNOWN_CHARACTER = "unknown character"
    ATTRIBUTE_NOT_QUOTED = "attribute not quoted"
    INCOMPLETE_ATTRIBUTE_VALUE = "incomplete attribute value"
    MISSING_ATTRIBUTE_VALUE = "missing attribute value"
    INCOMPLETE_TAG = "incomplete tag"
    UNCLOSED_COMMENT = "unclosed comment"
    UNCLOSED_CDATA = "unclosed CDATA section"
    CLOSE_TAG_MISMATCH = "close tag mismatch"
    EXPECTED_CLOSE_BRACKET = "expected >"
    INVALID_UTF8 = "invalid UTF-8"

    # Raised by Tag accessors on behalf of deserializers
    MISSING_ATTRIBUTE = "missing attribute"
    INVALID_ATTRIBUTE_VALUE = "invalid attribute value"


class XmlError(Exception):
    """A document could not be read.

    Attributes:
        kind: What went wrong
        message: Human readable description
        source_name: File name (or other label) of the document
        line: 1-based line number where the error was detected
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        source_name: str = "",
        line: int = 0
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.source_name = source_name
        self.line = line

    def __str__(self) -> str:
        location = self.source_name or "<string>"
        if self.line > 0:
            location = f"{location}:{self.line}"
        return f"{location}: {self.message}"

    def to_dict(self) -> dict:
        """Summarise the error for reports."""
        return {
            "kind": self.kind.name,
            "message": self.message,
            "source": self.source_name,
            "line": self.line,
        }


class CloseTagMismatchError(XmlError):
    """A close tag did not match the innermost open tag."""

    def __init__(
        self,
        expected: Optional[str],
        found: str,
        source_name: str,
        line: int,
        open_line: int = 0
    ) -> None:
        if expected is None:
            message = f"Unexpected close tag </{found}>"
        else:
            message = (
                f"Close tag mismatch: expected </{expected}> "
                f"(opened on line {open_line}), found </{found}>"
            )
        super().__init__(ErrorKind.CLOSE_TAG_MISMATCH, message, source_name, line)
        self.expected = expected
        self.found = found
        self.open_line = open_line

    def to_dict(self) -> dict:
        result = super().to_dict()
        result.update(
            expected=self.expected,
            found=self.found,
            open_line=self.open_line,
        )
        return result


class ContractViolation(AssertionError):
    """The writer was driven with an invalid call sequence or name."""
