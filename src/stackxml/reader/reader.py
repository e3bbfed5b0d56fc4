"""Stack-based pull parser for stackxml documents.

The reader never builds a tree. Callers walk their own expected schema and
pull constructs one at a time:

    reader = XmlReader.from_file("frameset.xml")
    root = reader.parse_tag()
    while (child := reader.parse_tag()) is not None:
        ...
        reader.parse_close_tag()
    reader.parse_close_tag()

Memory use is proportional to the nesting depth. Calling
:meth:`XmlReader.parse_close_tag` on a tag whose children were never visited
skips them.
"""

import re
from typing import List, Optional, Tuple

from stackxml.character.files import PathType, read_utf8_text_file, split_filename
from stackxml.reader.tag import Tag
from stackxml.shared.config import ReaderConfig
from stackxml.shared.errors import CloseTagMismatchError, ErrorKind, XmlError
from stackxml.shared.grammar import (
    CDATA_END,
    CDATA_START,
    CLOSE_TAG_START,
    COMMENT_END,
    COMMENT_START,
    DOCTYPE_END,
    DOCTYPE_START,
    NAME_CHARACTERS,
    WHITESPACE_CHARACTERS,
    XML_DECLARATION_END,
    XML_DECLARATION_START,
    unescape_xml,
)
from stackxml.shared.logging import get_logger

QUOTE_CHARACTERS = ("'", '"')
SELF_CLOSING_MARKERS = ("/", "?")

_DOCTYPE_NAME = re.compile(r"[ \t\r\n]+([^ \t\r\n>\[]+)")


class XmlReader:
    """Pull parser over a fully loaded document.

    All cursor state (position, line, tag stack and the self-closing latch)
    lives on the instance.
    """

    def __init__(self, text: str, source_name: str = "") -> None:
        """Initialize the reader and skip the document headers.

        Args:
            text: Whole document, already decoded and without a BOM
            source_name: File name or label used in diagnostics

        Raises:
            XmlError: The document is empty or a header is unclosed
        """
        self.source_name = str(source_name)
        self.dirname, self.filepart = split_filename(self.source_name)
        self.doctype: Optional[str] = None

        self._logger = get_logger(__name__, self.source_name, "xml_reader")

        self._text = text
        self._end = len(text)
        self._pos = 0
        self._line = 1
        self._tag_stack: List[Tuple[str, int]] = []
        self._in_self_closing_tag = False

        if not text:
            raise self._error(ErrorKind.EMPTY_DOCUMENT, "Document is empty")

        self._logger.debug("Opened document", extra={"length": self._end})
        self._parse_document()

    @classmethod
    def from_file(
        cls, path: PathType, config: Optional[ReaderConfig] = None
    ) -> "XmlReader":
        """Load a UTF-8 file and create a reader for it.

        Raises:
            OSError: The file could not be read
            XmlError: The file is not well-formed UTF-8 or is empty
        """
        text = read_utf8_text_file(path, config)
        return cls(text, str(path))

    @property
    def line(self) -> int:
        """Current 1-based line number."""
        return self._line

    @property
    def position(self) -> int:
        return self._pos

    @property
    def depth(self) -> int:
        """Number of open tags."""
        return len(self._tag_stack)

    @property
    def in_self_closing_tag(self) -> bool:
        return self._in_self_closing_tag

    def parse_tag(self) -> Optional[Tag]:
        """Parse the next child tag at the current level.

        Text, comments and CDATA before the tag are skipped.

        Returns:
            The tag, or None if the current level has no more children
            (the next construct is a close tag, or the current tag was
            self-closing)
        """
        if self._in_self_closing_tag:
            return None

        self._scan_text(collect=False)
        if self._starts_with(CLOSE_TAG_START):
            return None

        if self._pos >= self._end:
            raise self._error(
                ErrorKind.UNEXPECTED_END_OF_INPUT,
                "Unexpected end of input, expected a tag",
            )

        # _scan_text only stops at the end of input or on a "<"
        tag_line = self._line
        self._pos += 1

        if self._pos >= self._end:
            raise self._error(ErrorKind.INCOMPLETE_TAG, "Incomplete tag")

        name = self._parse_name(ErrorKind.INVALID_TAG_NAME, "Missing tag name")

        c = self._current()
        if not c:
            raise self._error(ErrorKind.INCOMPLETE_TAG, f"Incomplete tag <{name}")
        if not (
            c in WHITESPACE_CHARACTERS
            or c == ">"
            or self._starts_with("/>")
        ):
            raise self._error(
                ErrorKind.INVALID_TAG_NAME,
                f"Invalid tag name: <{name}{c}",
            )

        attributes = {}

        while True:
            self._skip_whitespace()

            c = self._current()
            if not c:
                raise self._error(
                    ErrorKind.INCOMPLETE_TAG, f"Incomplete tag <{name}"
                )

            if c in NAME_CHARACTERS:
                attribute_name = self._parse_name(
                    ErrorKind.INVALID_TAG_NAME, "Missing attribute name"
                )
                attributes[attribute_name] = self._parse_attribute_value(
                    name, attribute_name
                )

            elif c in SELF_CLOSING_MARKERS:
                following = self._text[self._pos + 1:self._pos + 2]
                if not following:
                    raise self._error(
                        ErrorKind.INCOMPLETE_TAG, f"Incomplete tag <{name}"
                    )
                if following != ">":
                    raise self._error(
                        ErrorKind.UNKNOWN_CHARACTER,
                        f"Unknown character {c!r} in <{name}>",
                    )
                self._pos += 2

                self._in_self_closing_tag = True
                return Tag(name, tag_line, attributes, self.source_name)

            elif c == ">":
                self._pos += 1

                self._tag_stack.append((name, tag_line))
                return Tag(name, tag_line, attributes, self.source_name)

            else:
                raise self._error(
                    ErrorKind.UNKNOWN_CHARACTER,
                    f"Unknown character {c!r} in <{name}>",
                )

    def parse_text(self) -> str:
        """Parse the text before the next tag.

        Entity references are unescaped, comments are dropped and CDATA
        sections are included verbatim.
        """
        if self._in_self_closing_tag:
            return ""

        return self._scan_text(collect=True)

    def parse_close_tag(self) -> None:
        """Close the current tag.

        Any children of the current tag that have not been parsed are
        skipped. For a self-closing tag this only clears the latch.

        Raises:
            CloseTagMismatchError: The close tag does not match the open tag
            XmlError: The close tag is malformed or the input ends early
        """
        if self._in_self_closing_tag:
            self._in_self_closing_tag = False
            return

        # skip all child nodes of the current level
        depth = 0
        while True:
            self._scan_text(collect=False)

            if self._starts_with(CLOSE_TAG_START):
                if depth == 0:
                    break
                self._read_close_tag()
                depth -= 1
                continue

            self.parse_tag()
            if self._in_self_closing_tag:
                self._in_self_closing_tag = False
            else:
                depth += 1

        self._read_close_tag()

    def _parse_document(self) -> None:
        self._skip_whitespace()

        if self._starts_with(XML_DECLARATION_START):
            self._skip_header(
                XML_DECLARATION_START, XML_DECLARATION_END, "XML declaration"
            )

        self._skip_whitespace()

        if self._starts_with(DOCTYPE_START):
            match = _DOCTYPE_NAME.match(self._text, self._pos + len(DOCTYPE_START))
            if match:
                self.doctype = match.group(1)
            self._skip_header(DOCTYPE_START, DOCTYPE_END, "DOCTYPE")

    def _skip_header(self, start: str, terminator: str, description: str) -> None:
        header_end = self._text.find(terminator, self._pos + len(start))
        if header_end < 0:
            raise self._error(
                ErrorKind.UNCLOSED_HEADER, f"Unclosed {description} header"
            )
        self._advance_to(header_end + len(terminator))

    def _read_close_tag(self) -> None:
        close_line = self._line
        self._pos += len(CLOSE_TAG_START)

        if self._pos >= self._end:
            raise self._error(ErrorKind.INCOMPLETE_TAG, "Incomplete close tag")

        found = self._parse_name(ErrorKind.INVALID_TAG_NAME, "Missing close tag name")

        if not self._tag_stack:
            raise self._logged(
                CloseTagMismatchError(None, found, self.source_name, close_line)
            )

        expected, open_line = self._tag_stack[-1]
        if found != expected:
            raise self._logged(
                CloseTagMismatchError(
                    expected, found, self.source_name, close_line, open_line
                )
            )
        self._tag_stack.pop()

        self._skip_whitespace()

        if self._current() != ">":
            raise self._error(
                ErrorKind.EXPECTED_CLOSE_BRACKET,
                f"Expected > to end </{found}",
            )
        self._pos += 1

    def _scan_text(self, collect: bool) -> str:
        """Advance to the next tag or close tag.

        Comments and CDATA sections are consumed along the way. When
        ``collect`` is set the unescaped text is returned.
        """
        text = self._text
        pieces = []
        start = self._pos

        while True:
            markup = text.find("<", start)
            if markup < 0:
                self._advance_to(self._end)
                break

            if text.startswith(COMMENT_START, markup):
                if collect:
                    pieces.append(unescape_xml(text[start:markup]))
                self._advance_to(markup)

                comment_end = text.find(COMMENT_END, markup + len(COMMENT_START))
                if comment_end < 0:
                    raise self._error(ErrorKind.UNCLOSED_COMMENT, "Unclosed comment")
                self._advance_to(comment_end + len(COMMENT_END))

            elif text.startswith(CDATA_START, markup):
                if collect:
                    pieces.append(unescape_xml(text[start:markup]))
                self._advance_to(markup)

                body_start = markup + len(CDATA_START)
                cdata_end = text.find(CDATA_END, body_start)
                if cdata_end < 0:
                    raise self._error(ErrorKind.UNCLOSED_CDATA, "Unclosed CDATA section")
                if collect:
                    pieces.append(text[body_start:cdata_end])
                self._advance_to(cdata_end + len(CDATA_END))

            else:
                # start/end of a tag
                self._advance_to(markup)
                break

            start = self._pos

        if collect:
            pieces.append(unescape_xml(text[start:self._pos]))
        return "".join(pieces)

    def _parse_name(self, kind: ErrorKind, message: str) -> str:
        text = self._text
        start = pos = self._pos
        while pos < self._end and text[pos] in NAME_CHARACTERS:
            pos += 1

        if pos == start:
            raise self._error(kind, message)

        self._pos = pos
        return text[start:pos].lower()

    def _parse_attribute_value(self, tag_name: str, attribute_name: str) -> str:
        self._skip_whitespace()

        c = self._current()
        if c != "=":
            if not c:
                raise self._error(
                    ErrorKind.INCOMPLETE_TAG, f"Incomplete tag <{tag_name}"
                )
            raise self._error(
                ErrorKind.MISSING_ATTRIBUTE_VALUE,
                f"Missing value for attribute {attribute_name!r} in <{tag_name}>",
            )
        self._pos += 1

        self._skip_whitespace()

        quote = self._current()
        if not quote:
            raise self._error(ErrorKind.INCOMPLETE_TAG, f"Incomplete tag <{tag_name}")
        if quote not in QUOTE_CHARACTERS:
            raise self._error(
                ErrorKind.ATTRIBUTE_NOT_QUOTED,
                f"Attribute {attribute_name!r} in <{tag_name}> is not quoted",
            )

        value_start = self._pos + 1
        value_end = self._text.find(quote, value_start)
        if value_end < 0:
            raise self._error(
                ErrorKind.INCOMPLETE_ATTRIBUTE_VALUE,
                f"Incomplete value for attribute {attribute_name!r} in <{tag_name}>",
            )

        value = unescape_xml(self._text[value_start:value_end])
        self._advance_to(value_end + 1)
        return value

    def _current(self) -> str:
        return self._text[self._pos:self._pos + 1]

    def _starts_with(self, prefix: str) -> bool:
        return self._text.startswith(prefix, self._pos)

    def _skip_whitespace(self) -> None:
        text = self._text
        pos = self._pos
        while pos < self._end and text[pos] in WHITESPACE_CHARACTERS:
            pos += 1
        self._advance_to(pos)

    def _advance_to(self, pos: int) -> None:
        self._line += self._text.count("\n", self._pos, pos)
        self._pos = pos

    def _error(self, kind: ErrorKind, message: str) -> XmlError:
        return self._logged(XmlError(kind, message, self.source_name, self._line))

    def _logged(self, error: XmlError) -> XmlError:
        self._logger.debug(
            "Malformed document", extra={"kind": error.kind.name}, line=error.line
        )
        return error
