"""Stack-based writer producing indented stackxml documents.

The writer keeps the header of the most recent tag open until it knows
whether the tag has content. Attributes extend the open header, a child tag
or text closes it with ``>``, and a close tag collapses it to ``/>``:

    with XmlWriter(sink, "frameset") as xml:
        xml.write_tag("frameset")
        xml.write_tag_attribute("id", "man")
        xml.write_tag("frame")
        xml.write_close_tag()
        xml.write_close_tag()

Once text is written into an element, that element's remaining content is
written inline so the text reads back unchanged. The line break after a
closed child is held back until the next tag or close tag, so text that
follows a child starts right after it. Whitespace-only runs between
block-laid-out tags are layout.
"""

import io
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, TextIO, Union

from stackxml.character.files import PathType
from stackxml.shared.config import WriterConfig
from stackxml.shared.errors import ContractViolation
from stackxml.shared.grammar import escape_attribute, escape_text, is_name
from stackxml.shared.logging import get_logger

AttributeValue = Union[str, int]


@dataclass
class _OpenTag:
    name: str
    inline: bool


class XmlWriter:
    """Writes a document to a text sink one construct at a time.

    The tag stack must be empty when :meth:`close` is called. Misuse of the
    call sequence raises :class:`ContractViolation`.
    """

    def __init__(
        self,
        sink: TextIO,
        doctype: Optional[str] = None,
        config: Optional[WriterConfig] = None,
        source_name: Optional[str] = None
    ) -> None:
        """Initialize the writer and emit the document headers.

        Args:
            sink: Text stream to write to
            doctype: Optional DOCTYPE name
            config: Layout configuration, defaults to WriterConfig()
            source_name: File name or label used in log records
        """
        if doctype and not is_name(doctype):
            raise ContractViolation(f"Invalid DOCTYPE name: {doctype!r}")

        self.config = config or WriterConfig()
        self._sink = sink
        self._tag_stack: List[_OpenTag] = []
        self._header_open = False
        self._root_written = False
        self._newline_pending = False
        self._closed = False
        self._logger = get_logger(__name__, source_name, "xml_writer")

        newline = self.config.newline
        self._sink.write(
            f'<?xml version="1.0" encoding="{self.config.encoding_label}"?>{newline}'
        )

        if doctype:
            self._sink.write(f"<!DOCTYPE {doctype}>{newline}")

        self._logger.debug("Started document", extra={"doctype": doctype})

    def __enter__(self) -> "XmlWriter":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if exc_type is None:
            self.close()

    @property
    def depth(self) -> int:
        return len(self._tag_stack)

    @property
    def header_open(self) -> bool:
        return self._header_open

    def write_tag(self, name: str) -> None:
        """Open a new tag as a child of the current one."""
        if not is_name(name):
            raise ContractViolation(f"Invalid tag name: {name!r}")
        if self._closed:
            raise ContractViolation("Writer is closed")
        if not self._tag_stack and self._root_written:
            raise ContractViolation("Document already has a root tag")

        inline = bool(self._tag_stack) and self._tag_stack[-1].inline

        if self._header_open:
            self._close_header(newline=not inline)
        self._flush_newline()

        if not inline:
            self._write_indent(len(self._tag_stack))

        self._sink.write("<" + name)

        self._tag_stack.append(_OpenTag(name, inline))
        self._header_open = True
        self._root_written = True

    def write_tag_attribute(self, name: str, value: AttributeValue) -> None:
        """Add an attribute to the tag whose header is still open.

        Integers are written in plain decimal.
        """
        if not self._header_open:
            raise ContractViolation(f"No open tag header for attribute {name!r}")
        if not is_name(name):
            raise ContractViolation(f"Invalid attribute name: {name!r}")

        if isinstance(value, bool):
            raise ContractViolation(f"Attribute {name!r} value must be str or int")
        if isinstance(value, int):
            text = str(value)
        elif isinstance(value, str):
            text = escape_attribute(value)
        else:
            raise ContractViolation(f"Attribute {name!r} value must be str or int")

        self._sink.write(f' {name}="{text}"')

    def write_text(self, text: str) -> None:
        """Write character data into the current tag."""
        if not self._tag_stack:
            raise ContractViolation("Text written outside of a tag")

        if self._header_open:
            self._close_header(newline=False)

        # no layout between a closed child and the text
        self._newline_pending = False

        # the rest of this element is written inline
        self._tag_stack[-1].inline = True
        self._sink.write(escape_text(text))

    def write_close_tag(self) -> None:
        """Close the current tag, self-closing it if it has no content."""
        if not self._tag_stack:
            raise ContractViolation("Close tag written with no open tag")

        current = self._tag_stack.pop()

        if self._header_open:
            self._sink.write("/>")
            self._header_open = False
        else:
            self._flush_newline()
            if not current.inline:
                self._write_indent(len(self._tag_stack))
            self._sink.write(f"</{current.name}>")

        if not self._tag_stack:
            self._sink.write(self.config.newline)
        elif not self._tag_stack[-1].inline:
            # written by the next tag or close tag, dropped by text
            self._newline_pending = True

    def close(self) -> None:
        """Finish the document.

        Raises:
            ContractViolation: Tags are still open or nothing was written
        """
        if self._tag_stack:
            raise ContractViolation(
                "Unclosed tags: " + ", ".join(t.name for t in self._tag_stack)
            )
        if not self._root_written:
            raise ContractViolation("Document has no root tag")
        if not self._closed:
            self._closed = True
            self._logger.debug("Finished document")

    def _close_header(self, newline: bool) -> None:
        self._sink.write(">")
        if newline:
            self._sink.write(self.config.newline)
        self._header_open = False

    def _flush_newline(self) -> None:
        if self._newline_pending:
            self._sink.write(self.config.newline)
            self._newline_pending = False

    def _write_indent(self, depth: int) -> None:
        if depth:
            self._sink.write(self.config.indent * depth)


@contextmanager
def write_xml_file(
    path: PathType,
    doctype: Optional[str] = None,
    config: Optional[WriterConfig] = None
) -> Iterator[XmlWriter]:
    """Write a document to ``path``.

    The document is built in memory and only written to disk when the block
    completes, so a failed serialization leaves any existing file untouched.
    """
    buffer = io.StringIO()
    writer = XmlWriter(buffer, doctype, config, str(path))

    yield writer

    writer.close()
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(buffer.getvalue())
