"""Generic traversal of a whole document through the pull API.

Schema-aware deserializers call the reader directly. These helpers are for
tools that need to see every construct without knowing the schema, such as
the command line tool and reformatting.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Union

from stackxml.reader.reader import XmlReader
from stackxml.reader.tag import Tag

if TYPE_CHECKING:
    from stackxml.writer.writer import XmlWriter


@dataclass(frozen=True)
class StartTagEvent:
    tag: Tag

    @property
    def name(self) -> str:
        return self.tag.name


@dataclass(frozen=True)
class TextEvent:
    text: str
    line: int


@dataclass(frozen=True)
class EndTagEvent:
    name: str
    line: int


Event = Union[StartTagEvent, TextEvent, EndTagEvent]


def iter_events(reader: XmlReader, keep_whitespace: bool = False) -> Iterator[Event]:
    """Yield every start tag, text run and end tag of the document.

    Args:
        reader: A freshly created reader
        keep_whitespace: Also yield text that is only whitespace

    Raises:
        XmlError: The document is malformed
    """
    root = reader.parse_tag()
    if root is None:
        # a close tag before any element; let the reader report it
        reader.parse_close_tag()
        return

    open_names: List[str] = [root.name]
    yield StartTagEvent(root)

    while open_names:
        text_line = reader.line
        text = reader.parse_text()
        if text and (keep_whitespace or not text.isspace()):
            yield TextEvent(text, text_line)

        child = reader.parse_tag()
        if child is None:
            reader.parse_close_tag()
            yield EndTagEvent(open_names.pop(), reader.line)
        else:
            open_names.append(child.name)
            yield StartTagEvent(child)


def copy_document(
    reader: XmlReader, writer: "XmlWriter", keep_whitespace: bool = False
) -> int:
    """Replay a document from ``reader`` into ``writer``.

    Returns:
        Number of elements copied
    """
    element_count = 0

    for event in iter_events(reader, keep_whitespace):
        if isinstance(event, StartTagEvent):
            writer.write_tag(event.tag.name)
            for name, value in event.tag.attributes.items():
                writer.write_tag_attribute(name, value)
            element_count += 1
        elif isinstance(event, TextEvent):
            writer.write_text(event.text)
        else:
            writer.write_close_tag()

    return element_count
