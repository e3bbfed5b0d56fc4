"""Pull parser for stackxml documents.

Key Components:
    XmlReader: Stack-based pull parser with parse_tag/parse_text/parse_close_tag
    Tag: A parsed start-tag with typed attribute accessors
    iter_events: Schema-less traversal of a whole document
"""

from .reader import XmlReader
from .tag import Tag
from .walk import (
    EndTagEvent,
    Event,
    StartTagEvent,
    TextEvent,
    copy_document,
    iter_events,
)

__all__ = [
    "EndTagEvent",
    "Event",
    "StartTagEvent",
    "Tag",
    "TextEvent",
    "XmlReader",
    "copy_document",
    "iter_events",
]
