"""Tests that written documents read back unchanged."""

import io

import pytest

from stackxml.reader import (
    StartTagEvent,
    TextEvent,
    XmlReader,
    copy_document,
    iter_events,
)
from stackxml.writer import XmlWriter


def write_sprite(writer: XmlWriter) -> None:
    writer.write_tag("frameset")
    writer.write_tag_attribute("name", 'Man "the" <Runner> & co')
    writer.write_tag_attribute("frames", 12)
    writer.write_tag("frame")
    writer.write_tag_attribute("id", "stand")
    writer.write_tag_attribute("x", -3)
    writer.write_close_tag()
    writer.write_tag("frame")
    writer.write_tag_attribute("id", "walk")
    writer.write_tag("palette")
    writer.write_text("  0000 ffff\n  1234 <&> \"q\"  ")
    writer.write_close_tag()
    writer.write_close_tag()
    writer.write_close_tag()


@pytest.fixture
def document():
    sink = io.StringIO()
    with XmlWriter(sink, "frameset") as writer:
        write_sprite(writer)
    return sink.getvalue()


class TestRoundTrip:
    """Tests for reading back writer output."""

    def test_tags_attributes_and_text(self, document):
        reader = XmlReader(document, "sprite.xml")
        assert reader.doctype == "frameset"

        root = reader.parse_tag()
        assert root.name == "frameset"
        assert root.get_attribute("name") == 'Man "the" <Runner> & co'
        assert root.get_attribute_unsigned("frames") == 12

        stand = reader.parse_tag()
        assert stand.get_attribute("id") == "stand"
        assert stand.get_attribute_int("x") == -3
        assert reader.in_self_closing_tag
        reader.parse_close_tag()

        walk = reader.parse_tag()
        assert walk.get_attribute("id") == "walk"
        palette = reader.parse_tag()
        assert palette.name == "palette"
        assert reader.parse_text() == "  0000 ffff\n  1234 <&> \"q\"  "
        reader.parse_close_tag()
        assert reader.parse_tag() is None
        reader.parse_close_tag()

        assert reader.parse_tag() is None
        reader.parse_close_tag()
        assert reader.depth == 0

    def test_copy_is_stable(self, document):
        """Test that copying writer output reproduces it exactly."""
        sink = io.StringIO()
        with XmlWriter(sink, "frameset") as writer:
            count = copy_document(XmlReader(document, "sprite.xml"), writer)

        assert count == 4
        assert sink.getvalue() == document

    def test_unvisited_children_are_skipped(self, document):
        reader = XmlReader(document, "sprite.xml")
        reader.parse_tag()

        reader.parse_close_tag()
        assert reader.depth == 0


def write_node(writer: XmlWriter, node) -> None:
    """Write a ``(name, attributes, children)`` node, children may be text."""
    name, attributes, children = node
    writer.write_tag(name)
    for attribute, value in attributes.items():
        writer.write_tag_attribute(attribute, value)
    for child in children:
        if isinstance(child, str):
            writer.write_text(child)
        else:
            write_node(writer, child)
    writer.write_close_tag()


def expected_events(node) -> list:
    name, attributes, children = node
    events = [("start", name, attributes)]
    for child in children:
        if isinstance(child, str):
            events.append(("text", child))
        else:
            events.extend(expected_events(child))
    events.append(("end", name))
    return events


def read_events(document: str) -> list:
    events = []
    for event in iter_events(XmlReader(document, "mixed.xml")):
        if isinstance(event, StartTagEvent):
            events.append(("start", event.name, dict(event.tag.attributes)))
        elif isinstance(event, TextEvent):
            events.append(("text", event.text))
        else:
            events.append(("end", event.name))
    return events


MIXED_DOCUMENTS = [
    ("a", {}, [("b", {}, []), "x"]),
    ("a", {}, ["one", ("b", {}, []), "two", ("c", {"n": "1"}, ["three"]), "four"]),
    ("a", {}, [("b", {}, [("c", {}, [])]), 'after <b> & "more"']),
    ("a", {}, [("b", {}, ["x"]), ("c", {}, []), "y", ("d", {}, ["z"])]),
    ("root", {"id": "7"}, [
        ("p", {}, ["  padded  "]),
        ("q", {}, [("r", {}, []), "mid", ("s", {}, [])]),
        "tail\n",
    ]),
]


class TestMixedContentRoundTrip:
    """Tests for text before, between and after child tags."""

    @pytest.mark.parametrize("node", MIXED_DOCUMENTS)
    def test_events_read_back(self, node):
        sink = io.StringIO()
        with XmlWriter(sink) as writer:
            write_node(writer, node)

        assert read_events(sink.getvalue()) == expected_events(node)

    def test_text_after_child_reads_back_exactly(self):
        sink = io.StringIO()
        with XmlWriter(sink) as writer:
            write_node(writer, ("a", {}, [("b", {}, []), "x"]))

        reader = XmlReader(sink.getvalue(), "mixed.xml")
        reader.parse_tag()
        reader.parse_tag()
        reader.parse_close_tag()
        assert reader.parse_text() == "x"
        assert reader.parse_tag() is None
        reader.parse_close_tag()

    @pytest.mark.parametrize("source", [
        "<a><b/>x</a>",
        "<a><b/>x<c>y</c>z</a>",
        "<a>\n  <b>\n    <c/>\n  </b>\n  tail\n</a>",
    ])
    def test_copy_is_idempotent(self, source):
        def copy(text: str) -> str:
            sink = io.StringIO()
            with XmlWriter(sink) as writer:
                copy_document(XmlReader(text, "mixed.xml"), writer)
            return sink.getvalue()

        once = copy(source)
        assert copy(once) == once
