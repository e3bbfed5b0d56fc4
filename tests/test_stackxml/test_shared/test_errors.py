"""Tests for the error types, the lexical helpers and logging."""

import logging

import pytest

from stackxml.shared.errors import (
    CloseTagMismatchError,
    ContractViolation,
    ErrorKind,
    XmlError,
)
from stackxml.shared.grammar import escape_attribute, escape_text, is_name, unescape_xml
from stackxml.shared.logging import SourceLogger, get_logger


class TestXmlError:
    """Tests for XmlError."""

    def test_attributes(self):
        error = XmlError(ErrorKind.INCOMPLETE_TAG, "Incomplete tag", "man.xml", 4)

        assert error.kind is ErrorKind.INCOMPLETE_TAG
        assert error.message == "Incomplete tag"
        assert error.source_name == "man.xml"
        assert error.line == 4

    def test_str_includes_location(self):
        error = XmlError(ErrorKind.INCOMPLETE_TAG, "Incomplete tag", "man.xml", 4)
        assert str(error) == "man.xml:4: Incomplete tag"

    def test_str_without_line_or_source(self):
        error = XmlError(ErrorKind.INVALID_UTF8, "Bad byte")
        assert str(error) == "<string>: Bad byte"

    def test_to_dict(self):
        error = XmlError(ErrorKind.UNCLOSED_COMMENT, "Unclosed comment", "a.xml", 2)
        assert error.to_dict() == {
            "kind": "UNCLOSED_COMMENT",
            "message": "Unclosed comment",
            "source": "a.xml",
            "line": 2,
        }

    def test_is_exception(self):
        with pytest.raises(Exception):
            raise XmlError(ErrorKind.EMPTY_DOCUMENT, "Empty document")


class TestCloseTagMismatchError:
    """Tests for CloseTagMismatchError."""

    def test_mismatch_message(self):
        error = CloseTagMismatchError("b", "a", "man.xml", 9, open_line=3)

        assert error.kind is ErrorKind.CLOSE_TAG_MISMATCH
        assert error.expected == "b"
        assert error.found == "a"
        assert error.open_line == 3
        assert error.line == 9
        assert str(error) == (
            "man.xml:9: Close tag mismatch: expected </b> "
            "(opened on line 3), found </a>"
        )

    def test_unexpected_close_tag(self):
        error = CloseTagMismatchError(None, "a", "man.xml", 1)

        assert error.expected is None
        assert error.message == "Unexpected close tag </a>"

    def test_to_dict(self):
        result = CloseTagMismatchError("b", "a", "man.xml", 9, 3).to_dict()

        assert result["kind"] == "CLOSE_TAG_MISMATCH"
        assert result["expected"] == "b"
        assert result["found"] == "a"
        assert result["open_line"] == 3

    def test_is_xml_error(self):
        with pytest.raises(XmlError):
            raise CloseTagMismatchError("b", "a", "", 1)


def test_contract_violation_is_not_xml_error():
    assert not issubclass(ContractViolation, XmlError)


class TestGrammar:
    """Tests for the name and entity rules."""

    @pytest.mark.parametrize("name", ["a", "Frame2", "ID", "0"])
    def test_valid_names(self, name):
        assert is_name(name)

    @pytest.mark.parametrize("name", ["", "a_b", "a.b", "a-b", "a b", "\u00e9"])
    def test_invalid_names(self, name):
        assert not is_name(name)

    def test_unescape_predefined_entities(self):
        assert unescape_xml("&lt;&gt;&amp;&apos;&quot;") == "<>&'\""

    def test_unescape_is_single_pass(self):
        assert unescape_xml("&amp;lt;") == "&lt;"

    @pytest.mark.parametrize("text", ["&nbsp;", "&#65;", "a & b", "&amp"])
    def test_unknown_references_are_kept(self, text):
        assert unescape_xml(text) == text

    def test_escape_text(self):
        assert escape_text("<x>&\"'") == "&lt;x&gt;&amp;\"'"

    def test_escape_attribute(self):
        assert escape_attribute("<x>&\"'") == "&lt;x&gt;&amp;&quot;'"


class TestSourceLogger:
    """Tests for the structured logger."""

    def test_get_logger(self):
        logger = get_logger("stackxml.reader.reader", "man.xml")

        assert isinstance(logger, SourceLogger)
        assert logger.source_name == "man.xml"
        assert logger.component == "reader"

    def test_records_carry_source_and_component(self, caplog):
        logger = get_logger("stackxml.test", "man.xml", "xml_reader")

        with caplog.at_level(logging.DEBUG, logger="stackxml.test"):
            logger.debug("Opened document", extra={"size": 10})

        record = caplog.records[-1]
        assert record.getMessage() == "Opened document"
        assert record.component == "xml_reader"
        assert record.source == "man.xml"
        assert record.size == 10

    def test_records_carry_line_and_location(self, caplog):
        logger = get_logger("stackxml.test", "man.xml", "xml_reader")

        with caplog.at_level(logging.WARNING, logger="stackxml.test"):
            logger.warning("Malformed document", line=12)

        record = caplog.records[-1]
        assert record.line == 12
        assert record.location == "man.xml:12"

    @pytest.mark.parametrize("source_name, line, expected", [
        ("man.xml", None, "man.xml"),
        (None, 3, "<string>:3"),
        (None, None, "<string>"),
    ])
    def test_location(self, source_name, line, expected):
        assert get_logger("stackxml.test", source_name).location(line) == expected

    def test_debug_is_skipped_when_disabled(self, caplog):
        logger = get_logger("stackxml.test.levels")

        with caplog.at_level(logging.ERROR, logger="stackxml.test.levels"):
            logger.debug("Opened document")
            logger.error("Failed to read file")

        assert [r.getMessage() for r in caplog.records] == ["Failed to read file"]
