"""Lexical rules shared by the reader and the writer.

Names are one or more ASCII letters or digits. ``.`` and ``_`` are not
accepted; existing documents were written under that rule.
"""

import re
import string

NAME_CHARACTERS = frozenset(string.ascii_letters + string.digits)
WHITESPACE_CHARACTERS = frozenset(" \t\r\n")

XML_DECLARATION_START = "<?xml"
XML_DECLARATION_END = "?>"
DOCTYPE_START = "<!DOCTYPE"
DOCTYPE_END = ">"
COMMENT_START = "<!--"
COMMENT_END = "-->"
CDATA_START = "<![CDATA["
CDATA_END = "]]>"
CLOSE_TAG_START = "</"

ENTITIES = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "apos": "'",
    "quot": '"',
}

_ENTITY_REFERENCE = re.compile(r"&(lt|gt|amp|apos|quot);")

_TEXT_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
})

_ATTRIBUTE_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
})


def is_name(value: str) -> bool:
    """Check that ``value`` is a valid tag or attribute name."""
    return bool(value) and all(c in NAME_CHARACTERS for c in value)


def unescape_xml(text: str) -> str:
    """Replace the five predefined entity references.

    Any other ``&`` sequence is kept as written.
    """
    if "&" not in text:
        return text
    return _ENTITY_REFERENCE.sub(lambda m: ENTITIES[m.group(1)], text)


def escape_text(text: str) -> str:
    """Escape character data. Quotes are left alone."""
    return text.translate(_TEXT_ESCAPES)


def escape_attribute(value: str) -> str:
    """Escape a double-quoted attribute value."""
    return value.translate(_ATTRIBUTE_ESCAPES)
