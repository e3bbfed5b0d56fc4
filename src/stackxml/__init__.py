"""stackxml.

A small, dependency-free XML dialect for persisting tree-structured
application documents: a stack-based pull parser and a matching writer.

Entry points:
- XmlReader: pull tags, text and close tags in the order a schema expects
- XmlWriter: push tags, attributes and text into an indented document
- is_well_formed_utf8: check raw bytes before decoding
"""

__version__ = "0.1.0"
__author__ = "stackxml developers"

from .character import is_well_formed_utf8, read_utf8_text_file
from .reader import Tag, XmlReader, copy_document, iter_events
from .shared import (
    CloseTagMismatchError,
    ContractViolation,
    DocumentConfig,
    ErrorKind,
    ReaderConfig,
    WriterConfig,
    XmlError,
)
from .writer import XmlWriter, write_xml_file

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Reading
    "XmlReader",
    "Tag",
    "iter_events",
    "copy_document",
    "read_utf8_text_file",
    "is_well_formed_utf8",

    # Writing
    "XmlWriter",
    "write_xml_file",

    # Errors
    "ErrorKind",
    "XmlError",
    "CloseTagMismatchError",
    "ContractViolation",

    # Configuration
    "DocumentConfig",
    "ReaderConfig",
    "WriterConfig",
]
