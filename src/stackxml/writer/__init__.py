"""Writer for stackxml documents."""

from .writer import XmlWriter, write_xml_file

__all__ = [
    "XmlWriter",
    "write_xml_file",
]
