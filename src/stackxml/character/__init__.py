"""Character layer: UTF-8 validation, BOM handling and file loading."""

from .encoding import (
    UTF8_BOM,
    find_invalid_utf8,
    has_utf8_bom,
    is_well_formed_utf8,
    strip_utf8_bom,
)
from .files import read_utf8_text_file, split_filename

__all__ = [
    "UTF8_BOM",
    "find_invalid_utf8",
    "has_utf8_bom",
    "is_well_formed_utf8",
    "read_utf8_text_file",
    "split_filename",
    "strip_utf8_bom",
]
