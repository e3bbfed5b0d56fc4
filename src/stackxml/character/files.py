"""File helpers for loading UTF-8 documents."""

import os
from pathlib import Path
from typing import Optional, Tuple, Union

from stackxml.character.encoding import find_invalid_utf8, strip_utf8_bom
from stackxml.shared.config import ReaderConfig
from stackxml.shared.errors import ErrorKind, XmlError
from stackxml.shared.logging import get_logger

PathType = Union[str, Path]


def read_utf8_text_file(path: PathType, config: Optional[ReaderConfig] = None) -> str:
    """Read a UTF-8 text file into a string.

    The raw bytes are checked for well-formed UTF-8 first, then a UTF-8 byte
    order mark is removed.

    Args:
        path: File to read
        config: Reader configuration, defaults to ReaderConfig()

    Returns:
        Decoded file contents

    Raises:
        OSError: The file could not be read
        XmlError: The file is not well-formed UTF-8 (ErrorKind.INVALID_UTF8)
    """
    config = config or ReaderConfig()
    source_name = str(path)
    logger = get_logger(__name__, source_name, "files")

    with open(path, "rb") as f:
        data = f.read()

    logger.debug("Read file", extra={"size_bytes": len(data)})

    if config.validate_utf8:
        bad_offset = find_invalid_utf8(data)
        if bad_offset is not None:
            line = data.count(b"\n", 0, bad_offset) + 1
            raise XmlError(
                ErrorKind.INVALID_UTF8,
                f"File is not well-formed UTF-8 (byte offset {bad_offset})",
                source_name,
                line,
            )

    if config.strip_bom:
        data = strip_utf8_bom(data)

    return data.decode("utf-8", errors="strict" if config.validate_utf8 else "replace")


def split_filename(path: PathType) -> Tuple[str, str]:
    """Split a file name into its directory and file parts.

    The directory is either empty or ends in a separator, so
    ``dirname + filepart`` is the original path.
    """
    path = str(path)
    head, sep, tail = path.rpartition(os.sep)
    if not sep and os.altsep:
        head, sep, tail = path.rpartition(os.altsep)
    if not sep:
        return "", path
    return head + sep, tail
