"""UTF-8 well-formedness checking and byte order mark handling.

Documents are always UTF-8. The raw bytes of a file are checked against
The Unicode Standard, Table 3-7 "Well-Formed UTF-8 Byte Sequences" before a
byte order mark is stripped and before parsing begins.
"""

import re
from typing import Optional

UTF8_BOM = b"\xef\xbb\xbf"

ASCII_MAX = 0x7F
CONTINUATION_MIN = 0x80
CONTINUATION_MAX = 0xBF

# lead byte range, second byte range, sequence length.
# Bytes after the second are always CONTINUATION_MIN..CONTINUATION_MAX.
WELL_FORMED_SEQUENCES = (
    (0xC2, 0xDF, 0x80, 0xBF, 2),
    (0xE0, 0xE0, 0xA0, 0xBF, 3),
    (0xE1, 0xEC, 0x80, 0xBF, 3),
    (0xED, 0xED, 0x80, 0x9F, 3),
    (0xEE, 0xEF, 0x80, 0xBF, 3),
    (0xF0, 0xF0, 0x90, 0xBF, 4),
    (0xF1, 0xF3, 0x80, 0xBF, 4),
    (0xF4, 0xF4, 0x80, 0x8F, 4),
)

_ASCII_RUN = re.compile(rb"[\x00-\x7f]+")


def _sequence_length(data: bytes, pos: int) -> int:
    """Length of the well-formed sequence starting at ``pos``, or 0."""
    lead = data[pos]
    if lead <= ASCII_MAX:
        return 1

    for lead_min, lead_max, second_min, second_max, length in WELL_FORMED_SEQUENCES:
        if lead_min <= lead <= lead_max:
            if pos + length > len(data):
                return 0
            if not second_min <= data[pos + 1] <= second_max:
                return 0
            for i in range(pos + 2, pos + length):
                if not CONTINUATION_MIN <= data[i] <= CONTINUATION_MAX:
                    return 0
            return length

    # continuation bytes, C0, C1 and F5..FF never start a sequence
    return 0


def find_invalid_utf8(data: bytes) -> Optional[int]:
    """Find the first ill-formed UTF-8 sequence.

    Args:
        data: Raw bytes to check

    Returns:
        Offset of the byte that starts the first ill-formed sequence, or
        None if the whole input is well-formed
    """
    pos = 0
    end = len(data)

    while pos < end:
        ascii_run = _ASCII_RUN.match(data, pos)
        if ascii_run:
            pos = ascii_run.end()
            continue

        length = _sequence_length(data, pos)
        if length == 0:
            return pos
        pos += length

    return None


def is_well_formed_utf8(data: bytes) -> bool:
    """Check that ``data`` is well-formed UTF-8.

    Empty input is well-formed. This is a predicate, not a decoder: it
    returns False for bad input and never raises.
    """
    return find_invalid_utf8(data) is None


def has_utf8_bom(data: bytes) -> bool:
    """Check if ``data`` starts with a UTF-8 byte order mark."""
    return data.startswith(UTF8_BOM)


def strip_utf8_bom(data: bytes) -> bytes:
    """Remove a leading UTF-8 byte order mark, if present."""
    if has_utf8_bom(data):
        return data[len(UTF8_BOM):]
    return data
