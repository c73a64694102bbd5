"""Length-Class Table shared by the UTF-8 and UTF-16 codecs.

Maps a value's magnitude to its minimal UTF-8 byte count (1-6, including
the historical 5- and 6-byte forms) and its UTF-16 unit count (1-2).
Leading-byte templates are kept alongside so the decoder dispatches on the
same table the encoder builds from.
"""

from dataclasses import dataclass

MAX_LEGACY = 0x7FFFFFFF
MAX_UNICODE = 0x10FFFF
MAX_BMP = 0xFFFF
MAX_UINT32 = 0xFFFFFFFF

MAX_SEQUENCE = 6
CONTINUATION_MASK = 0xC0
CONTINUATION_TAG = 0x80
PAYLOAD_BITS = 6


@dataclass(frozen=True)
class LengthClass:
    length: int
    low: int
    high: int
    lead_tag: int   # fixed high bits of the leading byte
    lead_mask: int  # bits of the leading byte that must equal lead_tag

    @property
    def payload_mask(self) -> int:
        return ~self.lead_mask & 0xFF


LENGTH_TABLE = (
    LengthClass(1, 0x00, 0x7F, 0x00, 0x80),
    LengthClass(2, 0x80, 0x7FF, 0xC0, 0xE0),
    LengthClass(3, 0x800, 0xFFFF, 0xE0, 0xF0),
    LengthClass(4, 0x10000, 0x1FFFFF, 0xF0, 0xF8),
    LengthClass(5, 0x200000, 0x3FFFFFF, 0xF8, 0xFC),
    LengthClass(6, 0x4000000, MAX_LEGACY, 0xFC, 0xFE),
)

# Reverse lookup: length -> class
CLASS_BY_LENGTH = {lc.length: lc for lc in LENGTH_TABLE}


def utf8_length(value: int) -> int | None:
    """Return the minimal UTF-8 byte count for a value, or None past 0x7FFFFFFF."""
    for lc in LENGTH_TABLE:
        if lc.low <= value <= lc.high:
            return lc.length
    return None


def utf16_length(value: int) -> int | None:
    """Return the UTF-16 unit count for a value, or None if unrepresentable."""
    if 0 <= value <= MAX_BMP:
        return 1
    if value <= MAX_UNICODE:
        return 2
    return None


def lead_class(byte: int) -> LengthClass | None:
    """Match a leading byte against the templates.

    Returns None for bytes that can never start a sequence: stray
    continuation bytes (10xxxxxx) and 0xFE/0xFF.
    """
    for lc in LENGTH_TABLE:
        if byte & lc.lead_mask == lc.lead_tag:
            return lc
    return None


def is_continuation(byte: int) -> bool:
    return byte & CONTINUATION_MASK == CONTINUATION_TAG
