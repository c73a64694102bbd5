"""Status and property bitsets reported by every encode/decode.

Bit values match the 6-bit output field of the register interface, so a
flag value can be compared directly against captured conformance vectors.
"""

from enum import IntFlag


class StatusFlags(IntFlag):
    UNDERFLOW = 0
    READY = 0x01
    RETRY = 0x02
    INVALID = 0x04
    OVERLONG = 0x08
    NONUNICODE = 0x10
    ERROR = 0x20


class PropertyFlags(IntFlag):
    NONE = 0
    NORMAL = 0x01
    CONTROL = 0x02
    SURROGATE = 0x04
    SUPPLEMENTARY = 0x08
    PRIVATE = 0x10
    NONCHARACTER = 0x20


# Exactly one of these is set on every classified value
BASE_CATEGORIES = (
    PropertyFlags.NONCHARACTER,
    PropertyFlags.SURROGATE,
    PropertyFlags.PRIVATE,
    PropertyFlags.CONTROL,
    PropertyFlags.NORMAL,
)

FIELD_MASK = 0x3F


def is_terminal(status: StatusFlags) -> bool:
    """True once a result is final (READY or ERROR raised)."""
    return bool(status & (StatusFlags.READY | StatusFlags.ERROR))


def describe(flags) -> str:
    """Render a flag set as 'A|B' using member names, or the zero member's name."""
    members = [m.name for m in type(flags) if m.value and m in flags]
    if not members:
        return type(flags)(0).name
    return "|".join(members)
