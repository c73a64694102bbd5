"""Codepoint Classifier.

Every resolved value gets exactly one base category, decided in priority
order (noncharacter, surrogate, private, control, normal), plus the
additive SUPPLEMENTARY flag.
"""

from .flags import PropertyFlags

NONCHAR_BLOCK = (0xFDD0, 0xFDEF)
SURROGATES = (0xD800, 0xDFFF)
HIGH_SURROGATES = (0xD800, 0xDBFF)
LOW_SURROGATES = (0xDC00, 0xDFFF)
PRIVATE_BMP = (0xE000, 0xF8FF)
PRIVATE_PLANES_START = 0xF0000
C0_CONTROLS = (0x00, 0x1F)
C1_CONTROLS = (0x80, 0x9F)
DELETE = 0x7F
SUPPLEMENTARY_START = 0x10000


def _within(value: int, bounds: tuple[int, int]) -> bool:
    return bounds[0] <= value <= bounds[1]


def is_noncharacter(value: int) -> bool:
    """U+FDD0..U+FDEF and the last two codepoints of every 16-bit plane."""
    return _within(value, NONCHAR_BLOCK) or value & 0xFFFE == 0xFFFE


def is_surrogate(value: int) -> bool:
    return _within(value, SURROGATES)


def is_high_surrogate(value: int) -> bool:
    return _within(value, HIGH_SURROGATES)


def is_low_surrogate(value: int) -> bool:
    return _within(value, LOW_SURROGATES)


def is_private(value: int) -> bool:
    # Planes 15 and 16 are private use; values past U+10FFFF classify the
    # same way so legacy forms keep a stable category.
    return _within(value, PRIVATE_BMP) or value >= PRIVATE_PLANES_START


def is_control(value: int) -> bool:
    return (_within(value, C0_CONTROLS) or value == DELETE
            or _within(value, C1_CONTROLS))


def base_category(value: int) -> PropertyFlags:
    """Return the single base category for a value."""
    if is_noncharacter(value):
        return PropertyFlags.NONCHARACTER
    if is_surrogate(value):
        return PropertyFlags.SURROGATE
    if is_private(value):
        return PropertyFlags.PRIVATE
    if is_control(value):
        return PropertyFlags.CONTROL
    return PropertyFlags.NORMAL


def is_supplementary(value: int) -> bool:
    """Set above the BMP, and on high surrogates, which only ever introduce
    a supplementary scalar."""
    return value >= SUPPLEMENTARY_START or is_high_surrogate(value)


def classify(value: int) -> PropertyFlags:
    """Compute the full property bitset for a resolved value."""
    props = base_category(value)
    if is_supplementary(value):
        props |= PropertyFlags.SUPPLEMENTARY
    return props
