"""UTF-16 encoder and decoders, plus unit (de)serialization by byte order."""

from dataclasses import replace
from typing import Iterator, Sequence

from ..core.config import ByteOrder
from ..core.flags import StatusFlags, PropertyFlags, is_terminal
from ..core.lengths import MAX_BMP, MAX_UNICODE
from ..core.properties import classify, is_high_surrogate, is_low_surrogate
from ..core.results import DecodeResult, EncodeResult, underflow
from .utf8 import check_codepoint

HIGH_BASE = 0xD800
LOW_BASE = 0xDC00
SUPPLEMENTARY_BASE = 0x10000
_LOW10 = 0x3FF


def check_unit(value: int) -> int:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"UTF-16 unit must be 0-65535, got {value}")
    return value


def encode_utf16(codepoint: int) -> EncodeResult:
    """Encode one codepoint as one unit or a surrogate pair.

    Anything above U+10FFFF is NONUNICODE|ERROR regardless of range
    checking; UTF-16 has no form for it.
    """
    check_codepoint(codepoint)
    if codepoint > MAX_UNICODE:
        return EncodeResult(StatusFlags.NONUNICODE | StatusFlags.ERROR,
                            PropertyFlags.NONE, codepoint)
    if codepoint <= MAX_BMP:
        units = (codepoint,)
    else:
        w = codepoint - SUPPLEMENTARY_BASE
        units = (HIGH_BASE + (w >> 10), LOW_BASE + (w & _LOW10))
    return EncodeResult(StatusFlags.READY, classify(codepoint), codepoint, units)


def combine_surrogates(high: int, low: int) -> int:
    return SUPPLEMENTARY_BASE + ((high - HIGH_BASE) << 10) + (low - LOW_BASE)


def decode_utf16(units: Sequence[int]) -> DecodeResult:
    """Decode the scalar that starts at units[0].

    A high surrogate followed by anything but a low surrogate resolves to
    the high surrogate alone with RETRY|ERROR; the second unit is left
    unconsumed. Every other leading unit, lone low surrogates included,
    is a complete scalar.
    """
    if not units:
        return underflow()
    first = check_unit(units[0])
    if not is_high_surrogate(first):
        return DecodeResult(StatusFlags.READY, classify(first), first, 1)
    if len(units) < 2:
        return underflow(first, 1)
    second = check_unit(units[1])
    if not is_low_surrogate(second):
        return DecodeResult(StatusFlags.RETRY | StatusFlags.ERROR,
                            classify(first), first, 1)
    value = combine_surrogates(first, second)
    return DecodeResult(StatusFlags.READY, classify(value), value, 2)


class Utf16Decoder:
    """Incremental UTF-16 decoder for one logical channel.

    Mirrors Utf8Decoder: a unit that cannot extend the pending high
    surrogate, or any unit fed after a latched result, is refused with
    RETRY|ERROR and must be re-offered after reset().
    """

    def __init__(self):
        self.reset()

    def reset(self):
        self._pending: list[int] = []
        self._result = underflow()

    @property
    def result(self) -> DecodeResult:
        return self._result

    @property
    def pending(self) -> tuple[int, ...]:
        return tuple(self._pending)

    @property
    def idle(self) -> bool:
        return not self._pending and not is_terminal(self._result.status)

    @property
    def latched(self) -> bool:
        return is_terminal(self._result.status)

    def feed(self, unit: int) -> DecodeResult:
        """Offer one unit and return the decoder's current result."""
        check_unit(unit)
        if self.latched:
            self._result = replace(
                self._result,
                status=self._result.status | StatusFlags.RETRY | StatusFlags.ERROR,
            )
            return self._result
        self._result = decode_utf16([*self._pending, unit])
        if self._result.consumed > len(self._pending):
            self._pending.append(unit)
        return self._result

    def feed_all(self, units: Sequence[int]) -> DecodeResult:
        for u in units:
            self.feed(u)
            if self.latched:
                break
        return self._result


def iter_utf16(units: Sequence[int]) -> Iterator[tuple[int, DecodeResult]]:
    """Walk a unit buffer one scalar at a time, yielding (offset, result)."""
    decoder = Utf16Decoder()
    start = pos = 0
    while pos < len(units):
        result = decoder.feed(units[pos])
        if result.retry:
            yield start, result
            decoder.reset()
            start += result.consumed
            pos = start
            continue
        pos += 1
        if decoder.latched:
            yield start, result
            decoder.reset()
            start = pos
    if not decoder.idle:
        yield start, decoder.result


def units_to_bytes(units: Sequence[int], byte_order: ByteOrder = ByteOrder.BIG) -> bytes:
    """Serialize 16-bit units, two bytes each, in the given order."""
    return b"".join(check_unit(u).to_bytes(2, byte_order.value) for u in units)


def bytes_to_units(data: bytes, byte_order: ByteOrder = ByteOrder.BIG) -> tuple[int, ...]:
    if len(data) % 2:
        raise ValueError(f"UTF-16 data must have an even length, got {len(data)}")
    return tuple(int.from_bytes(data[i:i + 2], byte_order.value)
                 for i in range(0, len(data), 2))
