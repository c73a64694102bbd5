"""UTF-8 encoder and decoders, including the historical 5- and 6-byte forms.

Three entry points:
- encode_utf8(): codepoint -> 0-6 bytes.
- decode_utf8(): one delimited byte sequence -> value + status.
- Utf8Decoder: incremental, one byte per feed(), with resynchronization.

Malformed input never raises; it is reported through StatusFlags.
"""

from dataclasses import replace
from typing import Iterator, Sequence

from ..core.flags import StatusFlags, PropertyFlags, is_terminal
from ..core.lengths import (
    CLASS_BY_LENGTH,
    MAX_LEGACY,
    MAX_UINT32,
    MAX_UNICODE,
    PAYLOAD_BITS,
    CONTINUATION_TAG,
    lead_class,
    is_continuation,
    utf8_length,
)
from ..core.properties import classify
from ..core.results import DecodeResult, EncodeResult, underflow

_LOW6 = 0x3F


def check_byte(value: int) -> int:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"Byte must be 0-255, got {value}")
    return value


def check_codepoint(value: int) -> int:
    if not 0 <= value <= MAX_UINT32:
        raise ValueError(f"Codepoint must be a 32-bit unsigned value, got {value}")
    return value


def encode_utf8(codepoint: int, range_check: bool = True) -> EncodeResult:
    """Encode one codepoint in its minimal UTF-8 form.

    Values above 0x7FFFFFFF have no form at all (INVALID|ERROR). With
    range_check, values above U+10FFFF are rejected (NONUNICODE|ERROR);
    without it they are encoded and flagged NONUNICODE for information.
    """
    check_codepoint(codepoint)
    if codepoint > MAX_LEGACY:
        return EncodeResult(StatusFlags.INVALID | StatusFlags.ERROR,
                            PropertyFlags.NONE, codepoint)

    nonunicode = codepoint > MAX_UNICODE
    if nonunicode and range_check:
        return EncodeResult(StatusFlags.NONUNICODE | StatusFlags.ERROR,
                            PropertyFlags.NONE, codepoint)

    lc = CLASS_BY_LENGTH[utf8_length(codepoint)]
    trailing = [CONTINUATION_TAG | (codepoint >> (PAYLOAD_BITS * i)) & _LOW6
                for i in reversed(range(lc.length - 1))]
    lead = lc.lead_tag | (codepoint >> (PAYLOAD_BITS * (lc.length - 1))) & lc.payload_mask

    status = StatusFlags.READY
    if nonunicode:
        status |= StatusFlags.NONUNICODE
    return EncodeResult(status, classify(codepoint), codepoint, (lead, *trailing))


def _validate(value: int, trailing: Sequence[int], length: int,
              range_check: bool) -> StatusFlags:
    if not all(is_continuation(b) for b in trailing):
        return StatusFlags.INVALID | StatusFlags.ERROR
    if utf8_length(value) < length:
        return StatusFlags.OVERLONG | StatusFlags.ERROR
    if value > MAX_UNICODE:
        if range_check:
            return StatusFlags.NONUNICODE | StatusFlags.ERROR
        return StatusFlags.READY | StatusFlags.NONUNICODE
    return StatusFlags.READY


def decode_utf8(data: Sequence[int], range_check: bool = True) -> DecodeResult:
    """Decode the sequence that starts at data[0].

    The leading byte fixes the target length L; bytes past L are ignored.
    The raw value is assembled from payload bits before the trailing bytes
    are validated, so it is reported even for INVALID and OVERLONG input.
    Fewer than L bytes is UNDERFLOW with the partial value.
    """
    if not data:
        return underflow()
    lead = check_byte(data[0])
    lc = lead_class(lead)
    if lc is None:
        return DecodeResult(StatusFlags.INVALID | StatusFlags.ERROR,
                            classify(lead), lead, 1)

    trailing = [check_byte(b) for b in data[1:lc.length]]
    value = lead & lc.payload_mask
    for b in trailing:
        value = value << PAYLOAD_BITS | b & _LOW6

    if len(trailing) < lc.length - 1:
        return underflow(value, 1 + len(trailing))

    status = _validate(value, trailing, lc.length, range_check)
    return DecodeResult(status, classify(value), value, lc.length)


class Utf8Decoder:
    """Incremental UTF-8 decoder for one logical channel.

    States: idle (nothing fed), accumulating (leading byte seen, waiting
    for continuations) and latched (terminal result). The decoder only
    ever accepts continuation bytes after the leading byte; anything else
    is refused with RETRY|ERROR and left for the caller to re-offer after
    reset(). Any byte fed once a result is latched is refused the same way,
    with the latched value kept visible.
    """

    def __init__(self, range_check: bool = True):
        self.range_check = range_check
        self.reset()

    def reset(self):
        """Discard accumulated bytes and any latched result."""
        self._buffer: list[int] = []
        self._result = underflow()

    @property
    def result(self) -> DecodeResult:
        return self._result

    @property
    def pending(self) -> tuple[int, ...]:
        """Bytes consumed into the current sequence."""
        return tuple(self._buffer)

    @property
    def idle(self) -> bool:
        return not self._buffer and not is_terminal(self._result.status)

    @property
    def latched(self) -> bool:
        return is_terminal(self._result.status)

    def _refuse(self) -> DecodeResult:
        self._result = replace(
            self._result,
            status=self._result.status | StatusFlags.RETRY | StatusFlags.ERROR,
        )
        return self._result

    def feed(self, byte: int) -> DecodeResult:
        """Offer one byte and return the decoder's current result."""
        check_byte(byte)
        if self.latched:
            return self._refuse()
        if self._buffer and not is_continuation(byte):
            return self._refuse()
        self._buffer.append(byte)
        self._result = decode_utf8(self._buffer, self.range_check)
        return self._result

    def feed_all(self, data: Sequence[int]) -> DecodeResult:
        """Feed bytes until a result latches; the rest are not offered."""
        for b in data:
            self.feed(b)
            if self.latched:
                break
        return self._result


def iter_utf8(data: Sequence[int], range_check: bool = True
              ) -> Iterator[tuple[int, DecodeResult]]:
    """Walk a buffer one scalar at a time, yielding (offset, result).

    After every terminal result the decoder is reset. A refused byte ends
    the current sequence (reported with RETRY|ERROR) and is re-offered as
    the start of the next one. A sequence cut short by the end of the
    buffer is yielded last as UNDERFLOW.
    """
    decoder = Utf8Decoder(range_check)
    start = pos = 0
    while pos < len(data):
        result = decoder.feed(data[pos])
        if result.retry:
            yield start, result
            decoder.reset()
            start = pos
            continue
        pos += 1
        if decoder.latched:
            yield start, result
            decoder.reset()
            start = pos
    if not decoder.idle:
        yield start, decoder.result
