"""Transcoder: decode one scalar from one format, re-encode it in the other.

The status and properties handed back are always the decoder's. Output
is produced only when the decode is READY without ERROR; an encoder that
cannot represent the value (a NONUNICODE scalar headed for UTF-16) simply
yields no output.
"""

import logging
from typing import Sequence

from ..core.flags import describe
from ..core.results import DecodeResult, TranscodeResult
from .utf8 import Utf8Decoder, decode_utf8, encode_utf8
from .utf16 import Utf16Decoder, decode_utf16, encode_utf16

logger = logging.getLogger(__name__)


def _compose(decoded: DecodeResult, encode) -> TranscodeResult:
    output = ()
    if decoded.ready:
        encoded = encode(decoded.value)
        output = encoded.output
        if not output:
            logger.debug("No destination form for 0x%X (%s)", decoded.value,
                         describe(encoded.status))
    return TranscodeResult(decoded.status, decoded.properties, decoded.value,
                           output, decoded.consumed)


def utf8_to_utf16(data: Sequence[int], range_check: bool = True) -> TranscodeResult:
    """Transcode the UTF-8 sequence at data[0] to UTF-16 units."""
    return _compose(decode_utf8(data, range_check), encode_utf16)


def utf16_to_utf8(units: Sequence[int], range_check: bool = True) -> TranscodeResult:
    """Transcode the UTF-16 scalar at units[0] to UTF-8 bytes."""
    return _compose(decode_utf16(units),
                    lambda value: encode_utf8(value, range_check))


class Utf8ToUtf16:
    """Incremental UTF-8 -> UTF-16 channel."""

    def __init__(self, range_check: bool = True):
        self.decoder = Utf8Decoder(range_check)

    def reset(self):
        logger.debug("utf8->utf16 channel reset")
        self.decoder.reset()

    def feed(self, byte: int) -> TranscodeResult:
        return _compose(self.decoder.feed(byte), encode_utf16)

    @property
    def result(self) -> TranscodeResult:
        return _compose(self.decoder.result, encode_utf16)


class Utf16ToUtf8:
    """Incremental UTF-16 -> UTF-8 channel."""

    def __init__(self, range_check: bool = True):
        self.range_check = range_check
        self.decoder = Utf16Decoder()

    def reset(self):
        logger.debug("utf16->utf8 channel reset")
        self.decoder.reset()

    def _encode(self, value: int):
        return encode_utf8(value, self.range_check)

    def feed(self, unit: int) -> TranscodeResult:
        return _compose(self.decoder.feed(unit), self._encode)

    @property
    def result(self) -> TranscodeResult:
        return _compose(self.decoder.result, self._encode)
