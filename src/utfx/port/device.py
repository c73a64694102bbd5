"""Software emulation of the strobe-driven register interface.

One RegisterPort is one logical channel. It holds three write-side
structures and serves three read-side views of the latched input:

    bytes      raw UTF-8 buffer, capacity 6
    codepoint  32-bit register, serialized 4 bytes at a time
    units      UTF-16 buffer, capacity 2

Reading the structure that was last written returns the data as written;
reading another structure returns the conversion of that input (decode,
encode or transcode). The output field mirrors the hardware: bits 0-5
carry StatusFlags or PropertyFlags depending on the report select, bit 6
the codepoint end-of-data flag, bit 7 the byte end-of-data flag.

read_reset() rewinds only the read cursors, so a latched result can be
re-read unchanged. write_reset() clears everything and starts a fresh
sequence.
"""

import logging
from enum import Enum

from ..core.config import ByteOrder, CodecConfig
from ..core.flags import FIELD_MASK, PropertyFlags, StatusFlags
from ..codec.transcode import Utf8ToUtf16, Utf16ToUtf8
from ..codec.utf8 import check_byte, encode_utf8
from ..codec.utf16 import check_unit, encode_utf16

logger = logging.getLogger(__name__)

BYTE_CAPACITY = 6
CODEPOINT_WIDTH = 4
UNIT_CAPACITY = 2

CODEPOINT_EOF_BIT = 0x40
BYTE_EOF_BIT = 0x80


class Mode(Enum):
    WRITE = "write"
    READ = "read"


class Report(Enum):
    STATUS = "status"
    PROPERTIES = "properties"


class Channel(Enum):
    BYTES = "bytes"
    CODEPOINT = "codepoint"
    UNITS = "units"


# Which view an input is converted to when nothing has been read yet
_DEFAULT_TARGET = {
    None: Channel.BYTES,
    Channel.BYTES: Channel.CODEPOINT,
    Channel.CODEPOINT: Channel.BYTES,
    Channel.UNITS: Channel.CODEPOINT,
}


class RegisterPort:
    def __init__(self, config: CodecConfig | None = None,
                 report: Report = Report.STATUS):
        self.config = config or CodecConfig()
        self.report = report
        self.mode = Mode.READ
        self.write_reset()

    # ---- Configuration ----

    def configure(self, **changes):
        """Change configuration bits; applies to the sequence in progress."""
        self.config = self.config.replace(**changes)
        self._utf8.decoder.range_check = self.config.range_check
        self._utf16.range_check = self.config.range_check
        logger.debug("Port configured: %s", self.config)

    # ---- Resets ----

    def write_reset(self):
        """Full reset: clear every accumulator and the latched result."""
        self._written: Channel | None = None
        self._target = _DEFAULT_TARGET[None]
        self._bytes: list[int] = []
        self._units: list[int] = []
        self._codepoint = 0
        self._codepoint_count = 0
        self._utf8 = Utf8ToUtf16(self.config.range_check)
        self._utf16 = Utf16ToUtf8(self.config.range_check)
        self.read_reset()
        logger.debug("Port write reset")

    def read_reset(self):
        """Rewind the read cursors without touching the latched result."""
        self._cursors = {channel: 0 for channel in Channel}

    def _begin_write(self, channel: Channel):
        self.mode = Mode.WRITE
        if self._written is not None and self._written is not channel:
            logger.debug("Switching input from %s to %s, resetting",
                         self._written.value, channel.value)
            self.write_reset()
        self._written = channel
        self._target = _DEFAULT_TARGET[channel]
        self.read_reset()

    # ---- Write strobes ----

    def write_byte(self, value: int) -> bool:
        """Write one byte to the UTF-8 buffer; returns the buffer-full flag."""
        check_byte(value)
        self._begin_write(Channel.BYTES)
        if len(self._bytes) >= BYTE_CAPACITY:
            # not stored, but the latched decoder still sees it
            logger.debug("Byte buffer full, not storing 0x%02X", value)
            self._utf8.feed(value)
            return True
        self._bytes.append(value)
        result = self._utf8.feed(value)
        if result.retry:
            logger.debug("Byte 0x%02X refused, resynchronization required", value)
        return len(self._bytes) >= BYTE_CAPACITY

    def write_char(self, value: int) -> bool:
        """Write one byte of the codepoint register in the configured order."""
        check_byte(value)
        self._begin_write(Channel.CODEPOINT)
        if self.config.byte_order is ByteOrder.BIG:
            self._codepoint = (self._codepoint << 8 | value) & 0xFFFFFFFF
            self._codepoint_count += 1
        elif self._codepoint_count < CODEPOINT_WIDTH:
            self._codepoint |= value << (8 * self._codepoint_count)
            self._codepoint_count += 1
        return self._codepoint_count >= CODEPOINT_WIDTH

    def write_unit(self, value: int) -> bool:
        """Write one 16-bit unit to the UTF-16 buffer; returns buffer-full."""
        check_unit(value)
        self._begin_write(Channel.UNITS)
        if len(self._units) >= UNIT_CAPACITY:
            logger.debug("Unit buffer full, not storing 0x%04X", value)
            self._utf16.feed(value)
            return True
        self._units.append(value)
        self._utf16.feed(value)
        return len(self._units) >= UNIT_CAPACITY

    # ---- Resolution ----

    def _codepoint_ready(self) -> bool:
        return self._codepoint_count >= CODEPOINT_WIDTH

    def _outcome(self, target: Channel):
        """Return (status, properties, value, output) for a read view."""
        if self._written is Channel.BYTES:
            t = self._utf8.result
            output = {Channel.BYTES: tuple(self._bytes),
                      Channel.UNITS: t.output}.get(target, ())
            return t.status, t.properties, t.value, output
        if self._written is Channel.UNITS:
            t = self._utf16.result
            output = {Channel.UNITS: tuple(self._units),
                      Channel.BYTES: t.output}.get(target, ())
            return t.status, t.properties, t.value, output
        if self._written is Channel.CODEPOINT and self._codepoint_ready():
            if target is Channel.UNITS:
                e = encode_utf16(self._codepoint)
            else:
                e = encode_utf8(self._codepoint, self.config.range_check)
            return e.status, e.properties, self._codepoint, e.output
        return StatusFlags.UNDERFLOW, PropertyFlags.NONE, self._codepoint, ()

    def _view(self, target: Channel) -> tuple[int, ...]:
        if target is Channel.CODEPOINT:
            value = self._outcome(target)[2]
            return tuple(value.to_bytes(CODEPOINT_WIDTH, self.config.byte_order.value))
        return self._outcome(target)[3]

    @property
    def status(self) -> StatusFlags:
        return self._outcome(self._target)[0]

    @property
    def properties(self) -> PropertyFlags:
        return self._outcome(self._target)[1]

    @property
    def value(self) -> int:
        """The latched codepoint (raw, decoded or partially decoded)."""
        return self._outcome(self._target)[2]

    # ---- Read strobes ----

    def _read(self, target: Channel) -> tuple[int, bool]:
        self.mode = Mode.READ
        self._target = target
        view = self._view(target)
        cursor = self._cursors[target]
        item = view[cursor] if cursor < len(view) else 0
        if cursor < len(view):
            self._cursors[target] = cursor + 1
        return item, self._cursors[target] >= len(view)

    def read_byte(self) -> tuple[int, bool]:
        """Read the next UTF-8 byte; returns (byte, end_of_data)."""
        return self._read(Channel.BYTES)

    def read_char(self) -> tuple[int, bool]:
        """Read the next codepoint byte in the configured order."""
        return self._read(Channel.CODEPOINT)

    def read_unit(self) -> tuple[int, bool]:
        """Read the next UTF-16 unit; returns (unit, end_of_data)."""
        return self._read(Channel.UNITS)

    # ---- End-of-data and output field ----

    def _read_eof(self, target: Channel) -> bool:
        return self._cursors[target] >= len(self._view(target))

    @property
    def byte_eof(self) -> bool:
        if self.mode is Mode.WRITE:
            return len(self._bytes) >= BYTE_CAPACITY
        return self._read_eof(Channel.BYTES)

    @property
    def char_eof(self) -> bool:
        if self.mode is Mode.WRITE:
            return self._codepoint_ready()
        return self._read_eof(Channel.CODEPOINT)

    @property
    def unit_eof(self) -> bool:
        if self.mode is Mode.WRITE:
            return len(self._units) >= UNIT_CAPACITY
        return self._read_eof(Channel.UNITS)

    @property
    def field(self) -> int:
        """The 6-bit status or property field, per the report select."""
        if self.report is Report.STATUS:
            return int(self.status) & FIELD_MASK
        return int(self.properties) & FIELD_MASK

    @property
    def output(self) -> int:
        out = self.field
        if self.char_eof:
            out |= CODEPOINT_EOF_BIT
        if self.byte_eof:
            out |= BYTE_EOF_BIT
        return out

    # ---- Whole-structure helpers ----

    def write_bytes(self, data) -> bool:
        eof = False
        for b in data:
            eof = self.write_byte(b)
        return eof

    def write_codepoint(self, codepoint: int) -> bool:
        """Write a full 32-bit value, most or least significant byte first."""
        raw = (codepoint & 0xFFFFFFFF).to_bytes(CODEPOINT_WIDTH, self.config.byte_order.value)
        eof = False
        for b in raw:
            eof = self.write_char(b)
        return eof

    def write_units(self, units) -> bool:
        eof = False
        for u in units:
            eof = self.write_unit(u)
        return eof

    def _drain(self, target: Channel) -> list[int]:
        """Read a whole view from its start."""
        self.mode = Mode.READ
        self._target = target
        self._cursors[target] = 0
        view = self._view(target)
        return [self._read(target)[0] for _ in view]

    def read_bytes(self) -> bytes:
        return bytes(self._drain(Channel.BYTES))

    def read_codepoint(self) -> int:
        """Read all four codepoint bytes and assemble them."""
        raw = bytes(self._drain(Channel.CODEPOINT))
        return int.from_bytes(raw, self.config.byte_order.value)

    def read_units(self) -> tuple[int, ...]:
        return tuple(self._drain(Channel.UNITS))
