"""Tests for the register interface emulation.

The register scenarios replay the reference harness: buffer capacities,
end-of-data flags, byte order, and the read-reset / write-reset split.
"""
import pytest

from utfx.core.config import ByteOrder, CodecConfig
from utfx.core.flags import PropertyFlags, StatusFlags
from utfx.port.device import Mode, RegisterPort, Report

READY = StatusFlags.READY
RETRY = StatusFlags.RETRY
ERROR = StatusFlags.ERROR
NONUNI = StatusFlags.NONUNICODE


def read_all(read, count):
    return [read() for _ in range(count)]


class TestReset:
    def test_read_mode_output(self, port):
        assert port.mode is Mode.READ
        assert port.output == 0x80

    def test_write_mode_output(self, port):
        port.write_byte(0x41)
        port.write_reset()
        assert port.mode is Mode.WRITE
        assert port.output == 0x00
        assert port.status == StatusFlags.UNDERFLOW


@pytest.mark.conformance
class TestByteBuffer:
    def test_write_until_full(self, port):
        flags = [port.write_byte(b) for b in (0xFD, 0xBE, 0xAC, 0x97, 0x86, 0xB5, 0xA4)]
        assert flags == [False, False, False, False, False, True, True]

    def test_readback(self, port):
        port.write_bytes([0xFD, 0xBE, 0xAC, 0x97, 0x86, 0xB5, 0xA4])
        expected = [(0xFD, False), (0xBE, False), (0xAC, False), (0x97, False),
                    (0x86, False), (0xB5, True), (0, True)]
        assert read_all(port.read_byte, 7) == expected
        port.read_reset()
        assert read_all(port.read_byte, 7) == expected

    def test_partial_readback(self, port):
        assert [port.write_byte(b) for b in (0xFD, 0xBE, 0xAC)] == [False, False, False]
        expected = [(0xFD, False), (0xBE, False), (0xAC, True), (0, True)]
        assert read_all(port.read_byte, 4) == expected
        port.read_reset()
        assert read_all(port.read_byte, 4) == expected


@pytest.mark.conformance
class TestCodepointRegister:
    def test_big_endian_shift(self, port):
        flags = [port.write_char(b) for b in (11, 22, 33, 44, 55)]
        assert flags == [False, False, False, True, True]
        expected = [(22, False), (33, False), (44, False), (55, True), (0, True)]
        assert read_all(port.read_char, 5) == expected
        port.read_reset()
        assert read_all(port.read_char, 5) == expected

    def test_little_endian_ignores_extra(self):
        port = RegisterPort(CodecConfig(byte_order=ByteOrder.LITTLE))
        flags = [port.write_char(b) for b in (11, 22, 33, 44, 55)]
        assert flags == [False, False, False, True, True]
        expected = [(11, False), (22, False), (33, False), (44, True), (0, True)]
        assert read_all(port.read_char, 5) == expected
        port.read_reset()
        assert read_all(port.read_char, 5) == expected

    def test_big_endian_partial(self, port):
        assert [port.write_char(b) for b in (111, 222)] == [False, False]
        expected = [(0, False), (0, False), (111, False), (222, True), (0, True)]
        assert read_all(port.read_char, 5) == expected

    def test_little_endian_partial(self, port):
        port.configure(byte_order=ByteOrder.LITTLE)
        port.write_reset()
        assert [port.write_char(b) for b in (111, 222)] == [False, False]
        expected = [(111, False), (222, False), (0, False), (0, True), (0, True)]
        assert read_all(port.read_char, 5) == expected

    def test_partial_is_underflow(self, port):
        port.write_char(0x41)
        assert port.status == StatusFlags.UNDERFLOW
        assert port.read_bytes() == b""


@pytest.mark.conformance
class TestEncodeThroughPort:
    def encode(self, port, cp):
        assert port.write_codepoint(cp)
        status, props = port.status, port.properties
        data = port.read_bytes()
        port.write_reset()
        return status, props, data

    def test_ascii(self, port):
        assert self.encode(port, 0x41) == (READY, PropertyFlags.NORMAL, b"A")

    def test_noncharacter(self, port):
        status, props, data = self.encode(port, 0x10FFFF)
        assert status == READY
        assert props == PropertyFlags.NONCHARACTER | PropertyFlags.SUPPLEMENTARY
        assert data == b"\xF4\x8F\xBF\xBF"

    def test_range_check(self, port):
        assert self.encode(port, 0x110000) == (NONUNI | ERROR, PropertyFlags.NONE, b"")
        port.configure(range_check=False)
        status, props, data = self.encode(port, 0x110000)
        assert status == READY | NONUNI
        assert props == PropertyFlags.PRIVATE | PropertyFlags.SUPPLEMENTARY
        assert data == b"\xF4\x90\x80\x80"

    def test_output_field(self, port):
        port.write_codepoint(0x80)
        assert port.output == 0x40 | int(READY)
        port.report = Report.PROPERTIES
        assert port.field == int(PropertyFlags.CONTROL)

    def test_bytes_eof_on_last(self, port):
        port.write_codepoint(0xE9)
        assert port.read_byte() == (0xC3, False)
        assert port.read_byte() == (0xA9, True)
        assert port.byte_eof

    def test_reread_is_identical(self, port):
        port.write_codepoint(0x1F600)
        first = read_all(port.read_byte, 5)
        status = port.status
        port.read_reset()
        assert read_all(port.read_byte, 5) == first
        assert port.status == status
        assert [b for b, _ in first[:4]] == [0xF0, 0x9F, 0x98, 0x80]


@pytest.mark.conformance
class TestDecodeThroughPort:
    def test_decode(self, port):
        port.write_bytes(b"\xE2\x82\xAC")
        assert port.status == READY
        assert port.read_codepoint() == 0x20AC

    @pytest.mark.parametrize("pad", [0x00, 0x33, 0x99, 0xCC, 0xFF])
    def test_byte_after_ready_needs_retry(self, port, pad):
        port.write_bytes(b"\xE2\x82\xAC")
        port.read_codepoint()
        port.read_reset()
        port.write_byte(pad)
        assert port.status == READY | RETRY | ERROR
        assert port.properties == PropertyFlags.NORMAL
        assert port.read_codepoint() == 0x20AC

    def test_continuation_while_underflow(self, port):
        port.write_byte(0xE0)
        port.write_byte(0x99)
        assert port.status == StatusFlags.UNDERFLOW

    def test_non_continuation_while_underflow(self, port):
        port.write_byte(0xE0)
        port.write_byte(0x33)
        assert port.status == RETRY | ERROR

    def test_overlong(self, port):
        port.write_bytes(b"\xC0\x80")
        assert port.status == StatusFlags.OVERLONG | ERROR
        assert port.read_codepoint() == 0

    def test_range_check_applies_to_decoder(self, port):
        port.configure(range_check=False)
        port.write_bytes(b"\xF8\x88\x80\x80\x80")
        assert port.status == READY | NONUNI
        assert port.read_codepoint() == 0x200000

    @pytest.mark.conformance
    @pytest.mark.parametrize("data, status, value", [
        (b"\xFC\x84\x80\x80\x80\x80", READY | NONUNI, 0x4000000),
        (b"\xFC\x80\x80\x80\x80\x80", StatusFlags.OVERLONG | ERROR, 0),
    ])
    def test_byte_after_full_buffer_needs_retry(self, port, data, status, value):
        port.configure(range_check=False)
        assert port.write_bytes(data)
        assert port.status == status
        assert port.read_codepoint() == value
        port.read_reset()
        assert port.write_byte(0x33)
        assert port.status == status | RETRY | ERROR
        assert port.read_codepoint() == value
        assert port.read_bytes() == data


class TestTranscodeThroughPort:
    def test_utf8_to_utf16(self, port):
        port.write_bytes(b"\xF0\x9F\x98\x80")
        assert port.read_units() == (0xD83D, 0xDE00)
        assert port.unit_eof

    def test_utf16_to_utf8(self, port):
        assert port.write_units([0xD83D, 0xDE00])
        assert port.read_bytes() == b"\xF0\x9F\x98\x80"
        assert port.read_codepoint() == 0x1F600

    def test_unit_buffer_full(self, port):
        assert [port.write_unit(u) for u in (0x41, 0x42, 0x43)] == [False, True, True]

    def test_unit_after_full_pair_needs_retry(self, port):
        port.write_units([0xD83D, 0xDE00])
        assert port.status == READY
        assert port.write_unit(0x41)
        assert port.status == READY | RETRY | ERROR
        assert port.value == 0x1F600
        assert port.read_units() == (0xD83D, 0xDE00)

    def test_unpaired_surrogate(self, port):
        port.write_units([0xD800, 0x0041])
        assert port.status == RETRY | ERROR
        assert port.value == 0xD800
        assert port.properties == PropertyFlags.SURROGATE | PropertyFlags.SUPPLEMENTARY
        assert port.read_units() == (0xD800, 0x0041)
        assert port.read_bytes() == b""

    def test_codepoint_to_units(self, port):
        port.write_codepoint(0x10000)
        assert port.read_units() == (0xD800, 0xDC00)
        assert port.status == READY

    def test_switching_input_resets(self, port):
        port.write_byte(0x41)
        port.write_unit(0x42)
        assert port.read_bytes() == b"B"

    def test_bad_values(self, port):
        with pytest.raises(ValueError):
            port.write_byte(0x100)
        with pytest.raises(ValueError):
            port.write_unit(-1)
