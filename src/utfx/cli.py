"""
Command-line interface for utfx.

Encode, decode, classify and scan from the shell.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .core.config import ByteOrder, CodecConfig
from .core.flags import describe
from .core.lengths import utf8_length, utf16_length
from .core.properties import classify
from .codec.utf8 import decode_utf8, encode_utf8, iter_utf8
from .codec.utf16 import decode_utf16, encode_utf16, units_to_bytes
from .codec.transcode import utf8_to_utf16, utf16_to_utf8

logger = logging.getLogger(__name__)


def parse_codepoint(text: str) -> int:
    """Parse U+XXXX, 0xXXXX or decimal."""
    raw = text.strip()
    try:
        if raw[:2].upper() == "U+":
            value = int(raw[2:], 16)
        else:
            value = int(raw, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a codepoint: {text!r}") from None
    if not 0 <= value <= 0xFFFFFFFF:
        raise argparse.ArgumentTypeError(f"codepoint out of 32-bit range: {text!r}")
    return value


def _hex_ints(values: list[str], limit: int) -> list[int]:
    out = []
    for v in values:
        try:
            n = int(v, 16)
        except ValueError:
            raise argparse.ArgumentTypeError(f"not a hex value: {v!r}") from None
        if not 0 <= n <= limit:
            raise argparse.ArgumentTypeError(f"value out of range: {v!r}")
        out.append(n)
    return out


def _config(args: argparse.Namespace) -> CodecConfig:
    config = CodecConfig.from_env()
    if args.no_range_check:
        config = config.replace(range_check=False)
    if args.byte_order:
        config = config.replace(byte_order=ByteOrder.parse(args.byte_order))
    return config


def _fmt(units, width: int = 2) -> str:
    return " ".join(f"{u:0{width}X}" for u in units) or "-"


def cmd_encode(args: argparse.Namespace) -> int:
    """Encode a codepoint to UTF-8 and UTF-16."""
    config = _config(args)
    u8 = encode_utf8(args.codepoint, config.range_check)
    u16 = encode_utf16(args.codepoint)
    print(f"Codepoint:  U+{args.codepoint:04X}")
    print(f"UTF-8:      {_fmt(u8.output)}  [{describe(u8.status)}]")
    print(f"UTF-16:     {_fmt(u16.output, 4)}  [{describe(u16.status)}]")
    if u16.output:
        print(f"UTF-16 raw: {units_to_bytes(u16.output, config.byte_order).hex(' ').upper()}")
    print(f"Properties: {describe(u8.properties or classify(args.codepoint))}")
    return 1 if u8.error else 0


def cmd_decode(args: argparse.Namespace) -> int:
    """Decode one UTF-8 sequence."""
    config = _config(args)
    data = _hex_ints(args.bytes, 0xFF)
    result = decode_utf8(data, config.range_check)
    print(f"Bytes:      {_fmt(data)}")
    print(f"Value:      0x{result.value:X} ({result.consumed} bytes)")
    print(f"Status:     {describe(result.status)}")
    print(f"Properties: {describe(result.properties)}")
    print(f"UTF-16:     {_fmt(utf8_to_utf16(data, config.range_check).output, 4)}")
    return 1 if result.error else 0


def cmd_decode16(args: argparse.Namespace) -> int:
    """Decode one UTF-16 scalar."""
    config = _config(args)
    units = _hex_ints(args.units, 0xFFFF)
    result = decode_utf16(units)
    print(f"Units:      {_fmt(units, 4)}")
    print(f"Value:      0x{result.value:X} ({result.consumed} units)")
    print(f"Status:     {describe(result.status)}")
    print(f"Properties: {describe(result.properties)}")
    print(f"UTF-8:      {_fmt(utf16_to_utf8(units, config.range_check).output)}")
    return 1 if result.error else 0


def cmd_classify(args: argparse.Namespace) -> int:
    """Show properties and length classes of a value."""
    value = args.codepoint
    print(f"Value:      0x{value:X}")
    print(f"Properties: {describe(classify(value))}")
    print(f"UTF-8 len:  {utf8_length(value) or '-'}")
    print(f"UTF-16 len: {utf16_length(value) or '-'}")
    return 0


def cmd_scan(args: argparse.Namespace) -> int:
    """Walk a file scalar by scalar and report malformed sequences."""
    config = _config(args)
    data = Path(args.file).read_bytes()
    scalars = errors = 0
    for offset, result in iter_utf8(data, config.range_check):
        scalars += 1
        if result.error or result.underflow:
            errors += 1
            seq = data[offset:offset + max(result.consumed, 1)]
            print(f"{offset:>10}: {_fmt(seq):<18} [{describe(result.status)}]")
    logger.debug("Scanned %d bytes, %d scalars", len(data), scalars)
    print(f"{args.file}: {len(data)} bytes, {scalars} scalars, {errors} malformed")
    return 1 if errors else 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="utfx",
        description="UTF-8 / UTF-16 transcoding engine",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-range-check",
        action="store_true",
        help="Accept UTF-8 values above U+10FFFF (legacy 5- and 6-byte forms)",
    )
    parser.add_argument(
        "--byte-order",
        choices=[o.value for o in ByteOrder],
        help="Serialization order for raw UTF-16 units (default: $UTFX_BYTE_ORDER or big)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    encode_parser = subparsers.add_parser("encode", help="Encode a codepoint")
    encode_parser.add_argument("codepoint", type=parse_codepoint, help="U+XXXX, 0x... or decimal")
    encode_parser.set_defaults(func=cmd_encode)

    decode_parser = subparsers.add_parser("decode", help="Decode UTF-8 bytes")
    decode_parser.add_argument("bytes", nargs="+", help="Hex bytes, e.g. F0 9F 98 80")
    decode_parser.set_defaults(func=cmd_decode)

    decode16_parser = subparsers.add_parser("decode16", help="Decode UTF-16 units")
    decode16_parser.add_argument("units", nargs="+", help="Hex units, e.g. D83D DE00")
    decode16_parser.set_defaults(func=cmd_decode16)

    classify_parser = subparsers.add_parser("classify", help="Classify a value")
    classify_parser.add_argument("codepoint", type=parse_codepoint, help="U+XXXX, 0x... or decimal")
    classify_parser.set_defaults(func=cmd_classify)

    scan_parser = subparsers.add_parser("scan", help="Report malformed UTF-8 in a file")
    scan_parser.add_argument("file", help="File to scan")
    scan_parser.set_defaults(func=cmd_scan)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 2

    try:
        return args.func(args)
    except (argparse.ArgumentTypeError, ValueError) as e:
        parser.error(str(e))


if __name__ == "__main__":
    sys.exit(main())
