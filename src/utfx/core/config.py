"""Codec configuration.

Defaults come from the environment:
    UTFX_RANGE_CHECK    Restrict UTF-8 to U+0000..U+10FFFF (default: 1)
    UTFX_BYTE_ORDER     Raw codepoint / UTF-16 unit order: big or little (default: big)
"""

import os
from dataclasses import dataclass, replace
from enum import Enum

ENV_RANGE_CHECK = "UTFX_RANGE_CHECK"
ENV_BYTE_ORDER = "UTFX_BYTE_ORDER"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class ByteOrder(Enum):
    BIG = "big"
    LITTLE = "little"

    @classmethod
    def parse(cls, name: str) -> "ByteOrder":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"Byte order must be 'big' or 'little', got {name!r}") from None


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be one of {_TRUE + _FALSE}, got {raw!r}")


@dataclass(frozen=True)
class CodecConfig:
    range_check: bool = True
    byte_order: ByteOrder = ByteOrder.BIG

    @classmethod
    def from_env(cls, environ=None) -> "CodecConfig":
        """Build a config from UTFX_* variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        return cls(
            range_check=_parse_bool(ENV_RANGE_CHECK, env.get(ENV_RANGE_CHECK, "1")),
            byte_order=ByteOrder.parse(env.get(ENV_BYTE_ORDER, "big")),
        )

    def replace(self, **changes) -> "CodecConfig":
        return replace(self, **changes)


DEFAULT_CONFIG = CodecConfig()
