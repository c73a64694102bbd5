"""Result records returned by the encoders, decoders and transcoder."""

from dataclasses import dataclass

from .flags import StatusFlags, PropertyFlags, describe


@dataclass(frozen=True)
class _Outcome:
    status: StatusFlags
    properties: PropertyFlags

    @property
    def ready(self) -> bool:
        """READY without ERROR: the value (and any output) can be used."""
        return bool(self.status & StatusFlags.READY) and not self.error

    @property
    def error(self) -> bool:
        return bool(self.status & StatusFlags.ERROR)

    @property
    def underflow(self) -> bool:
        """More input is needed; not an error."""
        return not self.status & (StatusFlags.READY | StatusFlags.ERROR)

    @property
    def retry(self) -> bool:
        return bool(self.status & StatusFlags.RETRY)


@dataclass(frozen=True)
class EncodeResult(_Outcome):
    codepoint: int
    output: tuple[int, ...] = ()

    def as_bytes(self) -> bytes:
        return bytes(self.output)

    def __str__(self) -> str:
        units = " ".join(f"{u:02X}" for u in self.output) or "-"
        return (f"U+{self.codepoint:04X} -> {units} "
                f"[{describe(self.status)}] [{describe(self.properties)}]")


@dataclass(frozen=True)
class DecodeResult(_Outcome):
    value: int
    consumed: int = 0

    def __str__(self) -> str:
        return (f"0x{self.value:08X} ({self.consumed} consumed) "
                f"[{describe(self.status)}] [{describe(self.properties)}]")


@dataclass(frozen=True)
class TranscodeResult(_Outcome):
    value: int
    output: tuple[int, ...] = ()
    consumed: int = 0

    def as_bytes(self) -> bytes:
        return bytes(self.output)


def underflow(value: int = 0, consumed: int = 0) -> DecodeResult:
    return DecodeResult(StatusFlags.UNDERFLOW, PropertyFlags.NONE, value, consumed)
