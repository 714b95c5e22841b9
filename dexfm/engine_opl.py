"""OPL-style logarithmic sine operator engine.

Operators are computed through a quarter-wave log-sine table followed by
an exponential table, the way OPL-family chips produce their sine output.
All arithmetic follows 32-bit signed integer semantics.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

SIGN_BIT = 0x8000

_TABLE_SIZE = 256


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _build_sin_log_table() -> tuple[int, ...]:
    """Attenuation of a rising quarter sine wave, in 1/256 steps of log2."""
    return tuple(
        _round_half_up(-math.log2(math.sin((i + 0.5) * math.pi / (2 * _TABLE_SIZE))) * 256)
        for i in range(_TABLE_SIZE)
    )


def _build_sin_exp_table() -> tuple[int, ...]:
    """Fractional part of 2**(i/256), scaled to ten bits."""
    return tuple(
        _round_half_up((2.0 ** (i / _TABLE_SIZE) - 1.0) * 1024) for i in range(_TABLE_SIZE)
    )


_SIN_LOG_TABLE = _build_sin_log_table()
_SIN_EXP_TABLE = _build_sin_exp_table()


def _int32(value: int) -> int:
    """Wrap an integer to the signed 32-bit range."""
    return ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000


def sin_log(phi: int) -> int:
    """Return the log-sine attenuation for a 10-bit phase, sign in bit 15."""
    index = phi & 0xFF
    quadrant = phi & 0x300
    if quadrant == 0x000:
        return _SIN_LOG_TABLE[index]
    if quadrant == 0x100:
        return _SIN_LOG_TABLE[index ^ 0xFF]
    if quadrant == 0x200:
        return _SIN_LOG_TABLE[index] | SIGN_BIT
    return _SIN_LOG_TABLE[index ^ 0xFF] | SIGN_BIT


def opl_sin(phase: int, env: int) -> int:
    """Return the signed sine output for a phase (0..1023) and envelope (0..511).

    Sixteen envelope units are roughly 3 dB; the envelope is not range checked.
    """
    exp_val = (sin_log(phase & 0xFFFF) + ((env & 0xFFFF) << 3)) & 0xFFFF
    negative = bool(exp_val & SIGN_BIT)
    exp_val &= 0x7FFF
    result = ((0x400 + _SIN_EXP_TABLE[(exp_val & 0xFF) ^ 0xFF]) << 1) >> (exp_val >> 8)
    # one's complement for the negative half wave
    return -result - 1 if negative else result


@dataclass
class FeedbackBuffer:
    """The last two outputs of a self-modulating operator."""

    previous: int = 0
    latest: int = 0


class OplEngine:
    """Renders blocks of operator output with the OPL sine approximation."""

    def __init__(self, block_size: int = 64) -> None:
        if block_size <= 0 or block_size & (block_size - 1):
            raise ValueError(f"block size must be a positive power of two, got {block_size}")
        self.block_size = block_size
        self._lg_n = block_size.bit_length() - 1

    def _gains(self, gain1: int, gain2: int) -> Iterator[int]:
        dgain = (gain2 - gain1 + (self.block_size >> 1)) >> self._lg_n
        gain = gain1
        for _ in range(self.block_size):
            gain = _int32(gain + dgain)
            yield gain

    def _block(self, values: Sequence[int] | None, what: str) -> Sequence[int]:
        if values is None:
            return [0] * self.block_size
        if len(values) != self.block_size:
            raise ValueError(f"{what} must hold {self.block_size} samples, got {len(values)}")
        return values

    def compute(
        self,
        modulator: Sequence[int],
        phase0: int,
        freq: int,
        gain1: int,
        gain2: int,
        add_to: Sequence[int] | None = None,
    ) -> list[int]:
        """Render an operator phase-modulated by another block of samples."""
        modulator = self._block(modulator, "modulator")
        adder = self._block(add_to, "add_to")
        output = []
        phase = phase0
        for gain, mod, extra in zip(self._gains(gain1, gain2), modulator, adder):
            y = opl_sin(_int32(phase + mod) >> 14, gain)
            output.append(_int32((y << 14) + extra))
            phase = _int32(phase + freq)
        return output

    def compute_pure(
        self,
        phase0: int,
        freq: int,
        gain1: int,
        gain2: int,
        add_to: Sequence[int] | None = None,
    ) -> list[int]:
        """Render an unmodulated operator."""
        adder = self._block(add_to, "add_to")
        output = []
        phase = phase0
        for gain, extra in zip(self._gains(gain1, gain2), adder):
            y = opl_sin(phase >> 14, gain)
            output.append(_int32((y << 14) + extra))
            phase = _int32(phase + freq)
        return output

    def compute_fb(
        self,
        phase0: int,
        freq: int,
        gain1: int,
        gain2: int,
        feedback: FeedbackBuffer,
        fb_shift: int,
        add_to: Sequence[int] | None = None,
    ) -> list[int]:
        """Render an operator modulated by its own output; updates ``feedback``."""
        adder = self._block(add_to, "add_to")
        output = []
        phase = phase0
        y0 = feedback.previous
        y = feedback.latest
        for gain, extra in zip(self._gains(gain1, gain2), adder):
            scaled_fb = _int32(y0 + y) >> (fb_shift + 1)
            y0 = y
            y = _int32(opl_sin(_int32(phase + scaled_fb) >> 14, gain) << 14)
            output.append(_int32(y + extra))
            phase = _int32(phase + freq)
        feedback.previous = y0
        feedback.latest = y
        return output