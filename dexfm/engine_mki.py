"""Operator engine modelled on the first-generation DX log-sine hardware.

A 1024-entry quarter-wave log-sine table and a 1024-entry exponential
table are built at import time. Outputs are 32-bit signed integers with
the same wrap-around behaviour as the hardware-style integer pipeline.
"""

from __future__ import annotations

import math
import struct
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from dexfm.engine_opl import FeedbackBuffer

__all__ = [
    "ENV_BITDEPTH",
    "ENV_MAX",
    "FeedbackBuffer",
    "MkIEngine",
    "NEGATIVE_BIT",
    "OperatorParams",
    "mki_sin",
    "mki_sin_log",
]

NEGATIVE_BIT = 0x8000
ENV_BITDEPTH = 14
ENV_MAX = 1 << ENV_BITDEPTH

_SINLOG_BITDEPTH = 10
_SINLOG_TABLESIZE = 1 << _SINLOG_BITDEPTH
_SINLOG_FILTER = _SINLOG_TABLESIZE - 1
_SINEXP_BITDEPTH = 10
_SINEXP_TABLESIZE = 1 << _SINEXP_BITDEPTH
_SINEXP_FILTER = 0x3FF
_PHASE_SHIFT = 22 - _SINLOG_BITDEPTH
_OUTPUT_SHIFT = 13


def _f32(value: float) -> float:
    """Round a double to the nearest single-precision value."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _round_positive(value: float) -> int:
    """Round half away from zero for a non-negative value."""
    return int(math.floor(value + 0.5))


def _int32(value: int) -> int:
    """Wrap an integer to the signed 32-bit range."""
    return ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000


def _build_sin_log_table() -> tuple[int, ...]:
    table = []
    for i in range(_SINLOG_TABLESIZE):
        x1 = _f32(math.sin(((0.5 + i) / _SINLOG_TABLESIZE) * math.pi / 2.0))
        value = _f32(-1024 * _f32(math.log2(x1)))
        table.append(_round_positive(value) & 0xFFFF)
    return tuple(table)


def _build_sin_exp_table() -> tuple[int, ...]:
    return tuple(
        _round_positive(_f32((2.0 ** (i / _SINEXP_TABLESIZE) - 1) * 4096)) & 0xFFFF
        for i in range(_SINEXP_TABLESIZE)
    )


_SIN_LOG_TABLE = _build_sin_log_table()
_SIN_EXP_TABLE = _build_sin_exp_table()


def mki_sin_log(phi: int) -> int:
    """Return the log-sine attenuation for a 12-bit phase, sign in bit 15."""
    phi &= 0xFFFF
    index = phi & _SINLOG_FILTER
    quadrant = phi & (_SINLOG_TABLESIZE * 3)
    if quadrant == 0:
        return _SIN_LOG_TABLE[index]
    if quadrant == _SINLOG_TABLESIZE:
        return _SIN_LOG_TABLE[index ^ _SINLOG_FILTER]
    if quadrant == _SINLOG_TABLESIZE * 2:
        return _SIN_LOG_TABLE[index] | NEGATIVE_BIT
    return _SIN_LOG_TABLE[index ^ _SINLOG_FILTER] | NEGATIVE_BIT


def mki_sin(phase: int, env: int) -> int:
    """Return the sine output for a 22-bit phase and a 14-bit attenuation."""
    exp_val = (mki_sin_log((_int32(phase) >> _PHASE_SHIFT) & 0xFFFF) + (env & 0xFFFF)) & 0xFFFF
    negative = bool(exp_val & NEGATIVE_BIT)
    exp_val &= ~NEGATIVE_BIT & 0xFFFF
    result = (4096 + _SIN_EXP_TABLE[(exp_val & _SINEXP_FILTER) ^ _SINEXP_FILTER]) & 0xFFFF
    result >>= exp_val >> 10
    if negative:
        return _int32((-result - 1) << _OUTPUT_SHIFT)
    return result << _OUTPUT_SHIFT


@dataclass
class OperatorParams:
    """Running state of one operator: phase, frequency, level and last gain."""

    phase: int = 0
    freq: int = 0
    level_in: int = 0
    gain_out: int = 0


def _held_gain(param: OperatorParams) -> tuple[int, int]:
    """Refresh ``param.gain_out`` and return the start gain and its step."""
    param.gain_out = _int32(ENV_MAX - (param.level_in >> (28 - ENV_BITDEPTH)))
    start = ENV_MAX - 1 if param.gain_out == 0 else param.gain_out
    return start, _int32(param.gain_out - start)


class MkIEngine:
    """Renders blocks of operator output with the log-sine approximation."""

    def __init__(self, block_size: int = 64) -> None:
        if block_size <= 0 or block_size & (block_size - 1):
            raise ValueError(f"block size must be a positive power of two, got {block_size}")
        self.block_size = block_size
        self._lg_n = block_size.bit_length() - 1

    def _dgain(self, gain1: int, gain2: int) -> int:
        return _int32(gain2 - gain1 + (self.block_size >> 1)) >> self._lg_n

    def _gains(self, gain1: int, gain2: int) -> Iterator[int]:
        dgain = self._dgain(gain1, gain2)
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
            output.append(_int32(mki_sin(_int32(phase + mod), gain) + extra))
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
            output.append(_int32(mki_sin(phase, gain) + extra))
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
            y = mki_sin(_int32(phase + scaled_fb), gain)
            output.append(_int32(y + extra))
            phase = _int32(phase + freq)
        feedback.previous = y0
        feedback.latest = y
        return output

    def _feedback_chain(
        self,
        params: Sequence[OperatorParams],
        count: int,
        gain01: int,
        gain02: int,
        feedback: FeedbackBuffer,
        fb_shift: int,
    ) -> list[int]:
        if len(params) < count:
            raise ValueError(f"a {count}-operator feedback chain needs {count} operators")
        ops = params[:count]
        phases = [p.phase for p in ops]
        gains = [gain01]
        dgains = [self._dgain(gain01, gain02)]
        for param in ops[1:]:
            start, step = _held_gain(param)
            gains.append(start)
            dgains.append(step)

        y0 = feedback.previous
        y = feedback.latest
        output = []
        for _ in range(self.block_size):
            scaled_fb = _int32(y0 + y) >> (fb_shift + 1)
            y0 = y
            modulation = scaled_fb
            for k, param in enumerate(ops):
                gains[k] = _int32(gains[k] + dgains[k])
                y = mki_sin(_int32(phases[k] + modulation), gains[k])
                phases[k] = _int32(phases[k] + param.freq)
                modulation = y
            output.append(y)
        feedback.previous = y0
        feedback.latest = y
        return output

    def compute_fb2(
        self,
        params: Sequence[OperatorParams],
        gain01: int,
        gain02: int,
        feedback: FeedbackBuffer,
        fb_shift: int,
    ) -> list[int]:
        """Render a two-operator feedback loop (algorithm 6 with feedback).

        Sets ``gain_out`` of the second operator and updates ``feedback``;
        operator phases are left for the caller to advance.
        """
        return self._feedback_chain(params, 2, gain01, gain02, feedback, fb_shift)

    def compute_fb3(
        self,
        params: Sequence[OperatorParams],
        gain01: int,
        gain02: int,
        feedback: FeedbackBuffer,
        fb_shift: int,
    ) -> list[int]:
        """Render a three-operator feedback loop (algorithm 4 with feedback).

        Sets ``gain_out`` of the second and third operators and updates
        ``feedback``; operator phases are left for the caller to advance.
        """
        return self._feedback_chain(params, 3, gain01, gain02, feedback, fb_shift)