"""Behaviour of the small editor widgets: level meter and program selector."""

from __future__ import annotations

__all__ = [
    "METER_BLOCKS",
    "PROGRAM_COUNT",
    "WheelAccumulator",
    "step_program",
    "vu_meter_breakpoint",
]

METER_BLOCKS = 46
_BLOCK_WIDTH = 3
_METER_MARGIN = 2

PROGRAM_COUNT = 32

DEFAULT_WHEEL_FACTOR = 0.2


def vu_meter_breakpoint(level: float) -> int:
    """Return how many pixels of the meter strip are lit for ``level``.

    A level of zero or below lights nothing. Levels are rounded to whole
    blocks, and anything above full scale lights every block.
    """
    if level <= 0:
        return 0
    blocks = min(round(METER_BLOCKS * level), METER_BLOCKS)
    return blocks * _BLOCK_WIDTH + _METER_MARGIN


def step_program(index: int, forward: bool) -> int:
    """Return the program after (or before) ``index``, wrapping around the cartridge."""
    if not 0 <= index < PROGRAM_COUNT:
        raise ValueError(f"program index must be between 0 and {PROGRAM_COUNT - 1}, got {index}")
    return (index + (1 if forward else -1)) % PROGRAM_COUNT


class WheelAccumulator:
    """Turns mouse-wheel movement into program steps.

    Movement accumulates until it passes ``factor`` in either direction; a
    higher factor makes the wheel slower. With ``reverse`` set the wheel
    direction is inverted.
    """

    def __init__(self, factor: float = DEFAULT_WHEEL_FACTOR, reverse: bool = True) -> None:
        if factor <= 0:
            raise ValueError(f"wheel factor must be positive, got {factor}")
        self.factor = factor
        self.reverse = reverse
        self.accumulated = 0.0

    def reset(self) -> None:
        """Forget any accumulated movement."""
        self.accumulated = 0.0

    def move(self, delta: float, index: int) -> int:
        """Add wheel movement and return the program index it selects."""
        self.accumulated += delta
        up = self.accumulated > self.factor
        down = self.accumulated < -self.factor
        sign = 1
        if self.reverse:
            up, down = down, up
            sign = -1
        if up:
            self.accumulated -= sign * self.factor
            return step_program(index, True)
        if down:
            self.accumulated += sign * self.factor
            return step_program(index, False)
        return index