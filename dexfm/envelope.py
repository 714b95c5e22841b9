"""Geometry of the operator envelope display.

Segment durations come from DX7 envelope timing tables; the shape places
the envelope breakpoints in a box of given width and height.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

# Table entries are kept in units of 1e-5 and built from runs of equal steps.
_UNIT = 100000


def _ramp(start: int, step: int, count: int) -> list[int]:
    return [start + step * i for i in range(count)]


def _scaled(values: list[int]) -> tuple[float, ...]:
    if len(values) != 128:
        raise AssertionError("envelope tables have 128 entries")
    return tuple(v / _UNIT for v in values)


_RISE_DURATION = _scaled(
    _ramp(3800000, -304000, 6)
    + _ramp(2064000, -216000, 5)
    + _ramp(1110000, -90000, 5)
    + _ramp(696000, -54000, 5)
    + _ramp(438000, -42000, 5)
    + _ramp(252000, -18000, 5)
    + _ramp(170000, -10000, 5)
    + [122962, 115925, 108887, 101850, 94813, 87775, 80737, 73700]
    + [69633, 65567, 61500]
    + [57833, 54167, 50500]
    + _ramp(47300, -3200, 3)
    + [37967, 35033, 32100]
    + [28083, 24067, 20050, 16033, 12017, 8000]
    + [7583, 7167, 6750, 6333, 5917, 5500]
    + [4350, 3200]
    + [2933, 2667, 2400]
    + _ramp(2200, -200, 3)
    + [1667, 1533, 1400]
    + _ramp(1300, -100, 6)
    + [800] * 3
    + [767, 733, 700]
    + [633, 567, 500, 433, 367, 300]
    + [300] * 31
)

_DECAY_DURATION = _scaled(
    _ramp(31800000, -3425000, 5)
    + [16780000, 15460001, 14139999, 12820000, 11500000]
    + _ramp(10460000, -1040000, 5)
    + _ramp(5834000, -466000, 5)
    + _ramp(3576000, -394000, 5)
    + _ramp(1824000, -176000, 5)
    + _ramp(1036000, -84000, 5)
    + _ramp(683250, -16750, 8)
    + _ramp(510000, -56000, 3)
    + [364833, 331667, 298500, 265333, 232167, 199000]
    + [177333, 155667, 134000]
    + [122333, 110667, 99000]
    + [89667, 80333, 71000]
    + _ramp(65000, -6000, 5)
    + [32333, 23667, 15000]
    + _ramp(12700, -2300, 3)
    + [7667, 7233, 6800]
    + _ramp(6100, -700, 3)
    + [4367, 4033, 3700]
    + _ramp(3300, -400, 3)
    + [2333, 2167, 2000]
    + [1767, 1533, 1300]
    + [1133, 967, 800]
    + [800] * 35
)

# The same percentage curve serves rising and falling segments.
_LEVEL_PERCENT = _scaled(
    [1] * 32
    + [501, 1001, 1500]
    + _ramp(2000, 800, 16)
    + _ramp(15000, 1000, 10)
    + _ramp(25100, 1100, 10)
    + _ramp(36500, 1500, 10)
    + _ramp(52000, 2000, 10)
    + _ramp(73200, 3200, 5)
    + _ramp(89500, 3500, 4)
    + [100000] * 28
)

# Sustain time added after the third segment, in seconds.
_SUSTAIN = 10.0
# The filled area is closed against this fixed corner of the display.
_BASE_X = 96
_BASE_Y = 32

Point = tuple[float, float]


def _check_index(value: int, what: str) -> int:
    if not 0 <= value < len(_LEVEL_PERCENT):
        raise ValueError(f"{what} must be between 0 and {len(_LEVEL_PERCENT) - 1}, got {value}")
    return value


def segment_duration(rate: int, level_from: int, level_to: int) -> float:
    """Return the time in seconds an envelope segment takes at ``rate``."""
    _check_index(rate, "rate")
    _check_index(level_from, "level")
    _check_index(level_to, "level")
    table = _RISE_DURATION if level_to > level_from else _DECAY_DURATION
    return table[rate] * abs(_LEVEL_PERCENT[level_to] - _LEVEL_PERCENT[level_from])


@dataclass(frozen=True)
class EnvelopeShape:
    """Breakpoints of an envelope laid out for display.

    ``points`` holds the start, the ends of the three attack/decay segments,
    the key-off point and the release end. ``markers`` maps an envelope
    position (0 to 4) to the points highlighted for it.
    """

    durations: tuple[float, float, float, float]
    keyoff: float
    release: float
    scale: float
    keyoff_x: float
    points: tuple[Point, ...]
    outline: tuple[Point, ...]
    markers: dict[int, tuple[Point, ...]] = field(default_factory=dict)


def envelope_shape(
    rates: Sequence[int], levels: Sequence[int], width: float, height: float
) -> EnvelopeShape:
    """Lay out a four-rate, four-level envelope in a ``width`` by ``height`` box."""
    rates = tuple(rates)
    levels = tuple(levels)
    if len(rates) != 4 or len(levels) != 4:
        raise ValueError("an envelope has exactly four rates and four levels")
    r1, r2, r3, r4 = rates
    l1, l2, l3, l4 = levels

    d1 = segment_duration(r1, l4, l1)
    d2 = segment_duration(r2, l1, l2)
    d3 = segment_duration(r3, l2, l3)
    d4 = segment_duration(r4, l3, l4)

    keyoff = d1 + d2 + d3 + _SUSTAIN
    release = d4
    scale = width / (keyoff + release)

    def level_y(level: int) -> int:
        return int(height - height / 99.0 * level)

    points: tuple[Point, ...] = (
        (0, level_y(l4)),
        (int(d1 * scale), level_y(l1)),
        (int((d1 + d2) * scale), level_y(l2)),
        (int((d1 + d2 + d3) * scale), level_y(l3)),
        (int(keyoff * scale), level_y(l3)),
        ((d1 + d2 + d3 + keyoff + d4) * scale, height - height / 99.0 * l4),
    )
    outline = ((0, _BASE_Y), *points, (_BASE_X, _BASE_Y), (0, _BASE_Y))
    markers = {
        0: (points[0],),
        1: (points[0], points[1]),
        2: (points[1], points[2]),
        3: (points[2], points[3]),
        4: (points[3], points[4]),
    }
    return EnvelopeShape(
        durations=(d1, d2, d3, d4),
        keyoff=keyoff,
        release=release,
        scale=scale,
        keyoff_x=keyoff * scale,
        points=points,
        outline=outline,
        markers=markers,
    )