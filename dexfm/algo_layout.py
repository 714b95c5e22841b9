"""Layout of the 32 DX7 operator algorithms for a compact diagram.

Each algorithm places its six operators on a small grid. Every operator
has a link style (how its output line runs to the next operator or to the
output bus) and a feedback style (how a feedback loop is drawn around it).
The rendering step turns the grid into pixel line segments.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "ALGORITHM_COUNT",
    "DrawnOperator",
    "LINE_WIDTH",
    "OperatorPlacement",
    "Segment",
    "algorithm_layout",
    "feedback_segments",
    "link_segments",
    "render_algorithm",
]

ALGORITHM_COUNT = 32
LINE_WIDTH = 3
LABEL_WIDTH = 16
LABEL_HEIGHT = 12

_CELL_WIDTH = 25
_CELL_HEIGHT = 21
_ORIGIN_X = 3
_ORIGIN_Y = 5


@dataclass(frozen=True)
class Segment:
    """A straight line from (x1, y1) to (x2, y2)."""

    x1: int
    y1: int
    x2: int
    y2: int
    width: int = LINE_WIDTH


@dataclass(frozen=True)
class OperatorPlacement:
    """Where an operator sits on the grid and how its lines are drawn."""

    op: int
    column: int
    row: int
    link: int
    feedback: int


@dataclass(frozen=True)
class DrawnOperator:
    """An operator resolved to pixels: label position, state and lines."""

    op: int
    x: int
    y: int
    active: bool
    segments: tuple[Segment, ...]

    @property
    def label(self) -> str:
        return str(self.op)


# Offsets (dx1, dy1, dx2, dy2) from an operator's label corner.
_LINK_SHAPES: dict[int, tuple[tuple[int, int, int, int], ...]] = {
    0: ((8, 12, 8, 21),),  # line down
    1: ((8, 12, 8, 18), (7, 18, 34, 18)),  # arrow to the right
    2: ((8, 12, 8, 19),),  # join from the left
    3: ((8, 12, 8, 21), (7, 18, 34, 18), (34, 17, 34, 21)),  # right and down
    4: (  # right, left and down
        (8, 12, 8, 21),
        (7, 18, 34, 18),
        (34, 17, 34, 21),
        (-17, 18, 8, 18),
        (-17, 17, -17, 21),
    ),
    6: ((8, 12, 8, 18), (7, 18, 58, 18)),  # long arrow to the right
    7: ((8, 12, 8, 19), (-17, 18, 9, 18)),  # arrow to the left
}

_FEEDBACK_SHAPES: dict[int, tuple[tuple[int, int, int, int], ...]] = {
    0: (),
    1: ((7, 0, 8, -5), (8, -4, 21, -4), (20, -4, 20, 15), (19, 15, 20, 16), (8, 15, 20, 15)),
    2: ((7, 0, 8, -5), (8, -4, 20, -4), (19, -4, 19, 59), (8, 58, 19, 58)),  # algorithm 4
    3: ((7, 0, 8, -5), (8, -4, 20, -4), (19, -4, 19, 37), (8, 36, 19, 36)),  # algorithm 6
    4: ((7, 0, 8, -5), (8, -4, -4, -4), (-3, -4, -3, 15), (-3, 15, 8, 15), (8, 15, 8, 12)),
}

# Per algorithm: (column, row, link, feedback) for operators 6 down to 1.
_LAYOUTS: tuple[tuple[tuple[int, int, int, int], ...], ...] = (
    ((3, 0, 0, 1), (3, 1, 0, 0), (3, 2, 0, 0), (3, 3, 2, 0), (2, 2, 0, 0), (2, 3, 1, 0)),
    ((3, 0, 0, 0), (3, 1, 0, 0), (3, 2, 0, 0), (3, 3, 2, 0), (2, 2, 0, 1), (2, 3, 1, 0)),
    ((3, 1, 0, 1), (3, 2, 0, 0), (3, 3, 2, 0), (2, 1, 0, 0), (2, 2, 0, 0), (2, 3, 1, 0)),
    ((3, 1, 0, 2), (3, 2, 0, 0), (3, 3, 2, 0), (2, 1, 0, 0), (2, 2, 0, 0), (2, 3, 1, 0)),
    ((4, 2, 0, 1), (4, 3, 2, 0), (3, 2, 0, 0), (3, 3, 1, 0), (2, 2, 0, 0), (2, 3, 1, 0)),
    ((4, 2, 0, 3), (4, 3, 2, 0), (3, 2, 0, 0), (3, 3, 1, 0), (2, 2, 0, 0), (2, 3, 1, 0)),
    ((4, 1, 0, 1), (4, 2, 7, 0), (3, 2, 0, 0), (3, 3, 2, 0), (2, 2, 0, 0), (2, 3, 1, 0)),
    ((4, 1, 0, 0), (4, 2, 7, 0), (3, 2, 0, 4), (3, 3, 2, 0), (2, 2, 0, 0), (2, 3, 1, 0)),
    ((4, 1, 0, 0), (4, 2, 7, 0), (3, 2, 0, 0), (3, 3, 2, 0), (2, 2, 0, 1), (2, 3, 1, 0)),
    ((2, 2, 0, 0), (1, 2, 1, 0), (2, 3, 1, 0), (3, 1, 0, 1), (3, 2, 0, 0), (3, 3, 2, 0)),
    ((2, 2, 0, 1), (1, 2, 1, 0), (2, 3, 1, 0), (3, 1, 0, 0), (3, 2, 0, 0), (3, 3, 2, 0)),
    ((3, 2, 7, 0), (2, 2, 0, 0), (1, 2, 1, 0), (2, 3, 6, 0), (4, 2, 0, 1), (4, 3, 2, 0)),
    ((3, 2, 7, 1), (2, 2, 0, 0), (1, 2, 1, 0), (2, 3, 6, 0), (4, 2, 0, 0), (4, 3, 2, 0)),
    ((3, 1, 0, 1), (2, 1, 1, 0), (3, 2, 0, 0), (3, 3, 2, 0), (2, 2, 0, 0), (2, 3, 1, 0)),
    ((3, 1, 0, 0), (2, 1, 1, 0), (3, 2, 0, 0), (3, 3, 2, 0), (2, 2, 0, 4), (2, 3, 1, 0)),
    ((4, 1, 0, 1), (4, 2, 7, 0), (3, 1, 0, 0), (3, 2, 0, 0), (2, 2, 1, 0), (3, 3, 0, 0)),
    ((4, 1, 0, 0), (4, 2, 7, 0), (3, 1, 0, 0), (3, 2, 0, 0), (2, 2, 1, 4), (3, 3, 0, 0)),
    ((4, 0, 0, 0), (4, 1, 0, 0), (4, 2, 7, 0), (3, 2, 0, 4), (2, 2, 1, 0), (3, 3, 0, 0)),
    ((3, 2, 3, 1), (4, 3, 2, 0), (3, 3, 1, 0), (2, 1, 0, 0), (2, 2, 0, 0), (2, 3, 1, 0)),
    ((4, 2, 0, 0), (3, 2, 1, 0), (4, 3, 2, 0), (1, 2, 3, 1), (2, 3, 6, 0), (1, 3, 1, 0)),
    ((3, 2, 3, 0), (4, 3, 2, 0), (3, 3, 1, 0), (1, 2, 3, 1), (2, 3, 1, 0), (1, 3, 1, 0)),
    ((3, 2, 4, 1), (4, 3, 2, 0), (3, 3, 1, 0), (2, 3, 1, 0), (1, 2, 0, 0), (1, 3, 1, 0)),
    ((3, 2, 3, 1), (4, 3, 2, 0), (3, 3, 1, 0), (2, 2, 0, 0), (2, 3, 1, 0), (1, 3, 1, 0)),
    ((3, 2, 4, 1), (4, 3, 2, 0), (3, 3, 1, 0), (2, 3, 1, 0), (1, 3, 1, 0), (0, 3, 1, 0)),
    ((3, 2, 3, 1), (4, 3, 2, 0), (3, 3, 1, 0), (2, 3, 1, 0), (1, 3, 1, 0), (0, 3, 1, 0)),
    ((4, 2, 0, 1), (3, 2, 1, 0), (4, 3, 2, 0), (2, 2, 0, 0), (2, 3, 6, 0), (1, 3, 1, 0)),
    ((4, 2, 0, 0), (3, 2, 1, 0), (4, 3, 2, 0), (2, 2, 0, 1), (2, 3, 6, 0), (1, 3, 1, 0)),
    ((4, 3, 2, 0), (3, 1, 0, 1), (3, 2, 0, 0), (3, 3, 1, 0), (2, 2, 0, 0), (2, 3, 1, 0)),
    ((4, 2, 0, 1), (4, 3, 2, 0), (3, 2, 0, 0), (3, 3, 1, 0), (2, 3, 1, 0), (1, 3, 1, 0)),
    ((4, 3, 2, 0), (3, 1, 0, 1), (3, 2, 0, 0), (3, 3, 1, 0), (2, 3, 1, 0), (1, 3, 1, 0)),
    ((4, 2, 0, 1), (4, 3, 2, 0), (3, 3, 1, 0), (2, 3, 1, 0), (1, 3, 1, 0), (0, 3, 1, 0)),
    ((5, 3, 2, 1), (4, 3, 1, 0), (3, 3, 1, 0), (2, 3, 1, 0), (1, 3, 1, 0), (0, 3, 1, 0)),
)


def _shape(x: int, y: int, offsets: tuple[tuple[int, int, int, int], ...]) -> tuple[Segment, ...]:
    return tuple(Segment(x + a, y + b, x + c, y + d) for a, b, c, d in offsets)


def algorithm_layout(algorithm: int) -> tuple[OperatorPlacement, ...]:
    """Return the placements of operators 6 to 1 for a zero-based algorithm.

    An algorithm outside 0..31 has no diagram and yields an empty tuple.
    """
    if not 0 <= algorithm < ALGORITHM_COUNT:
        return ()
    return tuple(
        OperatorPlacement(op, column, row, link, fb)
        for op, (column, row, link, fb) in zip(range(6, 0, -1), _LAYOUTS[algorithm])
    )


def link_segments(x: int, y: int, link: int) -> tuple[Segment, ...]:
    """Return the output lines of an operator whose label corner is at (x, y)."""
    return _shape(x, y, _LINK_SHAPES.get(link, ()))


def feedback_segments(x: int, y: int, fb: int) -> tuple[Segment, ...]:
    """Return the feedback loop lines of an operator whose label corner is at (x, y)."""
    return _shape(x, y, _FEEDBACK_SHAPES.get(fb, ()))


def render_algorithm(algorithm: int, op_status: str) -> tuple[DrawnOperator, ...]:
    """Resolve an algorithm diagram to pixels.

    ``op_status`` holds one character per operator, operator 6 first; an
    operator is drawn as active when its character is ``"1"``.
    """
    if len(op_status) != 6:
        raise ValueError(f"operator status must have 6 entries, got {len(op_status)}")
    drawn = []
    for place in algorithm_layout(algorithm):
        x = place.column * _CELL_WIDTH + _ORIGIN_X
        y = place.row * _CELL_HEIGHT + _ORIGIN_Y
        segments = link_segments(x, y, place.link) + feedback_segments(x, y, place.feedback)
        drawn.append(
            DrawnOperator(
                op=place.op,
                x=x,
                y=y,
                active=op_status[6 - place.op] == "1",
                segments=segments,
            )
        )
    return tuple(drawn)