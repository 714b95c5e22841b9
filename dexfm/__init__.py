"""FM operator engines, envelope geometry, algorithm diagrams, editor theme and widget behaviour."""

__version__ = "0.1.0"