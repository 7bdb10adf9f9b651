"""Core value types shared by every part of the engine.

Coordinates are integers in the base unit (millimetres). Primitive types
and variable sigils are string enums so they serialize as their literal
command-language spelling.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ObjectType(StrEnum):
    """Drawable primitives, spelled as their command keyword."""

    LINE = "line"
    RECT = "rect"
    CIRCLE = "circle"


class Sigil(StrEnum):
    """Leading character that selects a variable's kind."""

    FIXED = "$"
    COORD = "@"
    OBJECT = "&"


LAST_OBJECT = "^"


@dataclass(frozen=True, order=True)
class Coordinate:
    """An integer (x, y) point in the base unit."""

    x: int
    y: int

    def render(self) -> str:
        """Command-language spelling, e.g. ``x10;y20``."""
        return f"x{self.x};y{self.y}"

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)
