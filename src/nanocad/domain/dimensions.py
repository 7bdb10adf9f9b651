"""Dimension annotations — measured segment plus the annotation line.

Two ways to place the annotation line:

- ``dimen  <start>, <end>, <line_start>, <line_end> [, l<N>]`` — explicit
- ``odimen <start>, <end>, <direction>, <offset> [, l<N>]`` — parallel to the
  measured segment at a perpendicular distance

Direction tokens: ``u`` (above), ``d`` (below), ``l`` (left), ``r`` (right).
``u``/``d`` may be followed by ``l`` or ``r`` for a diagonal segment, which
displaces along the true perpendicular instead of the vertical only.

A :class:`Dimension` stores geometry only. :func:`annotate_dimension`
derives the presentation (label, marker pins, label anchor and rotation)
in y-up world coordinates.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from nanocad.domain.errors import ArityError, DimensionError
from nanocad.domain.types import Coordinate
from nanocad.domain.units import is_layer_token, parse_coordinates, parse_layer_num, to_base_unit

DEFAULT_PIN_LENGTH = 10

_AXES = frozenset("udlr")
_DIAGONAL_SUFFIXES = frozenset("lr")

Point = tuple[float, float]


@dataclass(frozen=True)
class Dimension:
    start: Coordinate
    end: Coordinate
    line_start: Coordinate
    line_end: Coordinate
    layer: int = 0

    @property
    def distance(self) -> float:
        """Euclidean length of the measured segment."""
        return math.hypot(self.end.x - self.start.x, self.end.y - self.start.y)

    @property
    def label(self) -> str:
        return f"{self.distance:.0f}"

    def to_dict(self) -> dict[str, object]:
        return {
            "start": self.start.as_tuple(),
            "end": self.end.as_tuple(),
            "line_start": self.line_start.as_tuple(),
            "line_end": self.line_end.as_tuple(),
            "layer": self.layer,
            "label": self.label,
        }


@dataclass(frozen=True)
class Direction:
    """Parsed offset direction: main axis plus optional diagonal flag."""

    axis: str
    diagonal: bool = False

    @classmethod
    def parse(cls, token: str) -> Direction:
        token = token.strip()
        valid = (len(token) == 1 and token in _AXES) or (
            len(token) == 2 and token[0] in "ud" and token[1] in _DIAGONAL_SUFFIXES
        )
        if not valid:
            raise DimensionError(
                f"Unknown dimension offset direction: '{token}'", detail={"direction": token}
            )
        return cls(axis=token[0], diagonal=len(token) == 2)


@dataclass(frozen=True)
class DimensionAnnotation:
    """Presentation geometry for one dimension.

    Attributes:
        text: Measured length rounded to the base unit.
        distance: Unrounded measured length.
        pins: Marker pin segments, one per annotation endpoint.
        anchor: Label position, between the pins nearer the measured line.
        angle: Label rotation in degrees, in ``[0, 360)``.
    """

    text: str
    distance: float
    pins: tuple[tuple[Point, Point], tuple[Point, Point]]
    anchor: Point
    angle: float


def canonical_order(start: Coordinate, end: Coordinate) -> tuple[Coordinate, Coordinate]:
    """Order a segment left to right, or top to bottom when vertical."""
    if start.x == end.x:
        return (start, end) if start.y > end.y else (end, start)
    return (start, end) if start.x < end.x else (end, start)


def offset_line(
    start: Coordinate, end: Coordinate, direction: Direction, offset: int
) -> tuple[Coordinate, Coordinate]:
    """Displace the measured segment by *offset* along its perpendicular.

    The unit vector of the canonically ordered segment, ``(ux, uy)``, points
    from its far end back to its first end. Its components pick the
    displacement: vertical moves use ``ux``, horizontal moves use ``uy``.
    """
    if start == end:
        raise DimensionError(
            f"Can't offset a zero-length dimension at {start.render()}",
            detail={"start": start.as_tuple()},
        )
    first, last = canonical_order(start, end)
    length = math.hypot(first.x - last.x, first.y - last.y)
    ux = (first.x - last.x) / length
    uy = (first.y - last.y) / length

    dx = dy = 0.0
    match direction.axis:
        case "u":
            dy = -offset * ux
            if direction.diagonal:
                dx = offset * uy
        case "d":
            dy = offset * ux
            if direction.diagonal:
                dx = -offset * uy
        case "r":
            dx = offset * uy
        case "l":
            dx = -offset * uy

    def shift(point: Coordinate) -> Coordinate:
        return Coordinate(round(point.x + dx), round(point.y + dy))

    return shift(start), shift(end)


def build_dimension(args: Sequence[str], *, is_offset: bool) -> Dimension:
    """Parse ``dimen``/``odimen`` arguments into a :class:`Dimension`.

    Raises:
        ArityError: Fewer than 4 or more than 5 arguments, or a fifth
            argument that is not a layer token.
        DimensionError: Unknown direction or zero-length offset segment.
    """
    args = list(args)
    layer = 0
    if len(args) == 5:
        if not is_layer_token(args[-1]):
            raise ArityError(
                f"Dimension's fifth argument must be a layer token, got '{args[-1]}'",
                detail={"argument": args[-1]},
            )
        layer = parse_layer_num(args.pop())
    if len(args) != 4:
        raise ArityError(
            f"Dimensions take 4 or 5 arguments, got {len(args)}",
            detail={"got": len(args)},
        )

    start = parse_coordinates(args[0])
    end = parse_coordinates(args[1])
    if is_offset:
        direction = Direction.parse(args[2])
        offset = to_base_unit(args[3])
        line_start, line_end = offset_line(start, end, direction, offset)
    else:
        line_start = parse_coordinates(args[2])
        line_end = parse_coordinates(args[3])

    return Dimension(start=start, end=end, line_start=line_start, line_end=line_end, layer=layer)


def annotate_dimension(dim: Dimension, pin_length: int = DEFAULT_PIN_LENGTH) -> DimensionAnnotation:
    """Compute label text, marker pins, label anchor and rotation for *dim*.

    The annotation line is taken left to right. Its left-hand normal ``n``
    points "up" for a horizontal line. Pins run ``pin_length`` either side
    of each endpoint along ``n``. The label anchor is the midpoint of the
    two pin ends on the measured line's side. The rotation is the line's
    slope, turned by 180 degrees when the measured line lies on the ``+n``
    side so the label reads along the dimension.
    """
    a1, a2 = sorted((dim.line_start, dim.line_end), key=lambda c: (c.x, c.y))
    length = math.hypot(a2.x - a1.x, a2.y - a1.y)
    if length == 0:
        raise DimensionError(
            f"Can't annotate a zero-length dimension line at {a1.render()}",
            detail={"line_start": a1.as_tuple()},
        )
    dx = (a2.x - a1.x) / length
    dy = (a2.y - a1.y) / length
    nx, ny = -dy, dx

    def pin(point: Coordinate) -> tuple[Point, Point]:
        return (
            (point.x + pin_length * nx, point.y + pin_length * ny),
            (point.x - pin_length * nx, point.y - pin_length * ny),
        )

    pins = (pin(a1), pin(a2))

    mid_x = (dim.start.x + dim.end.x) / 2
    mid_y = (dim.start.y + dim.end.y) / 2
    side = dx * (mid_y - a1.y) - dy * (mid_x - a1.x)
    near = 0 if side > 0 else 1
    anchor = (
        (pins[0][near][0] + pins[1][near][0]) / 2,
        (pins[0][near][1] + pins[1][near][1]) / 2,
    )

    angle = math.degrees(math.atan2(dy, dx))
    if side > 0:
        angle += 180
    angle %= 360

    return DimensionAnnotation(
        text=dim.label,
        distance=dim.distance,
        pins=pins,
        anchor=anchor,
        angle=angle,
    )
