"""Drawable primitives and their construction from command arguments.

An object is built once from its argument list and is immutable after
that. Argument layout for every primitive::

    <point1>, <point2> [, l<N>] [= &name]

The second point may be relative (``w``/``h``) to the first. The layer
token is optional. The tokenizer stores a ``= &name`` binding as the last
argument and never substitutes it. Comma arguments are always substituted,
so ``&name`` after a comma is a reference to an existing object.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from nanocad.domain.errors import ArityError, ObjectError
from nanocad.domain.types import Coordinate, ObjectType, Sigil
from nanocad.domain.units import is_layer_token, parse_coordinates, parse_layer_num

POINT_COUNTS: dict[ObjectType, int] = {
    ObjectType.LINE: 2,
    ObjectType.RECT: 2,
    ObjectType.CIRCLE: 2,
}


@dataclass(frozen=True)
class CadObject:
    """A primitive stored as its ordered coordinate list.

    Line: the two endpoints. Rect: two opposite corners. Circle: the
    centre followed by a point on the circumference.
    """

    id: int
    type: ObjectType
    layer: int
    coords: tuple[Coordinate, ...]

    @property
    def radius(self) -> float:
        """Circle radius (distance from centre to the circumference point)."""
        if self.type is not ObjectType.CIRCLE:
            raise ObjectError(f"Object {self.id} is a {self.type}, not a circle")
        center, edge = self.coords
        return math.hypot(edge.x - center.x, edge.y - center.y)

    def bounding_box(self) -> tuple[int, int, int, int]:
        """Return ``(min_x, min_y, max_x, max_y)``."""
        if self.type is ObjectType.CIRCLE:
            center = self.coords[0]
            r = math.ceil(self.radius)
            return (center.x - r, center.y - r, center.x + r, center.y + r)
        xs = [c.x for c in self.coords]
        ys = [c.y for c in self.coords]
        return (min(xs), min(ys), max(xs), max(ys))

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "type": str(self.type),
            "layer": self.layer,
            "coords": [c.as_tuple() for c in self.coords],
        }


@dataclass(frozen=True)
class ObjectArgs:
    """Argument list split into point arguments and trailing options."""

    points: tuple[str, ...]
    layer: int = 0
    binding: str | None = None


def parse_object_type(keyword: str) -> ObjectType:
    try:
        return ObjectType(keyword)
    except ValueError:
        raise ObjectError(f"Invalid object type '{keyword}'", detail={"type": keyword}) from None


def split_object_args(args: Sequence[str]) -> ObjectArgs:
    """Peel the ``&name`` binding, then the ``l<N>`` layer, off the end of *args*."""
    remaining = list(args)
    binding: str | None = None
    layer: int | None = None
    if remaining and remaining[-1].startswith(Sigil.OBJECT):
        binding = remaining.pop()
    if remaining and is_layer_token(remaining[-1]):
        layer = parse_layer_num(remaining.pop())
    return ObjectArgs(points=tuple(remaining), layer=layer or 0, binding=binding)


def build_object(object_id: int, obj_type: ObjectType, args: Sequence[str]) -> tuple[CadObject, str | None]:
    """Parse *args* into a new :class:`CadObject`.

    Returns the object and the ``&name`` it should be bound to, if any.
    Binding is left to the caller, which owns the variable store.

    Raises:
        ArityError: Wrong number of point arguments for *obj_type*.
        CoordinateError: A point argument does not parse.
    """
    parsed = split_object_args(args)
    expected = POINT_COUNTS[obj_type]
    if len(parsed.points) != expected:
        raise ArityError(
            f"'{obj_type}' takes {expected} points, got {len(parsed.points)}",
            detail={"expected": expected, "got": len(parsed.points)},
        )

    first = parse_coordinates(parsed.points[0])
    coords = [first]
    for text in parsed.points[1:]:
        coords.append(parse_coordinates(text, base=first))

    obj = CadObject(id=object_id, type=obj_type, layer=parsed.layer, coords=tuple(coords))
    return obj, parsed.binding
