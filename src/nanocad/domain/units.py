"""Unit conversion and coordinate argument parsing.

Pure functions, no engine state. Every numeric argument in the command
language goes through :func:`to_base_unit`; every point argument goes
through :func:`parse_coordinates`.

Grammar::

    number      := [+-.0-9]+ unit?
    unit        := "mm" | "cm" | "m"        (lowercase, optional)
    coordinate  := "x" number ";y" number   (absolute)
                 | "w" number               (width relative to a base point)
                 | "h" number               (height relative to a base point)
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, localcontext

from nanocad.domain.errors import CoordinateError, LineSyntaxError, UnitError
from nanocad.domain.types import Coordinate

UNIT_FACTORS: dict[str, int] = {
    "": 1,
    "mm": 1,
    "cm": 10,
    "m": 1000,
}

_FACTOR_DIGITS = len(str(max(UNIT_FACTORS.values())))

_NUMBER_CHARS = frozenset("0123456789+-.")

_ABSOLUTE_PATTERN = re.compile(r"^x(?P<x>[^;]*);y(?P<y>.*)$")
_LAYER_PATTERN = re.compile(r"^l(?P<num>\d+)$")
_HEX_COLOR_PATTERN = re.compile(r"^[0-9A-Fa-f]{6}$")


def split_unit(text: str) -> tuple[str, str]:
    """Split *text* into its numeric part and its lowercase unit suffix.

    Raises:
        CoordinateError: On a character that is neither part of the number
            nor a lowercase unit letter, or a digit after the unit.
    """
    number: list[str] = []
    unit: list[str] = []
    for pos, char in enumerate(text):
        if not unit and char in _NUMBER_CHARS:
            number.append(char)
        elif "a" <= char <= "z":
            unit.append(char)
        else:
            where = "unit" if unit else "number"
            msg = f"Invalid character '{char}' while parsing a {where} in '{text}'"
            raise CoordinateError(msg, position=pos, detail={"text": text})
    return "".join(number), "".join(unit)


def to_scalar(text: str) -> Decimal:
    """Scale a numeric literal with an optional unit to the base unit, exactly.

    The product is computed with enough precision for every digit of the
    literal, so long numerals are never rounded.

    Raises:
        CoordinateError: Malformed or non-finite number.
        UnitError: Unknown unit suffix.
    """
    number, unit = split_unit(text.strip())
    if unit not in UNIT_FACTORS:
        raise UnitError(f"Invalid unit '{unit}' in '{text}'", detail={"unit": unit})
    try:
        value = Decimal(number)
    except InvalidOperation:
        raise CoordinateError(
            f"Invalid number '{number}' in '{text}'", detail={"text": text}
        ) from None
    if not value.is_finite():
        raise CoordinateError(f"Invalid number '{number}' in '{text}'", detail={"text": text})
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits) + _FACTOR_DIGITS)
        return value * UNIT_FACTORS[unit]


def to_base_unit(text: str) -> int:
    """Convert a numeric literal with an optional unit to the base unit.

    The fractional part left after scaling is truncated toward zero, so
    ``"1.5m"`` is 1500 and ``"2.7"`` is 2.

    Examples:
        >>> to_base_unit("150cm")
        1500
        >>> to_base_unit("1.5m")
        1500
        >>> to_base_unit("30mm")
        30
    """
    return int(to_scalar(text))


def parse_coordinates(text: str, base: Coordinate | None = None) -> Coordinate:
    """Parse an absolute or relative coordinate argument.

    ``w<NUM>`` keeps the base's y and offsets its x; ``h<NUM>`` keeps the
    base's x and offsets its y. Relative forms are only meaningful for the
    second point of a two-point primitive, so they require *base*.

    Raises:
        CoordinateError: Unknown leading letter, missing ``;y`` part, or a
            relative form without a base point.
        UnitError: Unknown unit suffix on either component.
    """
    text = text.strip()
    if not text:
        raise CoordinateError("Empty coordinate argument")

    head = text[0]
    if head == "x":
        match = _ABSOLUTE_PATTERN.match(text)
        if match is None:
            raise CoordinateError(
                f"Coordinate '{text}' is missing its ';y' component", detail={"text": text}
            )
        return Coordinate(to_base_unit(match["x"]), to_base_unit(match["y"]))

    if head in ("w", "h"):
        if base is None:
            raise CoordinateError(
                f"Relative coordinate '{text}' needs a base point", detail={"text": text}
            )
        value = to_base_unit(text[1:])
        if head == "w":
            return Coordinate(base.x + value, base.y)
        return Coordinate(base.x, base.y + value)

    raise CoordinateError(
        f"Unknown first coordinate letter '{head}' in '{text}'",
        position=0,
        detail={"text": text},
    )


def is_layer_token(text: str) -> bool:
    """Whether *text* is a layer selector such as ``l2``."""
    return _LAYER_PATTERN.match(text.strip()) is not None


def parse_layer_num(text: str) -> int:
    """Parse a ``l<N>`` layer selector into its number."""
    match = _LAYER_PATTERN.match(text.strip())
    if match is None:
        raise LineSyntaxError(f"Invalid layer token '{text}'", detail={"text": text})
    return int(match["num"])


def parse_hex_color(text: str) -> tuple[int, int, int]:
    """Parse ``RRGGBB`` into three bytes, two hex digits at a time."""
    text = text.strip()
    if _HEX_COLOR_PATTERN.match(text) is None:
        raise LineSyntaxError(
            f"Invalid layer color '{text}', expected 6 hex digits RRGGBB",
            detail={"text": text},
        )
    return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)
