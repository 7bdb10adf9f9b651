"""Variable store and recursive text substitution.

Three variable kinds, selected by sigil when the variable is set:

- ``$name`` — fixed scalar, rendered as ``%f`` (``3`` becomes ``3.000000``)
- ``@name`` — coordinate, rendered as ``x#;y#``
- ``&name`` — reference to an object, ``&name[i]`` renders its i-th point

``&^`` is the last-object pseudo-variable. It is rebound after every
object creation and is the only name that may ever be rebound.

INVARIANT: Object variables hold an index into the session's object list,
never the object itself. The object list is the sole owner of objects.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nanocad.domain.errors import EngineError, ErrorKind, LineSyntaxError, VariableError
from nanocad.domain.types import LAST_OBJECT, Coordinate, Sigil
from nanocad.domain.units import parse_coordinates, to_scalar

if TYPE_CHECKING:
    from nanocad.domain.objects import CadObject

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
_REFERENCE_PATTERN = re.compile(r"[$@&](?P<name>[A-Za-z0-9^]*)")
_INDEX_PATTERN = re.compile(r"\[(?P<index>\d+)\]")

DEFAULT_EXEMPT_COMMANDS = frozenset({"set", "inspect"})
DEFAULT_MAX_SUBSTITUTIONS = 64


@dataclass(frozen=True)
class FixedValue:
    value: float


@dataclass(frozen=True)
class CoordValue:
    coord: Coordinate


@dataclass(frozen=True)
class ObjectRef:
    index: int


VariableValue = FixedValue | CoordValue | ObjectRef


@dataclass(frozen=True)
class Variable:
    """A named, typed value. The sigil is derived from the value's kind."""

    name: str
    value: VariableValue

    @property
    def sigil(self) -> Sigil:
        match self.value:
            case FixedValue():
                return Sigil.FIXED
            case CoordValue():
                return Sigil.COORD
            case ObjectRef():
                return Sigil.OBJECT

    @property
    def kind(self) -> str:
        match self.value:
            case FixedValue():
                return "fixed"
            case CoordValue():
                return "coord"
            case ObjectRef():
                return "object"

    @property
    def qualified_name(self) -> str:
        return f"{self.sigil}{self.name}"


def split_variable_token(token: str) -> tuple[Sigil, str]:
    """Split ``$name`` / ``@name`` / ``&name`` into sigil and bare name."""
    token = token.strip()
    if not token or token[0] not in (Sigil.FIXED, Sigil.COORD, Sigil.OBJECT):
        raise VariableError(
            f"Invalid variable '{token}', expected a $, @ or & sigil",
            kind=ErrorKind.LINE_SYNTAX,
            detail={"token": token},
        )
    sigil, name = Sigil(token[0]), token[1:]
    if name == LAST_OBJECT:
        if sigil is not Sigil.OBJECT:
            raise VariableError(
                f"'{token}': only object variables may use the '^' name",
                kind=ErrorKind.LINE_SYNTAX,
                detail={"token": token},
            )
    elif _NAME_PATTERN.match(name) is None:
        raise VariableError(
            f"Invalid variable name '{name}'",
            kind=ErrorKind.LINE_SYNTAX,
            detail={"token": token},
        )
    return sigil, name


def _parse_fixed(token: str, raw_value: str) -> float:
    """A plain float (``1e3`` included) or a unit literal scaled to the base unit."""
    try:
        number = float(raw_value)
    except ValueError:
        try:
            number = float(to_scalar(raw_value))
        except EngineError as exc:
            raise VariableError(
                f"Invalid fixed value '{raw_value}' for '{token}' ({exc.message})",
                kind=ErrorKind.COORDINATE_SYNTAX,
                detail={"value": raw_value},
            ) from None
    if not math.isfinite(number):
        raise VariableError(
            f"Invalid fixed value '{raw_value}' for '{token}'",
            kind=ErrorKind.COORDINATE_SYNTAX,
            detail={"value": raw_value},
        )
    return number


class VariableStore:
    """Named variables plus the ``^`` binding, rendered into argument text.

    The store reads objects through *objects*, a live view of the session's
    object list, to render ``&name[i]`` references.
    """

    def __init__(
        self,
        objects: Sequence[CadObject],
        *,
        exempt_commands: Iterable[str] = DEFAULT_EXEMPT_COMMANDS,
        max_substitutions: int = DEFAULT_MAX_SUBSTITUTIONS,
    ) -> None:
        self._objects = objects
        self._vars: dict[str, Variable] = {}
        self._last_object: int | None = None
        self.exempt_commands = frozenset(exempt_commands)
        self.max_substitutions = max_substitutions

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._vars.values())

    def __len__(self) -> int:
        return len(self._vars)

    def __contains__(self, name: object) -> bool:
        if name == LAST_OBJECT:
            return self._last_object is not None
        return name in self._vars

    @property
    def last_object(self) -> int | None:
        """Index bound to ``^``, or None before the first object exists."""
        return self._last_object

    # --- Definition ---

    def check_available(self, name: str) -> None:
        """Raise ``VariableRedefinition`` if *name* is taken and is not ``^``."""
        if name != LAST_OBJECT and name in self._vars:
            existing = self._vars[name]
            raise VariableError(
                f"Variable '{existing.qualified_name}' already exists. Can't set a new value",
                kind=ErrorKind.VARIABLE_REDEFINITION,
                detail={"name": name},
            )

    def set(self, name: str, value: VariableValue) -> Variable:
        """Bind *name* to *value*. ``^`` may always be rebound to an object."""
        if name == LAST_OBJECT:
            if not isinstance(value, ObjectRef):
                raise VariableError(
                    "The '^' variable can only hold an object",
                    kind=ErrorKind.LINE_SYNTAX,
                )
            self.rebind_last(value.index)
            return Variable(LAST_OBJECT, value)

        self.check_available(name)
        if isinstance(value, ObjectRef):
            self._check_object_index(value.index)
        var = Variable(name, value)
        self._vars[name] = var
        return var

    def define(self, token: str, raw_value: str) -> Variable:
        """Parse a ``set`` statement's arguments and bind the variable.

        ``$name`` takes a number (a unit suffix scales it to the base unit),
        ``@name`` an absolute coordinate and ``&name`` an object index.
        """
        sigil, name = split_variable_token(token)
        self.check_available(name)
        raw_value = raw_value.strip()
        match sigil:
            case Sigil.FIXED:
                value: VariableValue = FixedValue(_parse_fixed(token, raw_value))
            case Sigil.COORD:
                value = CoordValue(parse_coordinates(raw_value))
            case Sigil.OBJECT:
                if not raw_value.isdigit():
                    raise VariableError(
                        f"Couldn't parse object index '{raw_value}' for '{token}'",
                        kind=ErrorKind.LINE_SYNTAX,
                        detail={"value": raw_value},
                    )
                value = ObjectRef(int(raw_value))
        return self.set(name, value)

    def rebind_last(self, index: int) -> None:
        self._check_object_index(index)
        self._last_object = index

    def _check_object_index(self, index: int) -> None:
        if not 0 <= index < len(self._objects):
            raise VariableError(
                f"Object index {index} out of range ({len(self._objects)} objects)",
                kind=ErrorKind.VARIABLE_INDEX_OUT_OF_RANGE,
                detail={"index": index, "count": len(self._objects)},
            )

    # --- Lookup ---

    def get(self, name: str) -> Variable:
        """Look up *name* (without sigil). ``^`` is resolved first."""
        if name == LAST_OBJECT:
            if self._last_object is None:
                raise VariableError("Variable '^' not found (no object created yet)")
            return Variable(LAST_OBJECT, ObjectRef(self._last_object))
        var = self._vars.get(name)
        if var is None:
            raise VariableError(f"Variable '{name}' not found", detail={"name": name})
        return var

    def resolve_object(self, name: str) -> CadObject:
        """The object an ``&name`` variable points at."""
        var = self.get(name)
        if not isinstance(var.value, ObjectRef):
            raise VariableError(
                f"Variable '{var.qualified_name}' is not an object",
                kind=ErrorKind.OBJECT_TYPE_INVALID,
                detail={"name": name},
            )
        return self._objects[var.value.index]

    def render(self, name: str, index: int = 0) -> str:
        """Substitution text for *name*; *index* selects an object's point."""
        var = self.get(name)
        match var.value:
            case FixedValue(value=number):
                return f"{number:f}"
            case CoordValue(coord=coord):
                return coord.render()
            case ObjectRef(index=obj_index):
                coords = self._objects[obj_index].coords
                if index >= len(coords):
                    raise VariableError(
                        f"Variable '&{name}[{index}]' index is greater than the maximum "
                        f"allowed for this type of object: {len(coords)}",
                        kind=ErrorKind.VARIABLE_INDEX_OUT_OF_RANGE,
                        detail={"name": name, "index": index, "count": len(coords)},
                    )
                return coords[index].render()

    # --- Substitution ---

    def is_exempt(self, command: str) -> bool:
        return command in self.exempt_commands

    def substitute(self, command: str, arg: str) -> tuple[str, int]:
        """Replace variable references in *arg* until none are left.

        Each pass rewrites the first reference found. Returns the rewritten
        text and the number of rewrites. Arguments of exempt commands are
        returned untouched.

        Raises:
            VariableError: Unknown variable or out-of-range object index.
            LineSyntaxError: Malformed ``[index]`` suffix.
            VariableError: ``SubstitutionDepth`` after ``max_substitutions``
                rewrites without reaching a fixed point.
        """
        if self.is_exempt(command):
            return arg, 0

        count = 0
        while True:
            match = _REFERENCE_PATTERN.search(arg)
            if match is None:
                return arg, count
            if count >= self.max_substitutions:
                raise VariableError(
                    f"Gave up after {count} variable substitutions in '{arg}'",
                    kind=ErrorKind.SUBSTITUTION_DEPTH,
                    detail={"limit": self.max_substitutions},
                )

            name = match["name"]
            end = match.end()
            index = 0
            if arg.startswith("[", end):
                index_match = _INDEX_PATTERN.match(arg, end)
                if index_match is None:
                    raise LineSyntaxError(
                        f"Variable '{name}' index ending not found in '{arg}'",
                        position=end,
                        detail={"argument": arg},
                    )
                index = int(index_match["index"])
                end = index_match.end()

            arg = arg[: match.start()] + self.render(name, index) + arg[end:]
            count += 1

    # --- Snapshot ---

    def snapshot(self) -> tuple[int, int | None]:
        return len(self._vars), self._last_object

    def restore(self, state: tuple[int, int | None]) -> None:
        """Forget variables defined after :meth:`snapshot` and reset ``^``."""
        size, last = state
        for name in list(self._vars)[size:]:
            del self._vars[name]
        self._last_object = last
