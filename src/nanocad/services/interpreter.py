"""InterpreterService — tokenize, substitute, dispatch, record.

The single entry point for interactive use is :meth:`execute_line`.
:meth:`load_file` feeds a drawing file through it line by line and stops
at the first rejected line.

Keywords:

- ``line`` / ``rect`` / ``circle`` — create a primitive
- ``dimen`` / ``odimen`` — explicit / offset dimension
- ``set`` — define a variable (arguments taken literally)
- ``layer`` — create a layer: ``layer <num>, <name>, <RRGGBB>``
- ``list`` — the accepted-line history
- ``inspect`` — describe a variable (``$x``, ``@p``, ``&o``, ``&^``) or a
  layer (``l<N>``); arguments taken literally

INVARIANT: A rejected line leaves the session exactly as it was and is
not added to the history. Every accepted line, blank and comment lines
included, is appended to the history in input order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from functools import partial
from pathlib import Path
from typing import Any

from structlog.contextvars import bound_contextvars

from nanocad.config.models import EngineConfig
from nanocad.domain.dimensions import Dimension, annotate_dimension, build_dimension
from nanocad.domain.errors import (
    ArityError,
    CommandError,
    EngineError,
    ErrorKind,
    LayerError,
    LineSyntaxError,
    VariableError,
)
from nanocad.domain.layers import Layer
from nanocad.domain.objects import CadObject, build_object
from nanocad.domain.tokenizer import tokenize
from nanocad.domain.types import LAST_OBJECT, ObjectType, Sigil
from nanocad.domain.units import parse_layer_num
from nanocad.domain.variables import (
    CoordValue,
    FixedValue,
    ObjectRef,
    Variable,
    split_variable_token,
)
from nanocad.infrastructure.session import Session
from nanocad.services.base import BaseService
from nanocad.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)

NOOP = "noop"

Handler = Callable[[Session, Sequence[str]], dict[str, Any]]


class InterpreterService(BaseService):
    """Command dispatcher over one :class:`Session`."""

    def __init__(self, session: Session) -> None:
        super().__init__(session)
        self._limits = session.config.limits.tokenizer_limits()
        self._handlers: dict[str, Handler] = {
            "line": partial(self._create_object, ObjectType.LINE),
            "rect": partial(self._create_object, ObjectType.RECT),
            "circle": partial(self._create_object, ObjectType.CIRCLE),
            "dimen": self._create_dimension,
            "odimen": self._create_offset_dimension,
            "set": self._set_variable,
            "layer": self._set_layer,
            "list": self._list_history,
            "inspect": self._inspect,
        }

    @classmethod
    def create(cls, config: EngineConfig | None = None) -> InterpreterService:
        """Start a fresh session and wrap it."""
        return cls(Session(config))

    # ── Public API ────────────────────────────────────────────────────

    def execute_line(self, text: str) -> ServiceResult:
        """Tokenize and run one statement.

        Returns a failed result (never raises) for any input-driven error.
        ``error.detail`` carries the raw ``line`` and, for tokenizer
        errors, the offending ``position``.
        """
        line = text.rstrip("\r\n")
        try:
            parsed = tokenize(line, self._session.variables.substitute, self._limits)
            op = parsed.command or NOOP
            handler = self._resolve(parsed.command)
            with self._session.transaction() as session:
                data = handler(session, parsed.arguments) if handler else {}
                session.add_history(line)
        except EngineError as exc:
            logger.info("Rejected line %r: %s (%s)", line, exc.message, exc.kind)
            return ServiceResult.failure(_op_name(line), exc, line=line)

        logger.debug("Accepted %s with %d argument(s)", op, len(parsed.arguments))
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            meta={"substitutions": parsed.substitutions},
        )

    def load_file(self, path: str | Path) -> ServiceResult:
        """Execute every line of a drawing file, stopping at the first rejection.

        Lines accepted before the failing one stay committed. A line that is
        not valid UTF-8 stops the load like a rejected line, with
        ``SourceUnreadable``.
        """
        path = Path(path)
        try:
            handle = path.open("rb")
        except OSError as exc:
            return _unreadable(
                path,
                f"Couldn't open the CAD file: {path}",
                reason=exc.strerror or str(exc),
            )

        count = 0
        with handle, bound_contextvars(source=str(path)):
            for number, raw in enumerate(handle, start=1):
                try:
                    text = raw.decode("utf-8").rstrip("\r\n")
                except UnicodeDecodeError as exc:
                    logger.info("Undecodable line %d in %s: %s", number, path, exc.reason)
                    return _unreadable(
                        path,
                        f"Failed to read line {number}: not valid UTF-8 ({exc.reason})",
                        reason=str(exc),
                        line_number=number,
                        position=exc.start,
                    )
                with bound_contextvars(line=number):
                    result = self.execute_line(text)
                if not result.ok:
                    return _file_failure(path, number, text, result)
                count = number

        return ServiceResult(
            ok=True,
            op="load_file",
            data={
                "path": str(path),
                "lines": count,
                "objects": len(self._session.objects),
                "dimensions": len(self._session.dimensions),
            },
        )

    def inspect(self, target: str) -> ServiceResult:
        """Read-only description of a variable or layer, as a result."""
        try:
            data = self._describe_target(target)
        except EngineError as exc:
            return ServiceResult.failure("inspect", exc, target=target)
        return ServiceResult(ok=True, op="inspect", data=data)

    def history(self) -> ServiceResult:
        return ServiceResult(ok=True, op="list", data=self._history_data())

    def snapshot(self) -> ServiceResult:
        """Everything a renderer needs, as plain data."""
        session = self._session
        pin_length = session.config.dimensions.pin_length
        annotations: list[dict[str, Any] | None] = []
        warnings: list[str] = []
        for number, dim in enumerate(session.dimensions):
            try:
                note = annotate_dimension(dim, pin_length)
            except EngineError as exc:
                annotations.append(None)
                warnings.append(f"Dimension {number}: {exc.message}")
                continue
            annotations.append(
                {
                    "text": note.text,
                    "pins": [list(pin) for pin in note.pins],
                    "anchor": note.anchor,
                    "angle": note.angle,
                }
            )
        return ServiceResult(
            ok=True,
            op="snapshot",
            data={
                "objects": [obj.to_dict() for obj in session.objects],
                "dimensions": [dim.to_dict() for dim in session.dimensions],
                "annotations": annotations,
                "layers": [layer.to_dict() for layer in session.layers],
                "variables": [self._describe_variable(var) for var in session.variables],
            },
            warnings=warnings,
        )

    # ── Read-only accessors for renderers ─────────────────────────────

    @property
    def objects(self) -> tuple[CadObject, ...]:
        return self._session.objects

    @property
    def dimensions(self) -> tuple[Dimension, ...]:
        return self._session.dimensions

    @property
    def layers(self) -> tuple[Layer, ...]:
        return tuple(self._session.layers)

    @property
    def variables(self) -> tuple[Variable, ...]:
        return tuple(self._session.variables)

    @property
    def history_lines(self) -> tuple[str, ...]:
        return self._session.history

    def get_layer(self, num: int) -> Layer | None:
        return self._session.get_layer(num)

    def get_object(self, index: int) -> CadObject:
        return self._session.get_object(index)

    # ── Dispatch ──────────────────────────────────────────────────────

    def _resolve(self, command: str) -> Handler | None:
        if not command:
            return None
        handler = self._handlers.get(command)
        if handler is None:
            raise CommandError(f"Unknown command '{command}'", detail={"command": command})
        return handler

    def _create_object(
        self, obj_type: ObjectType, session: Session, args: Sequence[str]
    ) -> dict[str, Any]:
        obj, binding = build_object(session.next_object_id, obj_type, args)
        name: str | None = None
        if binding is not None:
            sigil, name = split_variable_token(binding)
            if sigil is not Sigil.OBJECT:
                raise VariableError(
                    f"Objects can only be bound to & variables, got '{binding}'",
                    kind=ErrorKind.LINE_SYNTAX,
                    detail={"binding": binding},
                )
            session.variables.check_available(name)

        index = session.add_object(obj)
        if name is not None and name != LAST_OBJECT:
            session.variables.set(name, ObjectRef(index))
        return {**obj.to_dict(), "index": index, "binding": binding}

    def _create_dimension(self, session: Session, args: Sequence[str]) -> dict[str, Any]:
        dim = build_dimension(args, is_offset=False)
        session.add_dimension(dim)
        return dim.to_dict()

    def _create_offset_dimension(self, session: Session, args: Sequence[str]) -> dict[str, Any]:
        dim = build_dimension(args, is_offset=True)
        session.add_dimension(dim)
        return dim.to_dict()

    def _set_variable(self, session: Session, args: Sequence[str]) -> dict[str, Any]:
        _expect_arity("set", args, 2)
        var = session.variables.define(args[0], args[1])
        return self._describe_variable(var)

    def _set_layer(self, session: Session, args: Sequence[str]) -> dict[str, Any]:
        _expect_arity("layer", args, 3)
        num_text = args[0].strip()
        if not num_text.isdigit():
            raise LineSyntaxError(f"Invalid layer number '{num_text}'", detail={"num": num_text})
        layer = session.layers.set_layer(int(num_text), args[1], args[2])
        return layer.to_dict()

    def _list_history(self, session: Session, args: Sequence[str]) -> dict[str, Any]:
        _expect_arity("list", args, 0)
        return self._history_data()

    def _inspect(self, session: Session, args: Sequence[str]) -> dict[str, Any]:
        _expect_arity("inspect", args, 1)
        return self._describe_target(args[0])

    # ── Introspection ─────────────────────────────────────────────────

    def _history_data(self) -> dict[str, Any]:
        lines = [
            {"number": number, "text": text}
            for number, text in enumerate(self._session.history, start=1)
        ]
        return {"lines": lines, "count": len(lines)}

    def _describe_target(self, target: str) -> dict[str, Any]:
        target = target.strip()
        head = target[:1]
        if head in (Sigil.FIXED, Sigil.COORD, Sigil.OBJECT):
            var = self._session.variables.get(target[1:])
            return {"target": target, "variable": self._describe_variable(var)}
        if head == "l":
            num = parse_layer_num(target)
            layer = self._session.get_layer(num)
            if layer is None:
                raise LayerError(
                    f"Layer '{num}' not found", kind=ErrorKind.LAYER_NOT_FOUND, detail={"num": num}
                )
            return {"target": target, "layer": layer.to_dict()}
        raise EngineError(
            f"Invalid type of thing to inspect: '{head}'",
            kind=ErrorKind.INSPECT_TARGET,
            detail={"target": target},
        )

    def _describe_variable(self, var: Variable) -> dict[str, Any]:
        store = self._session.variables
        out: dict[str, Any] = {
            "name": var.name,
            "sigil": str(var.sigil),
            "kind": var.kind,
        }
        if isinstance(var.value, ObjectRef):
            obj = self._session.get_object(var.value.index)
            layer = self._session.get_layer(obj.layer)
            out["value"] = var.value.index
            out["object"] = obj.to_dict()
            out["layer"] = layer.to_dict() if layer else None
            out["renderings"] = [
                f"&{var.name}[{i}] -> {store.render(var.name, i)}" for i in range(len(obj.coords))
            ]
        else:
            match var.value:
                case FixedValue(value=number):
                    out["value"] = number
                case CoordValue(coord=coord):
                    out["value"] = coord.as_tuple()
            out["renderings"] = [store.render(var.name)]
        return out


def _expect_arity(command: str, args: Sequence[str], expected: int) -> None:
    if len(args) != expected:
        raise ArityError(
            f"'{command}' takes {expected} argument(s), got {len(args)}",
            detail={"command": command, "expected": expected, "got": len(args)},
        )


def _op_name(line: str) -> str:
    head = line.split("#", 1)[0].strip().split(None, 1)
    return head[0] if head else NOOP


def _file_failure(path: Path, number: int, text: str, result: ServiceResult) -> ServiceResult:
    error = result.error
    assert error is not None
    return ServiceResult(
        ok=False,
        op="load_file",
        error=ServiceError(
            code=error.code,
            message=f"Failed to parse line {number}: {text} ({error.message})",
            detail={**error.detail, "path": str(path), "line_number": number},
        ),
    )


def _unreadable(path: Path, message: str, **detail: Any) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op="load_file",
        error=ServiceError(
            code=str(ErrorKind.SOURCE_UNREADABLE),
            message=message,
            detail={"path": str(path), **detail},
        ),
    )
