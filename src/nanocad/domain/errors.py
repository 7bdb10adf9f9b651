"""Engine error kinds and the exception hierarchy raised by the domain layer.

Every input-driven failure is an :class:`EngineError`. The interpreter
catches it at the line boundary and turns it into a failed ServiceResult,
so nothing in the domain or service layers ever terminates the host.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Machine-readable error codes surfaced in ``ServiceError.code``."""

    UNIT_UNKNOWN = "UnitUnknown"
    COORDINATE_SYNTAX = "CoordinateSyntax"
    LINE_SYNTAX = "LineSyntax"
    UNKNOWN_COMMAND = "UnknownCommand"
    ARGUMENT_ARITY = "ArgumentArity"
    VARIABLE_NOT_FOUND = "VariableNotFound"
    VARIABLE_REDEFINITION = "VariableRedefinition"
    VARIABLE_INDEX_OUT_OF_RANGE = "VariableIndexOutOfRange"
    LAYER_IMMUTABLE = "LayerImmutable"
    LAYER_NOT_FOUND = "LayerNotFound"
    OBJECT_TYPE_INVALID = "ObjectTypeInvalid"
    DIMENSION_DIRECTION = "DimensionDirection"
    INSPECT_TARGET = "InspectTarget"
    SUBSTITUTION_DEPTH = "SubstitutionDepth"
    SOURCE_UNREADABLE = "SourceUnreadable"


class EngineError(Exception):
    """Base class for every recoverable, line-level engine failure.

    Attributes:
        kind: The :class:`ErrorKind` reported to callers.
        message: Human-readable description.
        position: Zero-based column of the offending character, when the
            tokenizer knows it.
        detail: Extra context merged into ``ServiceError.detail``.
    """

    kind: ErrorKind = ErrorKind.LINE_SYNTAX

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind | None = None,
        position: int | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        self.message = message
        self.position = position
        self.detail = dict(detail or {})

    def to_detail(self) -> dict[str, Any]:
        """Context dict for ``ServiceError.detail``."""
        out = dict(self.detail)
        if self.position is not None:
            out["position"] = self.position
        return out


class UnitError(EngineError):
    kind = ErrorKind.UNIT_UNKNOWN


class CoordinateError(EngineError):
    kind = ErrorKind.COORDINATE_SYNTAX


class LineSyntaxError(EngineError):
    kind = ErrorKind.LINE_SYNTAX


class CommandError(EngineError):
    kind = ErrorKind.UNKNOWN_COMMAND


class ArityError(EngineError):
    kind = ErrorKind.ARGUMENT_ARITY


class VariableError(EngineError):
    kind = ErrorKind.VARIABLE_NOT_FOUND


class LayerError(EngineError):
    kind = ErrorKind.LAYER_IMMUTABLE


class ObjectError(EngineError):
    kind = ErrorKind.OBJECT_TYPE_INVALID


class DimensionError(EngineError):
    kind = ErrorKind.DIMENSION_DIRECTION
