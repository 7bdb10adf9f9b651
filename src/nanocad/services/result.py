"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
The CLI and any embedding host (viewer, REPL) consume this type.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from nanocad.domain.errors import EngineError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult.

    ``code`` is the engine error kind, e.g. ``"VariableRedefinition"``.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: EngineError, **context: Any) -> ServiceError:
        """Build from a domain error, merging extra *context* into ``detail``."""
        return cls(code=str(exc.kind), message=exc.message, detail={**exc.to_detail(), **context})


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"line"``, ``"load_file"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (line numbers, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, exc: EngineError, **context: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc, **context))
