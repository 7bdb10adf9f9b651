"""Tests for ServiceResult and ServiceError."""

from __future__ import annotations

import pytest

from nanocad.domain.errors import ErrorKind, LineSyntaxError, VariableError
from nanocad.services.result import ServiceError, ServiceResult


class TestServiceError:
    def test_from_exception(self) -> None:
        exc = LineSyntaxError("Empty argument", position=5, detail={"line": "line ,"})
        err = ServiceError.from_exception(exc)
        assert err.code == "LineSyntax"
        assert err.message == "Empty argument"
        assert err.detail == {"line": "line ,", "position": 5}

    def test_context_merged(self) -> None:
        exc = VariableError("Variable 'x' not found", detail={"name": "x"})
        err = ServiceError.from_exception(exc, line="line $x")
        assert err.code == ErrorKind.VARIABLE_NOT_FOUND
        assert err.detail == {"name": "x", "line": "line $x"}

    def test_frozen(self) -> None:
        err = ServiceError(code="X", message="m")
        with pytest.raises(Exception):
            err.code = "Y"  # type: ignore[misc]


class TestServiceResult:
    def test_defaults(self) -> None:
        result = ServiceResult(ok=True, op="noop")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure(self) -> None:
        exc = VariableError("taken", kind=ErrorKind.VARIABLE_REDEFINITION)
        result = ServiceResult.failure("set", exc, line="set $a, 1")
        assert not result.ok
        assert result.op == "set"
        assert result.error is not None
        assert result.error.code == "VariableRedefinition"
        assert result.error.detail["line"] == "set $a, 1"

    def test_json_roundtrip(self) -> None:
        result = ServiceResult(ok=True, op="line", data={"coords": [(0, 0), (1, 1)]})
        dumped = result.model_dump_json()
        assert '"op":"line"' in dumped
        assert ServiceResult.model_validate_json(dumped).data["coords"] == [[0, 0], [1, 1]]
