"""Tests for the line tokenizer state machine."""

from __future__ import annotations

import pytest

from nanocad.domain.errors import ErrorKind, LineSyntaxError
from nanocad.domain.tokenizer import ParsedLine, TokenizerLimits, tokenize


def _upper(command: str, arg: str) -> tuple[str, int]:
    return arg.upper(), 1


class TestCommandState:
    def test_command_only(self) -> None:
        assert tokenize("list") == ParsedLine(command="list")

    def test_leading_whitespace_skipped(self) -> None:
        assert tokenize("  \tlist").command == "list"

    def test_blank_line(self) -> None:
        parsed = tokenize("   ")
        assert parsed.is_empty
        assert parsed.arguments == ()

    def test_comment_only(self) -> None:
        assert tokenize("# just a note").is_empty

    def test_command_overflow(self) -> None:
        with pytest.raises(LineSyntaxError) as exc_info:
            tokenize("a" * 16)
        assert exc_info.value.position == 15
        assert exc_info.value.kind is ErrorKind.LINE_SYNTAX

    def test_command_at_limit(self) -> None:
        assert tokenize("a" * 15).command == "a" * 15


class TestArgumentsState:
    def test_splits_and_trims(self) -> None:
        parsed = tokenize("line x0;y0 ,  x10;y10  ")
        assert parsed.command == "line"
        assert parsed.arguments == ("x0;y0", "x10;y10")

    def test_inner_spaces_kept(self) -> None:
        parsed = tokenize("layer 1, Back Wall, ff0000")
        assert parsed.arguments == ("1", "Back Wall", "ff0000")

    def test_comment_truncates(self) -> None:
        parsed = tokenize("line x0;y0, x1;y1 # first wall, ignored")
        assert parsed.arguments == ("x0;y0", "x1;y1")

    def test_empty_argument(self) -> None:
        with pytest.raises(LineSyntaxError, match="Empty argument") as exc_info:
            tokenize("line x0;y0,, x1;y1")
        assert exc_info.value.position == 11

    def test_trailing_separator(self) -> None:
        with pytest.raises(LineSyntaxError, match="Trailing"):
            tokenize("line x0;y0,")

    def test_argument_overflow(self) -> None:
        limits = TokenizerLimits(argument_max_size=4)
        with pytest.raises(LineSyntaxError, match="argument number 1"):
            tokenize("set abcde", limits=limits)

    def test_argument_count_overflow(self) -> None:
        limits = TokenizerLimits(max_arguments=2)
        with pytest.raises(LineSyntaxError, match="Maximum number of arguments"):
            tokenize("line a, b, c", limits=limits)

    def test_substitution_applied(self) -> None:
        parsed = tokenize("line a, b", _upper)
        assert parsed.arguments == ("A", "B")
        assert parsed.substitutions == 2

    def test_substitution_receives_command(self) -> None:
        seen: list[str] = []

        def record(command: str, arg: str) -> tuple[str, int]:
            seen.append(command)
            return arg, 0

        tokenize("rect a, b", record)
        assert seen == ["rect", "rect"]

    def test_error_carries_line(self) -> None:
        with pytest.raises(LineSyntaxError) as exc_info:
            tokenize("line ,")
        assert exc_info.value.detail["line"] == "line ,"


class TestBindingState:
    def test_binding_becomes_last_argument(self) -> None:
        parsed = tokenize("line x0;y0, x1;y1 = &wall")
        assert parsed.arguments == ("x0;y0", "x1;y1", "&wall")

    def test_binding_not_substituted(self) -> None:
        parsed = tokenize("line a = &wall", _upper)
        assert parsed.arguments == ("A", "&wall")
        assert parsed.substitutions == 1

    def test_binding_with_comment(self) -> None:
        parsed = tokenize("line a, b =  &wall   # door frame")
        assert parsed.arguments[-1] == "&wall"

    def test_bad_binding_start(self) -> None:
        with pytest.raises(LineSyntaxError, match="first character") as exc_info:
            tokenize("line a = $wall")
        assert exc_info.value.position == 9

    def test_text_after_binding(self) -> None:
        with pytest.raises(LineSyntaxError, match="after object variable"):
            tokenize("line a = &wall extra")

    def test_missing_binding_name(self) -> None:
        with pytest.raises(LineSyntaxError, match="Missing object variable"):
            tokenize("line a = &")

    def test_missing_binding(self) -> None:
        with pytest.raises(LineSyntaxError):
            tokenize("line a =")
