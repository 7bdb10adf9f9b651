"""Tests for the Rich console factory."""

from __future__ import annotations

from nanocad.output.console import create_console, get_output, style_for_kind


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_style_for_kind(self) -> None:
        assert style_for_kind("object") == "cad.var.object"
        assert style_for_kind("unknown") == ""
