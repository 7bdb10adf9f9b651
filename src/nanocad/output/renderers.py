"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from nanocad.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from nanocad.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "list":
        return "\n".join(_history_lines(result.data))
    return f"OK: {result.op}"


def format_coords(coords: list[Any]) -> str:
    """``[(0, 0), (10, 10)]`` as ``(0, 0) (10, 10)``."""
    return " ".join(f"({x}, {y})" for x, y in coords)


# ── Helpers ───────────────────────────────────────────────────────────


def _history_lines(data: dict[str, Any]) -> list[str]:
    return [f"{entry['number']:03d}: {entry['text']}" for entry in data.get("lines", [])]


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="cad.ok")
    op = Text(f"  {result.op}", style="cad.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="cad.key")
    if key in ("coords", "start", "end", "line_start", "line_end"):
        v = Text(str(value), style="cad.coord")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {v}"))


def _layer_label(layer: dict[str, Any] | None, num: Any = None) -> str:
    if layer is None:
        return f"{num} (undefined)" if num is not None else "undefined"
    return f"{layer['num']} '{layer['name']}' #{layer['hex']}"


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="cad.error")
    op = Text(f"  {result.op}", style="cad.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))
    if err is None:
        return

    line = err.detail.get("line")
    position = err.detail.get("position")
    if line is not None:
        console.print(Text(f"  {line}", style="dim"))
        if isinstance(position, int):
            console.print(Text("  " + " " * position + "^", style="cad.error"))
    console.print(Text(f"  kind: {err.code}", style="cad.key"))

    if verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Command renderers ─────────────────────────────────────────────────


def _render_object(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render line/rect/circle creation."""
    _status_line(console, result)
    d = result.data
    _field(console, "index", d.get("index"))
    _field(console, "layer", d.get("layer"))
    _field(console, "coords", format_coords(d.get("coords", [])))
    if d.get("binding"):
        _field(console, "binding", d["binding"])
    if verbose:
        _render_meta(console, result)


def _render_dimension(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "measured", format_coords([d["start"], d["end"]]))
    _field(console, "line", format_coords([d["line_start"], d["line_end"]]))
    _field(console, "label", d.get("label"))
    _field(console, "layer", d.get("layer"))
    if verbose:
        _render_meta(console, result)


def _render_layer(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "layer", _layer_label(result.data))


def _render_history(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Numbered listing of accepted lines, ``001: text``."""
    for text in _history_lines(result.data):
        console.print(Text(text[:5], style="cad.lineno"), Text(text[5:]), sep="")


def _render_variable(console: Console, var: dict[str, Any]) -> None:
    style = style_for_kind(var.get("kind", ""))
    title = Text(f"{var['sigil']}{var['name']}", style=style or "bold")
    console.print(title, Text(f"  ({var['kind']})", style="dim"))
    obj = var.get("object")
    if obj is None:
        _field(console, "value", var.get("value"))
    else:
        _field(console, "object", f"#{var['value']} {obj['type']}")
        _field(console, "coords", format_coords(obj.get("coords", [])))
        _field(console, "layer", _layer_label(var.get("layer"), obj.get("layer")))
    for rendering in var.get("renderings", []):
        console.print(Text(f"    {rendering}", style="dim"))


def _render_inspect(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    if "variable" in d:
        _render_variable(console, d["variable"])
    elif "layer" in d:
        layer = d["layer"]
        console.print(Text(f"Layer {layer['num']} '{layer['name']}'", style="bold"))
        color = layer["color"]
        _field(console, "color", f"RGB({color['r']}, {color['g']}, {color['b']}) #{layer['hex']}")
        _field(console, "alpha", color["alpha"])


def _render_set(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _render_variable(console, result.data)


def _render_load(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("path", "lines", "objects", "dimensions"):
        if key in result.data:
            _field(console, key, result.data[key])


def _render_snapshot(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Tables of every object, dimension and layer in the session."""
    d = result.data

    objects = Table(title="Objects", show_header=True, pad_edge=False, expand=False)
    objects.add_column("#", justify="right", style="cad.lineno")
    objects.add_column("Type", style="cad.op")
    objects.add_column("Layer", justify="right")
    objects.add_column("Coordinates", style="cad.coord")
    for index, obj in enumerate(d.get("objects", [])):
        objects.add_row(str(index), obj["type"], str(obj["layer"]), format_coords(obj["coords"]))
    console.print(objects)

    dims = Table(title="Dimensions", show_header=True, pad_edge=False, expand=False)
    dims.add_column("#", justify="right", style="cad.lineno")
    dims.add_column("Measured", style="cad.coord")
    dims.add_column("Line", style="cad.coord")
    dims.add_column("Label", justify="right")
    dims.add_column("Angle", justify="right")
    annotations = d.get("annotations", [])
    for index, dim in enumerate(d.get("dimensions", [])):
        note = annotations[index] if index < len(annotations) else None
        angle = f"{note['angle']:.1f}" if note else "-"
        dims.add_row(
            str(index),
            format_coords([dim["start"], dim["end"]]),
            format_coords([dim["line_start"], dim["line_end"]]),
            dim["label"],
            angle,
        )
    console.print(dims)

    layers = Table(title="Layers", show_header=True, pad_edge=False, expand=False)
    layers.add_column("#", justify="right")
    layers.add_column("Name")
    layers.add_column("Color")
    for layer in d.get("layers", []):
        layers.add_row(str(layer["num"]), Text(layer["name"]), f"#{layer['hex']}")
    console.print(layers)


def _render_noop(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    if verbose:
        _status_line(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Primitives
    "line": _render_object,
    "rect": _render_object,
    "circle": _render_object,
    # Dimensions
    "dimen": _render_dimension,
    "odimen": _render_dimension,
    # State
    "set": _render_set,
    "layer": _render_layer,
    "noop": _render_noop,
    # Introspection
    "list": _render_history,
    "inspect": _render_inspect,
    "snapshot": _render_snapshot,
    "load_file": _render_load,
}
