"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers are
dispatched by ``result.op`` in :func:`render_result`; unknown ops fall through
to a generic key-value renderer.

Failed results that carry a field error map in ``error.detail["errors"]``
(rejected submits, failed validation) render the map as a table.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from rowform.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from rowform.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: one line per failing path."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        lines = [f"ERROR: {result.op} — {msg}"]
        for path, error in _error_map(result).items():
            lines.append(f"{path}: {error.get('message', '')}")
        return "\n".join(lines)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _error_map(result: ServiceResult) -> dict[str, dict[str, Any]]:
    if result.error is None:
        return {}
    errors = result.error.detail.get("errors")
    return errors if isinstance(errors, dict) else {}


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="rf.ok"), Text(f"  {result.op}", style="rf.op"), sep="")


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="rf.key")
    v = Text(str(value), style="rf.path" if key in ("source", "output") else "")
    console.print(k, v, sep="")


def _error_table(errors: dict[str, dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Path", style="rf.path", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Message")
    for path, error in errors.items():
        kind = str(error.get("kind", ""))
        table.add_row(
            Text(path), Text(kind, style=style_for_kind(kind)), Text(str(error.get("message", "")))
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="rf.error"), Text(f"  {result.op}", style="rf.op"), " — ", Text(msg)
    )

    errors = _error_map(result)
    if errors:
        console.print(_error_table(errors))

    if verbose and err:
        extra = {k: v for k, v in err.detail.items() if k != "errors"}
        if extra:
            console.print(Text("  detail:", style="dim"))
            for k, v in extra.items():
                console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_validate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("source", "rows", "valid"):
        if key in result.data:
            _field(console, key, result.data[key])


def _render_submit(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("outcome", "rows", "output"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose and "payload" in result.data:
        console.print(Text("  payload:", style="dim"))
        for row in result.data["payload"]:
            console.print(Text(f"    {json.dumps(row, ensure_ascii=False)}"))


def _render_schema(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    fields: dict[str, dict[str, Any]] = result.data.get("fields", {})
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Field", style="rf.field", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Required")
    table.add_column("Rules")
    table.add_column("Options")
    for name, rule in fields.items():
        rules = []
        if rule.get("min") is not None:
            rules.append(f">= {rule['min']:g}")
        if rule.get("more_than"):
            rules.append(f"> {rule['more_than']}")
        options = ", ".join(str(o["value"]) for o in rule.get("options", []))
        table.add_row(
            name,
            str(rule.get("kind", "")),
            "yes" if rule.get("required") else "no",
            ", ".join(rules),
            options,
        )
    console.print(table)
    console.print(f"\n{len(fields)} fields, min_rows={result.data.get('min_rows', 1)}")
    config_path = result.data.get("config_path")
    console.print(f"config: {config_path or '(built-in defaults)'}")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "validate": _render_validate,
    "submit": _render_submit,
    "schema": _render_schema,
}
