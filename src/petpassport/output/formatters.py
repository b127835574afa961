"""Rich/JSON output for ServiceResult.

The CLI renders ServiceResult for humans (Rich tables and key/value
listings) or machines (--json, the full model as JSON).
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from rich.table import Table
from rich.text import Text

from petpassport.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from petpassport.services.result import ServiceResult

_PASSPORT_COLUMNS = ("id", "animal_name", "animal_type", "rescue_date", "holder", "valid")


class OutputSettings(BaseModel):
    """How a result should be rendered."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    no_color: bool = False


def _cell(value: Any) -> Text:
    if isinstance(value, bool):
        return Text("yes" if value else "no", style="pp.valid" if value else "pp.invalid")
    if isinstance(value, (dict, list)):
        return Text(_json.dumps(value, separators=(",", ":")))
    return Text("" if value is None else str(value))


def _render_mapping(console: Console, data: dict[str, Any]) -> None:
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="pp.key")
    grid.add_column()
    for key, value in data.items():
        grid.add_row(Text(key), _cell(value))
    console.print(grid)


def _render_items(console: Console, items: list[dict[str, Any]]) -> None:
    table = Table(show_edge=False, header_style="pp.key")
    for column in _PASSPORT_COLUMNS:
        table.add_column(column)
    for item in items:
        table.add_row(*(_cell(item.get(c)) for c in _PASSPORT_COLUMNS))
    console.print(table)


def _render_events(console: Console, events: list[dict[str, Any]]) -> None:
    table = Table(show_edge=False, header_style="pp.key")
    for column in ("seq", "event", "status", "created", "payload"):
        table.add_column(column)
    for event in events:
        payload = {k: v for k, v in event["payload"].items() if k != "passport_id"}
        table.add_row(
            _cell(event["seq"]),
            _cell(event["event"]),
            _cell(event["status"]),
            _cell(event["created"]),
            _cell(payload),
        )
    console.print(table)


def format_result(
    result: ServiceResult,
    *,
    settings: OutputSettings | None = None,
) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()

    if settings.json_output:
        return result.model_dump_json(indent=2)

    if not result.ok:
        error = result.error
        code = error.code if error else "UNKNOWN"
        message = error.message if error else "Unknown error"
        return f"ERROR: {result.op} [{code}] {message}"

    if settings.quiet:
        return str(result.data.get("id", result.op))

    console = create_console(no_color=settings.no_color)
    console.print(Text.assemble(("OK:", "pp.ok"), " ", (result.op, "pp.op")))

    data = dict(result.data)
    items = data.pop("items", None)
    events = data.pop("events", None)
    if data:
        _render_mapping(console, data)
    if items is not None:
        _render_items(console, items)
    if events is not None:
        _render_events(console, events)
    return get_output(console).rstrip("\n")
