from __future__ import annotations

from rich.panel import Panel
from rich.markup import escape
from rich.table import Table

from ..parse import ParseResult
from .common import console, warnings_line


def render_status(export: str, result: ParseResult):
    """Coverage view: how many messages became sales, and what was defaulted."""
    console.print(
        Panel(
            f"Export: {export}\n"
            f"Messages: {result.messages}\n"
            f"Sale messages: {result.sale_messages}\n"
            f"Sales parsed: {len(result.sales)}\n"
            + warnings_line(result.warning_lines()),
            title="STATUS",
        )
    )

    per_server: dict[str, int] = {}
    for s in result.sales:
        per_server[s.server] = per_server.get(s.server, 0) + 1

    t = Table(title="Sales by server", show_lines=True)
    t.add_column("Server")
    t.add_column("Sales", justify="right")
    for name in sorted(per_server):
        t.add_row(name, str(per_server[name]))
    console.print(t)

    if result.skipped_sources:
        skipped = Table(title="Skipped sale messages")
        skipped.add_column("Page @ timestamp")
        for label in result.skipped_sources:
            skipped.add_row(escape(label))
        console.print(skipped)
