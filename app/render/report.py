from __future__ import annotations

from rich.panel import Panel
from rich.rule import Rule
from rich.markup import escape
from rich.table import Table

from ..models import CharacterReport, WindowBlock
from ..util import actor_label, format_money, format_qty
from .common import console, warnings_line


def _render_window(block: WindowBlock):
    console.print(f"  -- {block.window} --")
    if not block.has_data:
        console.print("    [dim](no data)[/dim]")
        return

    if block.rows:
        t = Table(show_lines=False, box=None, padding=(0, 2))
        t.add_column("Item")
        t.add_column("Qty", justify="right")
        t.add_column("Sales total", justify="right")
        t.add_column("Avg price", justify="right")
        for row in block.rows:
            t.add_row(escape(row.item), format_qty(row.count), format_money(row.sum), format_money(row.average))
        console.print(t)

    console.print(f"    Selected items total: {format_money(block.selected_total)}")
    console.print(f"    All items total:      {format_money(block.overall_total)}")


def render_report(
    characters: list[CharacterReport],
    export: str | None = None,
    warnings: list[str] | None = None,
):
    header = [
        "[bold]SALES REPORT — per window[/bold]",
        f"Export: {export or 'UNKNOWN'}",
        f"Characters: {len(characters)}",
    ]
    if warnings:
        header.append(warnings_line(warnings))
    console.print(Panel("\n".join(header), expand=False))

    if not characters:
        console.print(Panel("No sales found in this export.", title="REPORT"))
        return

    current_server = None
    for ch in characters:
        if ch.server != current_server:
            current_server = ch.server
            console.print(Rule(f"Server: {escape(ch.server)}"))
        console.print(f"[bold]Character {escape(actor_label(ch.name, ch.key))}[/bold]")
        for block in ch.windows:
            _render_window(block)
