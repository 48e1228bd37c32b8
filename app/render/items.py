from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel

from .common import console


def render_items(items: list[str]):
    if not items:
        console.print(Panel("No items sold.", title="KNOWN ITEMS"))
        return
    console.print(Panel("\n".join(f"• {escape(it)}" for it in items), title="KNOWN ITEMS", expand=False))
