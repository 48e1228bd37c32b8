from __future__ import annotations

from rich.console import Console

console = Console(force_terminal=True)


def warnings_line(lines: list[str]) -> str:
    return "Warnings: " + " | ".join(lines)
