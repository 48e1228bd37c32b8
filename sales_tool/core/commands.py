from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

from app.aggregate import WINDOWS, build_all
from app.ingest import find_latest_export, load_messages
from app.parse import ParseResult, parse_sales
from app.report import build_report, known_items
from .serialize import to_dict
from .warnings import parse_warnings


def load_export(base_dir: str) -> tuple[Path, ParseResult]:
    export_dir = find_latest_export(base_dir)
    messages = load_messages(export_dir, silent=True)
    return export_dir, parse_sales(messages, silent=True)


def windows() -> dict[str, Any]:
    return {
        "windows": [
            {"name": w.name, "seconds": int(w.duration.total_seconds()) if w.duration else None}
            for w in WINDOWS
        ]
    }


def report(base_dir: str, selected: list[str], now: datetime) -> dict[str, Any]:
    export_dir, parsed = load_export(base_dir)
    per_window = build_all(parsed.sales, now, WINDOWS)
    result = build_report(parsed.sales, per_window, selected)
    return {
        "export": str(export_dir),
        "now": now.isoformat(),
        "selected": list(selected),
        "windows": [w.name for w in WINDOWS],
        "characters": to_dict(result.characters),
        "known_items": result.known_items,
        "warnings": parse_warnings(parsed),
    }


def items(base_dir: str) -> dict[str, Any]:
    export_dir, parsed = load_export(base_dir)
    return {
        "export": str(export_dir),
        "known_items": known_items(parsed.sales),
    }


def status(base_dir: str) -> dict[str, Any]:
    export_dir, parsed = load_export(base_dir)
    return {
        "export": str(export_dir),
        "messages": parsed.messages,
        "sale_messages": parsed.sale_messages,
        "sales": len(parsed.sales),
        "skipped": parsed.skipped,
        "defaulted_qty": parsed.defaulted_qty,
        "defaulted_price": parsed.defaulted_price,
        "servers": len({s.server for s in parsed.sales}),
        "warnings": parse_warnings(parsed),
    }
