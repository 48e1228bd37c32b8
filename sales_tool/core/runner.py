from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from app.util import parse_iso_maybe
from sales_tool.core import commands as core_commands
from sales_tool.core.config import load_config
from sales_tool.core.response import WarningItem, build_error, build_response


def _error(
    command: str,
    params: dict[str, Any],
    code: str,
    message: str,
    hint: str,
    details: str | None = None,
):
    return build_error(command, params, message, code=code, hint=hint, details=details)


def _normalize_items(value: Any) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        items = [str(v).strip() for v in value if str(v).strip()]
        return items or None
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",") if p.strip()]
        return parts or None
    return [str(value).strip()]


def _normalize_now(value: Any) -> datetime | None:
    if value is None or value == "":
        return datetime.now()
    if isinstance(value, datetime):
        # Sale times are naive local wall-clock
        return value.astimezone().replace(tzinfo=None) if value.tzinfo else value
    return parse_iso_maybe(str(value))


def _resolve_source(params: dict[str, Any], need_items: bool) -> tuple[str | None, list[str] | None]:
    base_dir = (params.get("base") or params.get("base_dir") or "").strip() or None
    items = _normalize_items(params.get("items") or params.get("selected"))
    if base_dir is None or (need_items and items is None):
        cfg = load_config()
        if cfg is not None:
            base_dir = base_dir or cfg.base_dir
            items = items or cfg.selected
    return base_dir, items


def _as_warnings(items: list[Any] | None) -> list[WarningItem]:
    warnings: list[WarningItem] = []
    for item in items or []:
        if isinstance(item, WarningItem):
            warnings.append(item)
        elif isinstance(item, dict):
            warnings.append(WarningItem(**item))
    return warnings


def _run_safely(command: str, params: dict[str, Any], func: Callable[[], dict[str, Any]]):
    # Single offline pass: failures are reported, never retried
    try:
        return func()
    except FileNotFoundError as exc:
        return _error(
            command,
            params,
            "NO_EXPORT",
            "Export not found.",
            "Check base_dir points at the folder holding ChatExport_* exports.",
            details=str(exc),
        )
    except ValueError as exc:
        return _error(command, params, "VALIDATION", "Invalid input.", "Check parameters.", details=str(exc))
    except Exception as exc:  # pragma: no cover - safety net
        return _error(command, params, "INTERNAL", "Command failed.", "Check logs.", details=str(exc))


def run_command(command: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    params = params or {}
    cmd = (command or "").strip().lower()

    def _execute() -> dict[str, Any]:
        if cmd == "windows":
            return build_response("windows", {}, core_commands.windows())

        if cmd in {"report", "items", "status"}:
            base_dir, items = _resolve_source(params, need_items=cmd == "report")
            if not base_dir:
                return _error(
                    cmd,
                    params,
                    "CONFIG_MISSING",
                    "No export base directory configured.",
                    "Pass base=... or run the `config` command.",
                )

            if cmd == "items":
                return build_response("items", {"base": base_dir}, core_commands.items(base_dir))

            if cmd == "status":
                data = core_commands.status(base_dir)
                warnings = _as_warnings(data.pop("warnings", []))
                return build_response("status", {"base": base_dir}, data, warnings=warnings)

            if not items:
                return _error(
                    "report",
                    params,
                    "CONFIG_MISSING",
                    "No selected items configured.",
                    "Pass items=A,B or run the `config` command.",
                )
            now = _normalize_now(params.get("now"))
            if now is None:
                return _error("report", params, "VALIDATION", "Invalid reference time.", "Use an ISO timestamp for now=.")
            data = core_commands.report(base_dir, items, now)
            warnings = _as_warnings(data.pop("warnings", []))
            return build_response(
                "report",
                {"base": base_dir, "items": items, "now": now.isoformat()},
                data,
                warnings=warnings,
            )

        return _error("unknown", params, "VALIDATION", f"Unknown command: {command}", "Check --help for commands.")

    return _run_safely(cmd, params, _execute)
