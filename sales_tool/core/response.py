from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

from .config import get_config_path

TOOL_NAME = "chat-sales-report"


@dataclass(frozen=True)
class WarningItem:
    """A counted parse problem; `items` names the affected messages when known."""

    code: str
    message: str
    count: int
    items: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        if self.items is None:
            out.pop("items")
        return out


@dataclass(frozen=True)
class ErrorItem:
    code: str
    message: str
    hint: str
    details: str | None = None


def _generated_at() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def build_response(
    command: str,
    params: dict[str, Any],
    data: Any,
    warnings: list[WarningItem] | None = None,
    ok: bool = True,
    error: ErrorItem | None = None,
) -> dict[str, Any]:
    return {
        "ok": ok,
        "command": command,
        "params": params,
        "warnings": [w.to_dict() for w in warnings or []],
        "data": data,
        "error": asdict(error) if error else None,
        "meta": {
            "tool": TOOL_NAME,
            "config_path": str(get_config_path()),
            "generated_at": _generated_at(),
        },
    }


def build_error(
    command: str,
    params: dict[str, Any],
    message: str,
    code: str = "INTERNAL",
    hint: str = "Run `help` to see commands and their parameters.",
    details: str | None = None,
) -> dict[str, Any]:
    err = ErrorItem(code=code, message=message, hint=hint, details=details)
    # Errors are mirrored as a single warning so clients reading only warnings still see them
    warn = WarningItem(code=code, message=message, count=1)
    return build_response(command, params, data=None, warnings=[warn], ok=False, error=err)
