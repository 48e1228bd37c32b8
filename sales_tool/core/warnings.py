from __future__ import annotations

import re

from .response import WarningItem

_WARNING_MAP = {
    "SKIPPED sale messages": "SKIPPED_MESSAGES",
    "DEFAULTED qty": "DEFAULTED_QTY",
    "DEFAULTED price": "DEFAULTED_PRICE",
}


def warnings_from_lines(
    lines: list[str],
    skip_zero: bool = True,
    details: dict[str, list[str]] | None = None,
) -> list[WarningItem]:
    """Warning lines ("LABEL: N") to WarningItem; `details` attaches items per code."""
    details = details or {}
    results: list[WarningItem] = []
    for line in lines:
        text = line.strip()
        if not text:
            continue
        count = 0
        if ":" in text:
            prefix, rest = text.split(":", 1)
            prefix = prefix.strip()
            match = re.search(r"(-?\d+)", rest)
            if match:
                count = int(match.group(1))
            if skip_zero and count == 0:
                continue
            code = _WARNING_MAP.get(prefix, prefix.upper().replace(" ", "_"))
            results.append(WarningItem(code=code, message=text, count=count, items=details.get(code) or None))
        else:
            results.append(WarningItem(code=text.upper().replace(" ", "_"), message=text, count=0))
    return results


def parse_warnings(parsed) -> list[WarningItem]:
    """Warnings for one parsed export; skipped messages list their page and timestamp."""
    return warnings_from_lines(
        parsed.warning_lines(),
        details={"SKIPPED_MESSAGES": list(parsed.skipped_sources)},
    )
