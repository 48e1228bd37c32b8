import re
from datetime import datetime, timezone

# -------------------------
# Time helpers
# -------------------------

EXPORT_TS_FORMAT = "%d.%m.%Y %H:%M:%S"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_iso_maybe(ts: str | None):
    """Parse ISO timestamp string (optionally Z) to datetime. Returns None if invalid."""
    if not ts:
        return None
    try:
        if ts.endswith("Z"):
            ts = ts[:-1] + "+00:00"
        dt = datetime.fromisoformat(ts)
        # Compare in local wall-clock time like the export timestamps
        if dt.tzinfo is not None:
            dt = dt.astimezone().replace(tzinfo=None)
        return dt
    except ValueError:
        return None


def parse_export_ts(ts_raw: str | None):
    """
    Parse a Telegram export date title: DD.MM.YYYY HH:MM:SS [UTC+hh:mm].
    The UTC suffix is dropped and the result is a naive local datetime.
    Returns None if invalid.
    """
    if not ts_raw:
        return None
    ts = ts_raw.split(" UTC", 1)[0].strip()
    try:
        return datetime.strptime(ts, EXPORT_TS_FORMAT)
    except ValueError:
        return None


# -------------------------
# Normalizers (parsing)
# -------------------------

RE_WS = re.compile(r"\s+")
RE_DIGITS = re.compile(r"[0-9]+")


def parse_qty(value_str: str | None) -> int | None:
    """Plain integer quantity. Returns None if not a number."""
    if value_str is None:
        return None
    s = value_str.strip()
    if not RE_DIGITS.fullmatch(s):
        return None
    return int(s)


def parse_price(value_str: str | None) -> float | None:
    """
    Parse a sale price like "12 345,67".

    Handles:
      - space separators (incl. unicode spaces and line breaks)
      - comma as the decimal mark
    Returns None when the remainder is not a number.
    """
    if value_str is None:
        return None
    s = RE_WS.sub("", str(value_str)).replace(",", ".")
    if not s:
        return None
    try:
        return float(s)
    except ValueError:
        return None


# -------------------------
# Display formatting (output only)
# -------------------------

def format_money(amount: float | None) -> str:
    """Return money like $12 345.67 (output only)."""
    n = float(amount or 0)
    return "$" + f"{n:,.2f}".replace(",", " ")


def format_qty(qty: int | None) -> str:
    return f"{int(qty or 0):,}".replace(",", " ")


def actor_label(name: str | None, key: str | None) -> str:
    if key and name and key != name:
        return f"{name} #{key}"
    return name or key or ""


def build_warning_lines(
    skipped_count: int = 0,
    defaulted_qty_count: int = 0,
    defaulted_price_count: int = 0,
) -> list[str]:
    return [
        f"SKIPPED sale messages: {skipped_count}",
        f"DEFAULTED qty: {defaulted_qty_count}",
        f"DEFAULTED price: {defaulted_price_count}",
    ]
