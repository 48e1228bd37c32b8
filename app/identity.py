from __future__ import annotations

from datetime import datetime


def split_character(label: str | None) -> tuple[str, str]:
    """
    Split a character label like "Frodo #12345" into ("Frodo", "12345").
    The last '#' wins; without one the id part is empty.
    """
    full = label or ""
    name, sep, tag = full.rpartition("#")
    if not sep:
        return full.strip(), ""
    return name.strip(), tag.strip()


def resolve_identity(label: str | None) -> tuple[str, str]:
    """Return (display_name, identity_key). Untagged characters are keyed by name."""
    name, tag = split_character(label)
    return name, tag or name


def is_more_current(seen_at: datetime, last_seen: datetime | None) -> bool:
    """Identity observations are OBSERVED in time; only a strictly later one replaces the name."""
    return last_seen is None or seen_at > last_seen
