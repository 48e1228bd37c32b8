from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from .identity import is_more_current, resolve_identity
from .models import Character, Index, ItemStats, Sale, Server, Window

# "month" is a fixed 30 days, not a calendar month
WINDOWS = (
    Window("all", None),
    Window("day", timedelta(hours=24)),
    Window("week", timedelta(days=7)),
    Window("month", timedelta(days=30)),
)


def window_by_name(name: str) -> Window | None:
    for w in WINDOWS:
        if w.name == name:
            return w
    return None


def in_window(sale_time: datetime, now: datetime, window: timedelta | None) -> bool:
    """Trailing lookback; None or a zero duration means unbounded."""
    if not window:
        return True
    return now - sale_time <= window


def build_index(sales: Iterable[Sale], now: datetime, window: timedelta | None = None) -> Index:
    """
    Aggregate sales into server -> character -> item stats.
    Characters are merged by identity key; name/last_seen follow the latest sale
    (on equal timestamps the first one processed is kept).
    """
    servers: Index = {}

    for s in sales:
        if not in_window(s.time, now, window):
            continue

        name, key = resolve_identity(s.character)

        srv = servers.get(s.server)
        if srv is None:
            srv = Server(name=s.server)
            servers[s.server] = srv

        ch = srv.characters.get(key)
        if ch is None:
            ch = Character(key=key, name=name, last_seen=s.time)
            srv.characters[key] = ch
        elif is_more_current(s.time, ch.last_seen):
            ch.name = name
            ch.last_seen = s.time

        stats = ch.items.get(s.item)
        if stats is None:
            stats = ItemStats()
            ch.items[s.item] = stats
        stats.add(s.quantity, s.price)

    return servers


def build_all(
    sales: Iterable[Sale],
    now: datetime,
    windows: Iterable[Window] = WINDOWS,
) -> dict[str, Index]:
    """One independent Index per window, all measured against the same `now`."""
    sales = list(sales)
    return {w.name: build_index(sales, now, w.duration) for w in windows}
