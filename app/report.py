from __future__ import annotations

from typing import Iterable

from .models import (
    Character,
    CharacterReport,
    Index,
    ItemRow,
    Sale,
    SalesReport,
    WindowBlock,
)


def sorted_server_names(index: Index) -> list[str]:
    return sorted(index)


def sorted_character_keys(index: Index, server: str) -> list[str]:
    """Characters of one server ordered by current display name (key breaks ties)."""
    chars = index[server].characters
    return sorted(chars, key=lambda k: (chars[k].name, k))


def _lookup(index: Index | None, server: str, key: str) -> Character | None:
    if not index:
        return None
    srv = index.get(server)
    if srv is None:
        return None
    return srv.characters.get(key)


def window_block(window: str, ch: Character | None, selected: list[str]) -> WindowBlock:
    if ch is None:
        return WindowBlock(window=window, has_data=False, rows=[], selected_total=0.0, overall_total=0.0)

    rows = []
    for item in selected:
        stats = ch.items.get(item)
        if stats is None:
            continue
        rows.append(ItemRow(item=item, count=stats.count, sum=stats.sum, average=stats.average))

    # repeated selections count once
    selected_total = sum(ch.items[item].sum for item in dict.fromkeys(selected) if item in ch.items)
    overall_total = sum(stats.sum for stats in ch.items.values())

    return WindowBlock(
        window=window,
        has_data=True,
        rows=rows,
        selected_total=selected_total,
        overall_total=overall_total,
    )


def project_rows(
    all_index: Index,
    per_window: dict[str, Index],
    selected: list[str],
    windows: Iterable[str] | None = None,
) -> list[CharacterReport]:
    """
    Walk the all-time index for servers/characters; pull each window's view
    of that character (or a no-data block when the window lacks it).
    """
    names = list(windows) if windows is not None else list(per_window)
    out: list[CharacterReport] = []

    for server in sorted_server_names(all_index):
        for key in sorted_character_keys(all_index, server):
            ch_all = all_index[server].characters[key]
            blocks = [window_block(w, _lookup(per_window.get(w), server, key), selected) for w in names]
            out.append(CharacterReport(server=server, key=key, name=ch_all.name, windows=blocks))

    return out


def known_items(sales: Iterable[Sale]) -> list[str]:
    return sorted({s.item for s in sales})


def build_report(
    sales: list[Sale],
    per_window: dict[str, Index],
    selected: list[str],
    all_window: str = "all",
) -> SalesReport:
    return SalesReport(
        characters=project_rows(per_window[all_window], per_window, selected),
        known_items=known_items(sales),
    )
