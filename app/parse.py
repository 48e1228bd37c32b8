import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable

from rich.console import Console
from rich.panel import Panel

from .models import MessageRecord, Sale
from .util import build_warning_lines, parse_export_ts, parse_price, parse_qty

console = Console()

# -------------------------
# Grammar
# -------------------------


@dataclass(frozen=True)
class SaleGrammar:
    name: str
    marker: str
    pattern: re.Pattern


def _labels(*labels: str) -> str:
    return "(?:" + "|".join(re.escape(label) for label in labels) + ")"


def _sale_pattern(server: str, character: str, item: tuple, qty: tuple, price: str) -> re.Pattern:
    # Fields in fixed order, any whitespace (incl. line breaks) between them
    return re.compile(
        rf"{_labels(server)}:\s*(?P<server>.+?)\s*"
        rf"{_labels(character)}:\s*(?P<character>.+?)\s*"
        rf"{_labels(*item)}:\s*(?P<item>.+?)\s*"
        rf"{_labels(*qty)}:\s*(?P<qty>[0-9]+)\s*"
        rf"{_labels(price)}:\s*\$(?P<price>[0-9\s,]+)",
        re.S,
    )


# Russian labels are what real exports contain
GRAMMAR_RU = SaleGrammar(
    name="ru",
    marker="Вы успешно продали предмет",
    pattern=_sale_pattern(
        "Сервер",
        "Персонаж",
        ("Название", "Предмет"),
        ("Кол-во", "Количество"),
        "Цена продажи",
    ),
)

GRAMMAR_EN = SaleGrammar(
    name="en",
    marker="You have successfully sold the item",
    pattern=_sale_pattern(
        "Server",
        "Character",
        ("Title", "Item"),
        ("Qty", "Quantity"),
        "Sale price",
    ),
)

GRAMMARS = (GRAMMAR_RU, GRAMMAR_EN)

# Legacy display name -> current name
ITEM_ALIASES = {
    "Улучшенный эпинефрин": "Адреналин",
    "Enhanced Epinephrine": "Adrenaline",
}


def canonical_item(name: str) -> str:
    name = (name or "").strip()
    return ITEM_ALIASES.get(name, name)


def is_sale_message(text: str | None, grammars: Iterable[SaleGrammar] = GRAMMARS) -> bool:
    s = text or ""
    return any(g.marker in s for g in grammars)


# -------------------------
# Extraction
# -------------------------


@dataclass(frozen=True)
class SaleMatch:
    """Raw fields of one recognized sale, before numeric normalization."""

    time: datetime
    server: str
    character: str
    item: str
    qty_raw: str
    price_raw: str

    def to_sale(self) -> Sale:
        return Sale(
            time=self.time,
            server=self.server,
            character=self.character,
            item=self.item,
            quantity=parse_qty(self.qty_raw) or 0,
            price=parse_price(self.price_raw) or 0.0,
        )


def match_sale(
    text: str | None,
    ts_raw: str | None,
    grammars: Iterable[SaleGrammar] = GRAMMARS,
) -> SaleMatch | None:
    s = text or ""
    for grammar in grammars:
        if grammar.marker not in s:
            continue

        msg_time = parse_export_ts(ts_raw)
        if msg_time is None:
            return None

        m = grammar.pattern.search(s)
        if not m:
            continue

        return SaleMatch(
            time=msg_time,
            server=m.group("server").strip(),
            character=m.group("character").strip(),
            item=canonical_item(m.group("item")),
            qty_raw=m.group("qty"),
            price_raw=m.group("price"),
        )
    return None


def extract_sale(
    text: str | None,
    ts_raw: str | None,
    grammars: Iterable[SaleGrammar] = GRAMMARS,
) -> Sale | None:
    """
    Turn one chat message into a Sale.
    Returns None for anything that is not a well-formed sale notification;
    unparsable qty/price become 0.
    """
    found = match_sale(text, ts_raw, grammars)
    return found.to_sale() if found else None


# -------------------------
# Batch
# -------------------------


def _source_label(msg: MessageRecord) -> str:
    page = Path(msg.source_file).name if msg.source_file else "?"
    return f"{page} @ {msg.ts_raw or 'no timestamp'}"


@dataclass
class ParseResult:
    sales: list[Sale] = field(default_factory=list)
    messages: int = 0
    sale_messages: int = 0
    defaulted_qty: int = 0
    defaulted_price: int = 0
    skipped_sources: list[str] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return self.sale_messages - len(self.sales)

    def warning_lines(self) -> list[str]:
        return build_warning_lines(
            skipped_count=self.skipped,
            defaulted_qty_count=self.defaulted_qty,
            defaulted_price_count=self.defaulted_price,
        )


def parse_sales(
    messages: Iterable[MessageRecord],
    silent: bool = False,
    grammars: Iterable[SaleGrammar] = GRAMMARS,
) -> ParseResult:
    """Extract every sale from the export, in export order."""
    grammars = tuple(grammars)
    result = ParseResult()

    for msg in messages:
        result.messages += 1
        if not is_sale_message(msg.text, grammars):
            continue
        result.sale_messages += 1

        found = match_sale(msg.text, msg.ts_raw, grammars)
        if found is None:
            result.skipped_sources.append(_source_label(msg))
            continue

        # Built-in grammars only capture digits for qty; custom ones may not
        if parse_qty(found.qty_raw) is None:
            result.defaulted_qty += 1
        if parse_price(found.price_raw) is None:
            result.defaulted_price += 1
        result.sales.append(found.to_sale())

    if not silent:
        console.print(
            Panel(
                f"Messages: {result.messages}\n"
                f"Sale messages: {result.sale_messages}\n"
                f"Sales parsed: {len(result.sales)}",
                title="PARSE",
            )
        )

    return result
