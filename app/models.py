from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass(frozen=True)
class MessageRecord:
    text: str
    ts_raw: str | None
    source_file: str | None = None


@dataclass(frozen=True)
class Sale:
    time: datetime
    server: str
    character: str
    item: str
    quantity: int
    price: float


@dataclass
class ItemStats:
    count: int = 0
    sum: float = 0.0

    def add(self, quantity: int, price: float) -> None:
        self.count += quantity
        self.sum += price

    @property
    def average(self) -> float:
        return self.sum / self.count if self.count else 0.0


@dataclass
class Character:
    key: str
    name: str
    last_seen: datetime
    items: dict[str, ItemStats] = field(default_factory=dict)


@dataclass
class Server:
    name: str
    characters: dict[str, Character] = field(default_factory=dict)


# server name -> Server
Index = dict[str, Server]


@dataclass(frozen=True)
class Window:
    name: str
    duration: timedelta | None


@dataclass(frozen=True)
class ItemRow:
    item: str
    count: int
    sum: float
    average: float


@dataclass(frozen=True)
class WindowBlock:
    window: str
    has_data: bool
    rows: list[ItemRow]
    selected_total: float
    overall_total: float


@dataclass(frozen=True)
class CharacterReport:
    server: str
    key: str
    name: str
    windows: list[WindowBlock]


@dataclass(frozen=True)
class SalesReport:
    characters: list[CharacterReport]
    known_items: list[str]
