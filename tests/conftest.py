from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.models import Sale

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"
EXPORTS_DIR = FIXTURE_DIR / "exports"
FIXTURE_NOW = datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture(autouse=True)
def force_utc_tz(monkeypatch):
    monkeypatch.setenv("TZ", "UTC")
    try:
        time.tzset()
    except AttributeError:
        pass


@pytest.fixture(autouse=True)
def config_path(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setenv("SALES_TOOL_CONFIG", str(path))
    return path


@pytest.fixture
def exports_dir():
    return EXPORTS_DIR


@pytest.fixture
def now():
    return FIXTURE_NOW


def make_sale(
    when: datetime,
    server: str = "Alpha",
    character: str = "Frodo #1",
    item: str = "Sword",
    quantity: int = 1,
    price: float = 10.0,
) -> Sale:
    return Sale(time=when, server=server, character=character, item=item, quantity=quantity, price=price)


def sale_message(
    server: str,
    character: str,
    item: str,
    qty: str,
    price: str,
    item_label: str = "Название",
    qty_label: str = "Кол-во",
) -> str:
    return (
        "Вы успешно продали предмет!\n"
        f"Сервер: {server}\n"
        f"Персонаж: {character}\n"
        f"{item_label}: {item}\n"
        f"{qty_label}: {qty}\n"
        f"Цена продажи: ${price}"
    )
