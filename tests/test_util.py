from datetime import datetime

from app.util import actor_label, format_money, parse_export_ts, parse_iso_maybe, parse_price, parse_qty


def test_parse_price_formats():
    assert parse_price("12 345,67") == 12345.67
    assert parse_price("100") == 100.0
    assert parse_price("1 200,50\n      ") == 1200.5
    assert parse_price("12 345") == 12345.0
    assert parse_price("1,2,3") is None
    assert parse_price("") is None
    assert parse_price(None) is None


def test_parse_qty():
    assert parse_qty("42") == 42
    assert parse_qty(" 7 ") == 7
    assert parse_qty("x7") is None
    assert parse_qty(None) is None


def test_parse_export_ts():
    assert parse_export_ts("19.10.2026 10:00:00 UTC+03:00") == datetime(2026, 10, 19, 10, 0, 0)
    assert parse_export_ts("01.02.2026 23:59:59") == datetime(2026, 2, 1, 23, 59, 59)
    assert parse_export_ts("19.10.2026 10:00") is None
    assert parse_export_ts("") is None


def test_parse_iso_maybe():
    assert parse_iso_maybe("2026-10-19T12:00:00") == datetime(2026, 10, 19, 12, 0, 0)
    assert parse_iso_maybe("2026-10-19T12:00:00Z") == datetime(2026, 10, 19, 12, 0, 0)
    assert parse_iso_maybe("yesterday") is None


def test_format_money():
    assert format_money(12345.678) == "$12 345.68"
    assert format_money(None) == "$0.00"


def test_actor_label():
    assert actor_label("Frodo", "12345") == "Frodo #12345"
    assert actor_label("Samwise", "Samwise") == "Samwise"
