from __future__ import annotations

from pathlib import Path

import pytest

from app.ingest import export_pages, find_latest_export, load_messages, parse_messages_html


def _mkexport(base: Path, name: str) -> Path:
    d = base / name
    d.mkdir()
    (d / "messages.html").write_text("<html></html>", encoding="utf-8")
    return d


def test_find_latest_export_by_date(exports_dir):
    assert find_latest_export(str(exports_dir)).name == "ChatExport_2026-10-18"


def test_find_latest_export_variant_suffix(tmp_path):
    _mkexport(tmp_path, "ChatExport_2026-10-18")
    _mkexport(tmp_path, "ChatExport_2026-10-18 (2)")
    _mkexport(tmp_path, "ChatExport_2026-10-18 (10)")
    _mkexport(tmp_path, "ChatExport_2026-10-17 (99)")
    _mkexport(tmp_path, "ChatExport_2026-13-40")
    _mkexport(tmp_path, "Backup_2027-01-01")
    (tmp_path / "ChatExport_2030-01-01").write_text("not a folder", encoding="utf-8")

    assert find_latest_export(str(tmp_path)).name == "ChatExport_2026-10-18 (10)"


def test_find_latest_export_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        find_latest_export(str(tmp_path / "nope"))
    with pytest.raises(FileNotFoundError):
        find_latest_export(str(tmp_path))


def test_export_pages_order(tmp_path):
    for name in ("messages10.html", "messages.html", "messages2.html", "notes.html"):
        (tmp_path / name).write_text("", encoding="utf-8")
    assert [p.name for p in export_pages(tmp_path)] == ["messages.html", "messages2.html", "messages10.html"]


def test_export_pages_require_first_page(tmp_path):
    (tmp_path / "messages2.html").write_text("", encoding="utf-8")
    with pytest.raises(FileNotFoundError):
        export_pages(tmp_path)


def test_parse_messages_html_reads_text_and_title():
    html = """
    <div class="history">
      <div class="message service"><div class="body details">19 October 2026</div></div>
      <div class="message default clearfix">
        <div class="body">
          <div class="pull_right date details" title="19.10.2026 10:00:00 UTC+03:00">10:00</div>
          <div class="text">Line one<br>Line <b>two</b></div>
        </div>
      </div>
      <div class="message default clearfix joined">
        <div class="body">
          <div class="pull_right date details">10:01</div>
          <div class="text">no title</div>
        </div>
      </div>
    </div>
    """
    records = parse_messages_html(html, source_file="page.html")
    assert len(records) == 1
    assert records[0].ts_raw == "19.10.2026 10:00:00 UTC+03:00"
    assert records[0].text == "Line oneLine two"
    assert records[0].source_file == "page.html"


def test_load_messages_from_fixture(exports_dir):
    records = load_messages(exports_dir / "ChatExport_2026-10-18", silent=True)
    assert len(records) == 9
    assert records[0].ts_raw.startswith("19.10.2026 10:00:00")
    assert records[-1].source_file.endswith("messages2.html")


def test_load_messages_single_file(exports_dir):
    records = load_messages(exports_dir / "ChatExport_2026-10-01" / "messages.html", silent=True)
    assert len(records) == 1


def test_load_messages_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_messages(tmp_path / "missing", silent=True)
