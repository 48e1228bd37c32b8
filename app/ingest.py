import re
from datetime import date
from pathlib import Path

from bs4 import BeautifulSoup
from rich.console import Console
from rich.panel import Panel

from .models import MessageRecord

console = Console()

RE_EXPORT_DIR = re.compile(r"^ChatExport_(\d{4}-\d{2}-\d{2})(?: \((\d+)\))?$")
RE_PAGE = re.compile(r"^messages(\d*)\.html$")


def find_latest_export(base_dir: str) -> Path:
    """
    Pick the newest ChatExport_YYYY-MM-DD[ (N)] folder under base_dir.
    Same date: the higher (N) wins, no suffix counts as 0.
    """
    base = Path(base_dir)
    if not base.is_dir():
        raise FileNotFoundError(f"Cannot open export directory: {base_dir}")

    best = None
    for entry in base.iterdir():
        if not entry.is_dir():
            continue
        m = RE_EXPORT_DIR.match(entry.name)
        if not m:
            continue
        try:
            d = date.fromisoformat(m.group(1))
        except ValueError:
            continue
        variant = int(m.group(2)) if m.group(2) else 0
        if best is None or (d, variant) > best[0]:
            best = ((d, variant), entry)

    if best is None:
        raise FileNotFoundError(f"No ChatExport_* folder found in {base_dir}")
    return best[1]


def export_pages(export_dir: Path) -> list[Path]:
    """messages.html, messages2.html, ... in page order."""
    pages = []
    for f in export_dir.iterdir():
        m = RE_PAGE.match(f.name)
        if m and f.is_file():
            pages.append((int(m.group(1) or 1), f))

    if not any(n == 1 for n, _ in pages):
        raise FileNotFoundError(f"messages.html not found in {export_dir}")
    return [f for _, f in sorted(pages)]


def parse_messages_html(html: str, source_file: str | None = None) -> list[MessageRecord]:
    soup = BeautifulSoup(html, "html.parser")
    out = []
    for msg in soup.select("div.message"):
        date_el = msg.select_one("div.pull_right.date.details")
        ts_raw = date_el.get("title") if date_el is not None else None
        if not ts_raw:
            continue
        text = "".join(el.get_text() for el in msg.select("div.text"))
        out.append(MessageRecord(text=text, ts_raw=ts_raw, source_file=source_file))
    return out


def load_messages(path: str | Path, silent: bool = False) -> list[MessageRecord]:
    """
    Read an export folder (or a single messages*.html file) into message records,
    keeping document order.
    """
    p = Path(path)
    if p.is_file():
        files = [p]
    elif p.is_dir():
        files = export_pages(p)
    else:
        raise FileNotFoundError(f"Path not found: {path}")

    records: list[MessageRecord] = []
    for f in files:
        html = f.read_text(encoding="utf-8", errors="ignore")
        records.extend(parse_messages_html(html, source_file=str(f)))

    if not silent:
        console.print(
            Panel(
                f"Export: {p}\nPages: {len(files)}\nMessages: {len(records)}",
                title="LOAD",
            )
        )

    return records
