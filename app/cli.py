import json
import sys
from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from .aggregate import WINDOWS, build_all
from .ingest import find_latest_export, load_messages
from .parse import parse_sales
from .report import build_report, known_items
from .util import parse_iso_maybe
from .render import render_items, render_report, render_status
from sales_tool.core.config import Config, get_config_path, load_config, save_config
from sales_tool.core.response import build_error
from sales_tool.core.runner import run_command

console = Console()

HELP_TEXT = """Chat Sales Report

Commands:

help
  Show this help

report [base=DIR] [items="A,B"] [now=ISO]
  Per server / character / item sales for windows: all, day, week, month.
  Without base=/items= the saved config is used (asked for on first run).

items [base=DIR]
  List every item name sold in the latest export

status [base=DIR]
  Show parse coverage (messages, sales, skipped, defaulted qty/price)

windows
  Show the report windows

config
  Ask for the export folder and the selected items, and save them

web
  Start local API server (http://127.0.0.1:8000)

Options:
  --format pretty|json (default: pretty)

Examples:
  report items="Адреналин,Бинт" --format json
  report now=2026-10-19T12:00:00
"""


def _parse_kv_args(args: list[str]) -> dict:
    out = {}
    for a in args:
        if "=" in a:
            k, v = a.split("=", 1)
            out[k.strip()] = v.strip().strip('"')
    return out


def _split_items(value: str | None) -> list[str]:
    return [p.strip() for p in (value or "").split(",") if p.strip()]


def collect_config(existing: Config | None = None) -> Config:
    """Interactively ask for base_dir and selected items, then save them."""
    if existing and existing.base_dir:
        base_dir = Prompt.ask("Path to the folder with ChatExport_* exports", default=existing.base_dir, console=console)
    else:
        base_dir = Prompt.ask("Path to the folder with ChatExport_* exports", console=console)
    console.print("Item names to report on (empty line to finish):")
    items: list[str] = []
    while True:
        line = Prompt.ask("", default="", show_default=False, console=console).strip()
        if not line:
            break
        items.append(line)

    cfg = Config(base_dir=(base_dir or "").strip(), selected=items)
    if not cfg.is_complete():
        raise ValueError("Both an export folder and at least one item are required.")
    path = save_config(cfg)
    console.print(Panel(f"Saved: {path}", title="CONFIG"))
    return cfg


def _resolve_config(kv: dict, need_items: bool) -> Config:
    cfg = load_config()
    base_dir = kv.get("base") or (cfg.base_dir if cfg else "")
    items = _split_items(kv.get("items")) or (cfg.selected if cfg else [])
    if not base_dir or (need_items and not items):
        cfg = collect_config(cfg)
        base_dir = kv.get("base") or cfg.base_dir
        items = _split_items(kv.get("items")) or cfg.selected
    return Config(base_dir=base_dir, selected=items)


def _run_report(kv: dict) -> int:
    now = parse_iso_maybe(kv["now"]) if kv.get("now") else datetime.now()
    if now is None:
        console.print("[red]Invalid now=[/red] (use an ISO timestamp)")
        return 1

    cfg = _resolve_config(kv, need_items=True)
    export_dir = find_latest_export(cfg.base_dir)
    parsed = parse_sales(load_messages(export_dir))
    per_window = build_all(parsed.sales, now, WINDOWS)
    report = build_report(parsed.sales, per_window, cfg.selected)

    render_report(report.characters, export=str(export_dir), warnings=parsed.warning_lines())
    render_items(report.known_items)
    return 0


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    output_format = "pretty"
    if "--format" in argv:
        idx = argv.index("--format")
        if idx + 1 < len(argv):
            output_format = argv[idx + 1]
            argv = argv[:idx] + argv[idx + 2 :]
    else:
        for i, arg in enumerate(list(argv)):
            if arg.startswith("--format="):
                output_format = arg.split("=", 1)[1]
                argv.pop(i)
                break

    if not argv or argv[0] in ("help", "-h", "--help"):
        console.print(Panel(HELP_TEXT.strip(), title="HELP"))
        return 0

    cmd, *args = argv
    kv = _parse_kv_args(args)

    def emit_response(payload: dict) -> int:
        print(json.dumps(payload, ensure_ascii=False))
        return 0 if payload.get("ok") else 1

    def emit_error(command: str, params: dict, message: str, code: str = "VALIDATION", hint: str = "Check usage."):
        response = build_error(command=command, params=params, message=message, code=code, hint=hint)
        print(json.dumps(response, ensure_ascii=False))
        return 1

    if cmd in ("report", "items", "status", "windows") and output_format == "json":
        return emit_response(run_command(cmd, kv))

    try:
        if cmd == "report":
            return _run_report(kv)

        if cmd == "items":
            cfg = _resolve_config(kv, need_items=False)
            parsed = parse_sales(load_messages(find_latest_export(cfg.base_dir), silent=True), silent=True)
            render_items(known_items(parsed.sales))
            return 0

        if cmd == "status":
            cfg = _resolve_config(kv, need_items=False)
            export_dir = find_latest_export(cfg.base_dir)
            render_status(str(export_dir), parse_sales(load_messages(export_dir, silent=True), silent=True))
            return 0

        if cmd == "windows":
            lines = [f"{w.name}: {w.duration or 'unbounded'}" for w in WINDOWS]
            console.print(Panel("\n".join(lines), title="WINDOWS"))
            return 0

        if cmd == "config":
            if output_format == "json":
                return emit_error("config", {}, "config is interactive; run it without --format json")
            collect_config(load_config())
            return 0
    except FileNotFoundError as exc:
        console.print(f"[red]Export not found:[/red] {exc}")
        return 1
    except ValueError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        return 1

    if cmd == "web":
        if output_format == "json":
            return emit_error("web", {}, "Use `python -m sales_tool.api.server` to start the web server.", hint="Run the web server command directly.")
        import uvicorn

        console.print(f"[green]Starting web server...[/green] (config: {get_config_path()})")
        uvicorn.run("sales_tool.api.server:app", host="127.0.0.1", port=8000, reload=False)
        return 0

    if output_format == "json":
        return emit_error("unknown", {"command": cmd}, f"Unknown command: {cmd}", hint="Run `help` to see commands.")
    console.print(Panel(f"Unknown command: {cmd}\n\n" + HELP_TEXT.strip(), title="ERROR"))
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
