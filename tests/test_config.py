from __future__ import annotations

import json

import pytest

from app import cli
from sales_tool.core.config import Config, get_config_path, load_config, save_config

NOW = "now=2026-10-19T12:00:00"


def _answers(monkeypatch, answers):
    it = iter(answers)
    asked = []

    def fake_ask(prompt, *args, **kwargs):
        asked.append(prompt)
        return next(it)

    monkeypatch.setattr(cli.Prompt, "ask", fake_ask)
    return asked


def _no_prompt(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("unexpected prompt")

    monkeypatch.setattr(cli.Prompt, "ask", fail)


def test_config_path_from_env(config_path):
    assert get_config_path() == config_path.resolve()


def test_save_and_load_round_trip(config_path):
    save_config(Config(base_dir="/exports", selected=["Меч", "Щит"]))
    raw = json.loads(config_path.read_text(encoding="utf-8"))
    assert raw == {"base_dir": "/exports", "selected": ["Меч", "Щит"]}
    assert load_config() == Config(base_dir="/exports", selected=["Меч", "Щит"])


def test_load_config_missing(config_path):
    assert not config_path.exists()
    assert load_config() is None


@pytest.mark.parametrize(
    "content",
    [
        "{}",
        "[]",
        "not json",
        '{"base_dir": "x", "selected": []}',
        '{"base_dir": "", "selected": ["Меч"]}',
        '{"base_dir": "x", "selected": "Меч"}',
    ],
)
def test_load_config_rejects_unusable_file(config_path, content):
    config_path.write_text(content, encoding="utf-8")
    assert load_config() is None


def test_load_config_trims_items(config_path):
    config_path.write_text('{"base_dir": " x ", "selected": [" Меч ", "", "  "]}', encoding="utf-8")
    assert load_config() == Config(base_dir="x", selected=["Меч"])


def test_first_report_run_asks_and_saves(monkeypatch, exports_dir, config_path):
    asked = _answers(monkeypatch, [str(exports_dir), "Меч", " Щит ", ""])

    assert cli.main(["report", NOW]) == 0
    assert len(asked) == 4
    assert load_config() == Config(base_dir=str(exports_dir), selected=["Меч", "Щит"])

    # Second run reuses the saved answers
    _no_prompt(monkeypatch)
    assert cli.main(["report", NOW]) == 0


def test_empty_selection_is_refused(monkeypatch, exports_dir, config_path):
    _answers(monkeypatch, [str(exports_dir), ""])
    assert cli.main(["report", NOW]) == 1
    assert not config_path.exists()


def test_explicit_args_skip_prompt(monkeypatch, exports_dir, config_path):
    _no_prompt(monkeypatch)
    assert cli.main(["report", f"base={exports_dir}", "items=Меч", NOW]) == 0
    assert cli.main(["status", f"base={exports_dir}"]) == 0
    assert cli.main(["items", f"base={exports_dir}"]) == 0
    assert not config_path.exists()


def test_report_missing_export_exit_code(monkeypatch, tmp_path):
    _no_prompt(monkeypatch)
    assert cli.main(["report", f"base={tmp_path}", "items=Меч", NOW]) == 1


def test_report_invalid_now(monkeypatch, exports_dir):
    _no_prompt(monkeypatch)
    assert cli.main(["report", f"base={exports_dir}", "items=Меч", "now=yesterday"]) == 1


def test_config_command_offers_saved_folder(monkeypatch, config_path):
    save_config(Config(base_dir="/old", selected=["Меч"]))
    seen_defaults = []

    answers = iter(["/new", "Бинт", ""])

    def fake_ask(prompt, *args, **kwargs):
        seen_defaults.append(kwargs.get("default"))
        return next(answers)

    monkeypatch.setattr(cli.Prompt, "ask", fake_ask)

    assert cli.main(["config"]) == 0
    assert seen_defaults[0] == "/old"
    assert load_config() == Config(base_dir="/new", selected=["Бинт"])
