from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path


@dataclass
class Config:
    base_dir: str
    selected: list[str] = field(default_factory=list)

    def is_complete(self) -> bool:
        return bool(self.base_dir) and bool(self.selected)


def get_config_path() -> Path:
    env_path = os.environ.get("SALES_TOOL_CONFIG")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return Path.cwd() / "config.json"


def load_config(path: Path | None = None) -> Config | None:
    """Saved config, or None when missing, unreadable or incomplete."""
    path = path or get_config_path()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(raw, dict):
        return None

    selected = raw.get("selected") or []
    if not isinstance(selected, list):
        return None
    cfg = Config(
        base_dir=str(raw.get("base_dir") or "").strip(),
        selected=[str(s).strip() for s in selected if str(s).strip()],
    )
    return cfg if cfg.is_complete() else None


def save_config(cfg: Config, path: Path | None = None) -> Path:
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), ensure_ascii=False, indent=2), encoding="utf-8")
    return path
