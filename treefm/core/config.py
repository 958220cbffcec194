"""Persistent config loader/saver for treefm."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path

from ..theme import DEFAULT_THEME, THEMES
from .elevation import DEFAULT_HELPER
from .listing import SORT_KEYS

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """Persistent user-facing configuration."""

    theme: str = DEFAULT_THEME
    show_hidden: bool = False
    sort_by: str = "name"
    trash_dir: str = ""
    elevation_helper: str = DEFAULT_HELPER


def default_config_path() -> Path:
    """Return default config path (~/.config/treefm/config.toml)."""
    return Path.home() / ".config" / "treefm" / "config.toml"


def _coerce_bool(value, default=False):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in ("1", "true", "yes", "on"):
            return True
        if lower in ("0", "false", "no", "off"):
            return False
    return default


def _section(raw: dict, name: str) -> dict:
    value = raw.get(name, {})
    return value if isinstance(value, dict) else {}


def _normalize_config(raw: dict) -> AppConfig:
    ui = _section(raw, "ui")
    files = _section(raw, "files")

    theme = str(ui.get("theme", DEFAULT_THEME)).strip().lower() or DEFAULT_THEME
    if theme not in THEMES:
        theme = DEFAULT_THEME

    sort_by = str(ui.get("sort_by", "name")).strip().lower()
    if sort_by not in SORT_KEYS:
        sort_by = "name"

    trash_dir = files.get("trash_dir", "")
    trash_dir = trash_dir.strip() if isinstance(trash_dir, str) else ""

    helper = files.get("elevation_helper", DEFAULT_HELPER)
    helper = helper.strip() if isinstance(helper, str) and helper.strip() else DEFAULT_HELPER

    return AppConfig(
        theme=theme,
        show_hidden=_coerce_bool(ui.get("show_hidden"), default=False),
        sort_by=sort_by,
        trash_dir=trash_dir,
        elevation_helper=helper,
    )


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from TOML file; return defaults when missing/invalid."""
    cfg_path = Path(path) if path is not None else default_config_path()
    try:
        text = cfg_path.read_text(encoding="utf-8")
    except OSError:
        return AppConfig()
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        LOGGER.warning("ignoring invalid config %s: %s", cfg_path, exc)
        return AppConfig()
    return _normalize_config(raw)


def _toml_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def serialize_config(config: AppConfig) -> str:
    """Serialize AppConfig as TOML text."""
    return (
        "# treefm user configuration\n"
        "[ui]\n"
        f"theme = {_toml_string(config.theme)}\n"
        f"show_hidden = {'true' if config.show_hidden else 'false'}\n"
        f"sort_by = {_toml_string(config.sort_by)}\n"
        "\n"
        "[files]\n"
        f"trash_dir = {_toml_string(config.trash_dir)}\n"
        f"elevation_helper = {_toml_string(config.elevation_helper)}\n"
    )


def save_config(config: AppConfig, path: str | Path | None = None) -> Path:
    """Persist config and return written path."""
    cfg_path = Path(path) if path is not None else default_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(serialize_config(config), encoding="utf-8", newline="\n")
    return cfg_path
