from __future__ import annotations
import json, os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
from .editor import DEFAULT_EDITOR
from .errors import MarcError
from .paths import config_path, default_data_path


@dataclass
class AppConfig:
    data_path: str = ""
    editor: str = ""


@dataclass(frozen=True)
class Settings:
    """Everything the store and the editor bridge need from the environment."""

    data_path: Path
    editor: str = DEFAULT_EDITOR
    debug: bool = False


def load_config() -> AppConfig:
    p = config_path()
    if not p.exists():
        return AppConfig()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        # unreadable, not UTF-8 or not JSON
        return AppConfig()
    if not isinstance(data, dict):
        return AppConfig()
    return AppConfig(
        data_path=str(data.get("data_path", "")),
        editor=str(data.get("editor", "")),
    )


def resolve_data_path(environ: Mapping[str, str], cfg: AppConfig) -> Path:
    env = environ.get("MARC_FILE", "").strip()
    if env:
        return Path(env).expanduser()
    if cfg.data_path:
        p = Path(cfg.data_path).expanduser()
        # relative paths in the config file are relative to the config directory
        if not p.is_absolute():
            p = config_path().parent / p
        return p
    return default_data_path()


def resolve_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build ``Settings`` with precedence env > config file > defaults."""
    if environ is None:
        environ = os.environ
    try:
        cfg = load_config()
        data_path = resolve_data_path(environ, cfg)
    except RuntimeError as e:
        # Path.home() could not be determined
        raise MarcError(f"cannot locate the data directory: {e}") from e
    editor = environ.get("EDITOR", "").strip() or cfg.editor.strip() or DEFAULT_EDITOR
    debug = environ.get("MARC_DEBUG", "").strip().lower() in ("1", "true", "yes")
    return Settings(data_path=data_path, editor=editor, debug=debug)
