from __future__ import annotations
import os, sys
from pathlib import Path

APP_NAME = "marc"

def home() -> Path:
    return Path.home()

def config_dir() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or str(home() / "AppData" / "Roaming")
        return Path(appdata) / APP_NAME
    if sys.platform == "darwin":
        return home() / "Library" / "Application Support" / APP_NAME
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return home() / ".config" / APP_NAME

def config_path() -> Path:
    return config_dir() / "config.json"

def default_data_path() -> Path:
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_NAME / "todos.json"
    return home() / f".{APP_NAME}" / "todos.json"
