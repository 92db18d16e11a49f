import os
import sys
from pathlib import Path

import pytest


def _ensure_src_on_path() -> None:
    """
    Tests are often run from the repo root without installing the package.
    Since `marc` uses a `src/` layout, we bootstrap the module path here so
    `import marc` works, and export it for subprocesses started by the tests.
    """
    tests_dir = Path(__file__).resolve().parent
    pkg_src = (tests_dir.parent / "src").resolve()
    pkg_src_s = str(pkg_src)

    if pkg_src_s not in sys.path:
        sys.path.insert(0, pkg_src_s)

    existing = os.environ.get("PYTHONPATH", "")
    parts = [p for p in existing.split(os.pathsep) if p]
    if pkg_src_s not in parts:
        os.environ["PYTHONPATH"] = os.pathsep.join([pkg_src_s, *parts]) if parts else pkg_src_s


_ensure_src_on_path()


@pytest.fixture
def fake_home(tmp_path, monkeypatch):
    """Point HOME (and the XDG dirs) at a temp dir so no real user file is touched."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for var in ("XDG_CONFIG_HOME", "XDG_DATA_HOME", "MARC_FILE", "EDITOR", "MARC_DEBUG"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def data_path(tmp_path):
    return tmp_path / "data" / "todos.json"


@pytest.fixture
def settings(data_path):
    from marc.config import Settings

    return Settings(data_path=data_path, editor="vi")
