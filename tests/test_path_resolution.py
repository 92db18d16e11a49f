import json
from pathlib import Path


def test_resolve_settings_precedence_env_config_default(fake_home):
    from marc.config import resolve_settings
    from marc.paths import config_path, default_data_path

    # Config file with relative data_path should resolve relative to config dir
    cfg_p = config_path()
    cfg_p.parent.mkdir(parents=True, exist_ok=True)
    cfg_p.write_text(
        json.dumps({"data_path": "todos.json", "editor": "nano"}, indent=2),
        encoding="utf-8",
    )

    s = resolve_settings({})
    assert s.data_path == cfg_p.parent / "todos.json"
    assert s.editor == "nano"

    # Env overrides config
    s = resolve_settings({"MARC_FILE": str(fake_home / "env.json"), "EDITOR": "emacs"})
    assert s.data_path == fake_home / "env.json"
    assert s.editor == "emacs"

    # Without env and config, fall back to defaults
    cfg_p.unlink()
    s = resolve_settings({})
    assert s.data_path == default_data_path()
    assert s.editor == "vi"
    assert s.debug is False


def test_default_data_path_lives_under_home(fake_home):
    from marc.paths import default_data_path

    assert default_data_path() == fake_home / ".marc" / "todos.json"


def test_xdg_data_home_is_honoured(fake_home, monkeypatch, tmp_path):
    from marc.paths import default_data_path

    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
    assert default_data_path() == tmp_path / "xdg" / "marc" / "todos.json"


def test_invalid_config_file_is_ignored(fake_home):
    from marc.config import load_config
    from marc.paths import config_path

    cfg_p = config_path()
    cfg_p.parent.mkdir(parents=True, exist_ok=True)
    cfg_p.write_text("{oops", encoding="utf-8")
    cfg = load_config()
    assert cfg.data_path == ""
    assert cfg.editor == ""


def test_debug_flag_from_env(fake_home):
    from marc.config import resolve_settings

    assert resolve_settings({"MARC_DEBUG": "1"}).debug is True
    assert resolve_settings({"MARC_DEBUG": "no"}).debug is False


def test_absolute_config_path_is_kept(fake_home, tmp_path):
    from marc.config import resolve_settings
    from marc.paths import config_path

    target = tmp_path / "elsewhere" / "t.json"
    cfg_p = config_path()
    cfg_p.parent.mkdir(parents=True, exist_ok=True)
    cfg_p.write_text(json.dumps({"data_path": str(target)}), encoding="utf-8")
    assert resolve_settings({}).data_path == Path(target)


def test_non_utf8_config_file_is_ignored(fake_home):
    from marc.config import load_config, resolve_settings
    from marc.paths import config_path, default_data_path

    cfg_p = config_path()
    cfg_p.parent.mkdir(parents=True, exist_ok=True)
    cfg_p.write_bytes(b'{"editor": "\xff"}')
    assert load_config().editor == ""
    assert resolve_settings({}).data_path == default_data_path()


def test_config_path_that_is_a_directory_is_ignored(fake_home):
    from marc.config import load_config
    from marc.paths import config_path

    config_path().mkdir(parents=True)
    assert load_config().data_path == ""
