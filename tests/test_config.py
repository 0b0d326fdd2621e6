"""Tests for settings loading."""

import textwrap

import pytest

from taskboard.config import Settings, ConfigError


def test_defaults_when_no_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for var in ("TASKBOARD_DB", "TASKBOARD_API_URL", "TASKBOARD_API_SECRET", "TASKBOARD_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    cfg = Settings.load()
    assert cfg.port == 3000
    assert cfg.api_secret == ""
    assert "~" not in cfg.db_path


def test_yaml_values_and_unknown_keys(tmp_path, monkeypatch):
    monkeypatch.delenv("TASKBOARD_DB", raising=False)
    path = tmp_path / "taskboard.yaml"
    path.write_text(textwrap.dedent("""
        db_path: /data/tasks.db
        port: "8080"
        timeout: 2
        colour: purple
    """))
    cfg = Settings.load(str(path))
    assert cfg.db_path == "/data/tasks.db"
    assert cfg.port == 8080
    assert cfg.timeout == 2.0


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "taskboard.yaml"
    path.write_text("db_path: /from/yaml.db\napi_secret: yaml\n")
    monkeypatch.setenv("TASKBOARD_DB", str(tmp_path / "env.db"))
    monkeypatch.setenv("TASKBOARD_API_SECRET", "env")
    cfg = Settings.load(str(path))
    assert cfg.db_path == str(tmp_path / "env.db")
    assert cfg.api_secret == "env"


def test_missing_explicit_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        Settings.load(str(tmp_path / "absent.yaml"))


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("db_path: [unclosed\n")
    with pytest.raises(ConfigError):
        Settings.load(str(path))


def test_non_mapping_yaml_raises(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        Settings.load(str(path))


def test_bad_port_raises(tmp_path):
    path = tmp_path / "port.yaml"
    path.write_text("port: eighty\n")
    with pytest.raises(ConfigError):
        Settings.load(str(path))
