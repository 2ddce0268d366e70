"""Persisted defaults."""

import json

import pytest

from clumsy_loader.core import config
from clumsy_loader.core.config import DEFAULT_PANEL_URL, load_cfg, save_cfg


@pytest.fixture
def cfg_file(tmp_path, monkeypatch):
    path = tmp_path / "conf" / "config.json"
    monkeypatch.setenv("CLUMSY_LOADER_CONFIG", str(path))
    return path


def test_defaults_when_missing(cfg_file):
    cfg = load_cfg()
    assert cfg["panel_url"] == DEFAULT_PANEL_URL
    assert cfg["timeout"] is None
    assert not cfg_file.exists()


def test_save_then_load(cfg_file):
    save_cfg({"panel_url": "https://panel.example.com", "out_dir": "backups", "custom": 1})

    cfg = load_cfg()
    assert cfg["panel_url"] == "https://panel.example.com"
    assert cfg["out_dir"] == "backups"
    assert cfg["custom"] == 1
    assert cfg["schema"] == config.SCHEMA_VERSION


def test_api_key_never_written(cfg_file):
    save_cfg({"api_key": "secret", "token": "also-secret"})

    raw = json.loads(cfg_file.read_text(encoding="utf-8"))
    assert "api_key" not in raw and "token" not in raw


def test_previous_file_kept_as_backup(cfg_file):
    save_cfg({"out_dir": "one"})
    save_cfg({"out_dir": "two"})

    bak = cfg_file.with_suffix(".bak.json")
    assert json.loads(bak.read_text(encoding="utf-8"))["out_dir"] == "one"


def test_corrupt_file_moved_aside(cfg_file):
    cfg_file.parent.mkdir(parents=True)
    cfg_file.write_text("{not json", encoding="utf-8")

    assert load_cfg() == config.DEFAULT_CFG
    assert cfg_file.with_suffix(".bad.json").exists()
    assert not cfg_file.exists()


def test_non_object_ignored(cfg_file):
    cfg_file.parent.mkdir(parents=True)
    cfg_file.write_text("[1, 2]", encoding="utf-8")

    assert load_cfg() == config.DEFAULT_CFG


def test_dir_override(tmp_path, monkeypatch):
    monkeypatch.delenv("CLUMSY_LOADER_CONFIG", raising=False)
    monkeypatch.setenv("CLUMSY_LOADER_DIR", str(tmp_path))

    assert config.config_path() == tmp_path.resolve() / "config.json"
