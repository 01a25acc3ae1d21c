import json

import pytest

import config_paths


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    cfg_dir = tmp_path / "levite"
    monkeypatch.setattr(config_paths, "CONFIG_DIR", str(cfg_dir))
    monkeypatch.setattr(config_paths, "CONFIG_JSON", str(cfg_dir / "config.json"))
    monkeypatch.setattr(config_paths, "HISTORY_PATH", str(cfg_dir / "history.log"))
    return cfg_dir


def test_load_config_defaults_without_json(config_dir):
    cfg = config_paths.load_config()
    assert cfg == {
        "SEPARATOR": ",",
        "CELL_WIDTH": 10,
        "HISTORY_SIZE": 100,
        "LOG_LEVEL": "WARNING",
    }


def test_ensure_config_dirs_creates_history(config_dir):
    config_paths.ensure_config_dirs()
    assert (config_dir / "history.log").exists()


def test_load_config_reads_json_overrides(config_dir):
    config_dir.mkdir()
    (config_dir / "config.json").write_text(
        json.dumps({"separator": ";", "cell_width": 12, "history_size": 5, "log_level": "debug"})
    )
    cfg = config_paths.load_config()
    assert cfg["SEPARATOR"] == ";"
    assert cfg["CELL_WIDTH"] == 12
    assert cfg["HISTORY_SIZE"] == 5
    assert cfg["LOG_LEVEL"] == "DEBUG"


def test_load_config_ignores_bad_values(config_dir):
    config_dir.mkdir()
    (config_dir / "config.json").write_text(
        json.dumps({"separator": ";;", "cell_width": 2, "history_size": True, "log_level": "loud"})
    )
    cfg = config_paths.load_config()
    assert cfg["SEPARATOR"] == ","
    assert cfg["CELL_WIDTH"] == 10
    assert cfg["HISTORY_SIZE"] == 100
    assert cfg["LOG_LEVEL"] == "WARNING"


def test_load_config_tolerates_broken_json(config_dir):
    config_dir.mkdir()
    (config_dir / "config.json").write_text("{not json")
    assert config_paths.load_config()["SEPARATOR"] == ","
