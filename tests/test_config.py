import os
import time

import pytest
import yaml

from voskbridge.framework.config import ConfigManager


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "voskbridge.yaml"
    monkeypatch.setenv("VOSKBRIDGE_CONFIG", str(path))

    def write(data):
        path.write_text(yaml.safe_dump(data))
        return path

    return write


def test_defaults_without_config_file(tmp_path, monkeypatch):
    monkeypatch.setenv("VOSKBRIDGE_CONFIG", str(tmp_path / "absent.yaml"))

    manager = ConfigManager()

    assert manager.config_file_path is None
    assert manager.get("recognizer.sample_rate") == 16000
    assert manager.get("recognizer.words") is False
    assert manager.get("library.path") is None
    assert manager.get("library.path", "fallback") == "fallback"
    assert manager.get("no.such.key", 42) == 42


def test_user_values_override_defaults(config_file):
    config_file({"recognizer": {"sample_rate": 8000, "words": True}})

    manager = ConfigManager()

    assert manager.initial_config_valid
    assert manager.get("recognizer.sample_rate") == 8000
    assert manager.get("recognizer.words") is True
    # Keys missing from the user file come from the defaults
    assert manager.get("recognizer.max_alternatives") == 0
    assert manager.get("stt.chunk_frames") == 4000


def test_invalid_values_restored_from_defaults(config_file):
    config_file(
        {
            "recognizer": {"sample_rate": -5, "max_alternatives": 3},
            "logging": {"level": "LOUD"},
        }
    )

    manager = ConfigManager()

    assert not manager.initial_config_valid
    assert any("sample_rate" in e for e in manager.validation_errors)
    assert manager.get("recognizer.sample_rate") == 16000
    assert manager.get("recognizer.max_alternatives") == 3
    assert manager.get("logging.level") == "INFO"


def test_unknown_section_keys_reset_section(config_file):
    config_file({"library": {"path": "/opt/libvosk.so", "colour": "red"}})

    manager = ConfigManager()

    assert not manager.initial_config_valid
    assert "colour" not in manager.config["library"]


def test_non_mapping_config_is_rejected(config_file):
    path = config_file({})
    path.write_text("- just\n- a list\n")

    with pytest.raises(ValueError, match="mapping"):
        ConfigManager()


def test_set_overrides_in_memory(config_file):
    config_file({})
    manager = ConfigManager()

    manager.set("recognizer.max_alternatives", 4)
    manager.set("extra.nested.value", "x")

    assert manager.get("recognizer.max_alternatives") == 4
    assert manager.get("extra.nested.value") == "x"


def test_reload_on_change(config_file):
    path = config_file({"recognizer": {"sample_rate": 8000}})
    manager = ConfigManager()
    assert manager.get("recognizer.sample_rate") == 8000

    config_file({"recognizer": {"sample_rate": 44100}})
    later = time.time() + 5
    os.utime(path, (later, later))

    assert manager.needs_load()
    assert manager.get("recognizer.sample_rate") == 44100


def test_log_directory_from_env(tmp_path, monkeypatch, config_file):
    monkeypatch.delenv("VOSKBRIDGE_LOGS", raising=False)
    config_file({"logging": {"directory": "/var/log/voskbridge"}})
    manager = ConfigManager()

    assert str(manager.get_log_directory()) == "/var/log/voskbridge"

    monkeypatch.setenv("VOSKBRIDGE_LOGS", str(tmp_path / "logs"))
    assert manager.get_log_directory() == tmp_path / "logs"


def test_log_directory_unset(monkeypatch, config_file):
    monkeypatch.delenv("VOSKBRIDGE_LOGS", raising=False)
    config_file({"recognizer": {"words": True}})

    assert ConfigManager().get_log_directory() is None
