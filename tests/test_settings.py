"""Tests for the settings persistence layer."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from webide.services.persistence import DEFAULT_STORAGE_KEY
from webide.services.settings import Settings, SettingsStore


def test_load_returns_defaults_when_file_missing(tmp_path: Path) -> None:
    settings = SettingsStore(tmp_path / "settings.json").load()

    assert settings == Settings()
    assert settings.storage_key == DEFAULT_STORAGE_KEY
    assert settings.expanded_folders == ["src"]
    assert (settings.saved_status_seconds, settings.error_status_seconds) == (2.0, 3.0)


def test_save_and_load_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    original = Settings(
        storage_path=str(tmp_path / "blobs.json"),
        storage_key="other-project",
        expanded_folders=["src", "public"],
        saved_status_seconds=1.5,
        debug_logging=True,
        console_cwd_label="/work",
    )

    SettingsStore(path).save(original)

    assert SettingsStore(path).load() == original
    assert json.loads(path.read_text(encoding="utf-8"))["version"] == 1


def test_unknown_keys_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"storage_key": "kept", "theme": "dark"}), encoding="utf-8")

    assert SettingsStore(path).load().storage_key == "kept"


@pytest.mark.parametrize("body", ["{not json", "[1, 2, 3]"])
def test_invalid_file_falls_back_to_defaults(tmp_path: Path, body: str) -> None:
    path = tmp_path / "settings.json"
    path.write_text(body, encoding="utf-8")

    assert SettingsStore(path).load() == Settings()


def test_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEBIDE_STORAGE_PATH", "/tmp/store.json")
    monkeypatch.setenv("WEBIDE_STORAGE_KEY", "env-key")
    monkeypatch.setenv("WEBIDE_DEBUG_LOGGING", "yes")
    monkeypatch.setenv("WEBIDE_SAVED_STATUS_SECONDS", "0.5")
    monkeypatch.setenv("WEBIDE_ERROR_STATUS_SECONDS", "not-a-number")

    settings = SettingsStore(tmp_path / "settings.json").load()

    assert settings.storage_path == "/tmp/store.json"
    assert settings.storage_key == "env-key"
    assert settings.debug_logging is True
    assert settings.saved_status_seconds == 0.5
    assert settings.error_status_seconds == 3.0


def test_runtime_overrides_win_over_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEBIDE_STORAGE_KEY", "env-key")

    settings = SettingsStore(tmp_path / "settings.json").load(
        overrides={"storage_key": "cli-key", "storage_path": None, "bogus": 1}
    )

    assert settings.storage_key == "cli-key"
    assert settings.storage_path is None


def test_mistyped_fields_fall_back_to_defaults(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "saved_status_seconds": "abc",
                "error_status_seconds": -1,
                "expanded_folders": "src",
                "debug_logging": "sometimes",
                "storage_key": 42,
                "console_cwd_label": "/work",
            }
        ),
        encoding="utf-8",
    )

    with caplog.at_level("WARNING"):
        settings = SettingsStore(path).load()

    assert settings == Settings(console_cwd_label="/work")
    for name in ("saved_status_seconds", "expanded_folders", "debug_logging", "storage_key"):
        assert repr(name) in caplog.text


def test_loose_but_valid_values_are_coerced(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"saved_status_seconds": 1, "error_status_seconds": "4.5", "debug_logging": "on"}),
        encoding="utf-8",
    )

    settings = SettingsStore(path).load()

    assert settings.saved_status_seconds == 1.0
    assert settings.error_status_seconds == 4.5
    assert settings.debug_logging is True


def test_undecodable_settings_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_bytes(b'{"storage_key": "\xff"}')

    assert SettingsStore(path).load() == Settings()


def test_log_dir_environment_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEBIDE_LOG_DIR", str(tmp_path / "logs"))

    assert SettingsStore(tmp_path / "settings.json").load().log_dir == str(tmp_path / "logs")
