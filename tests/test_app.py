"""Tests covering the application bootstrap helpers."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from webide import app
from webide.services.blob_store import FileBlobStore
from webide.services.persistence import PersistenceGateway
from webide.services.settings import Settings
from webide.vfs.nodes import FileNode, FolderNode


_configure_logging = app.configure_logging


@pytest.fixture(autouse=True)
def _skip_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app, "configure_logging", lambda *args, **kwargs: None)


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.json"


def _run(settings_path: Path, *argv: str) -> int:
    return app.main(["--settings-path", str(settings_path), *argv])


def test_dump_settings_applies_cli_overrides(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = _run(
        settings_path,
        "--dump-settings",
        "--set",
        "storage_key=alt-project",
        "--set",
        "saved_status_seconds=0.25",
    )

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["settings"]["storage_key"] == "alt-project"
    assert payload["settings"]["saved_status_seconds"] == 0.25
    assert payload["meta"] == {
        "path": str(settings_path),
        "cli_overrides": ["saved_status_seconds", "storage_key"],
        "log_path": None,
    }


@pytest.mark.parametrize("override", ["missing-equals", "=value", "unknown=1", "debug_logging=maybe"])
def test_invalid_override_exits_with_usage_error(
    settings_path: Path, override: str, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(settings_path, "--set", override) == 2
    assert "Invalid --set override" in capsys.readouterr().err


def test_default_action_prints_explorer(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(settings_path) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[:3] == ["v src", "    App.jsx", "    App.css"]
    assert "> public" in lines
    assert "  README.md" in lines


def test_dump_tree_lists_every_file(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(settings_path, "--dump-tree") == 0

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 6
    assert lines[0].startswith("src/App.jsx\tjavascript\t")
    assert lines[2].startswith("src/components/Header.jsx\t")


def test_cat_prints_file_or_fails(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(settings_path, "--cat", "package.json") == 0
    assert '"name": "web-ide-project"' in capsys.readouterr().out

    assert _run(settings_path, "--cat", "src/missing.js") == 1
    assert "no such file" in capsys.readouterr().err


def test_storage_path_restores_saved_project(
    tmp_path: Path, settings_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    storage = tmp_path / "storage.json"
    PersistenceGateway(FileBlobStore(storage)).snapshot(FolderNode({"hello.py": FileNode("print('hi')", "python")}))

    assert _run(settings_path, "--storage-path", str(storage), "--cat", "hello.py") == 0
    assert capsys.readouterr().out == "print('hi')\n"


def test_corrupt_storage_warns_and_uses_default(
    tmp_path: Path, settings_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    storage = tmp_path / "storage.json"
    storage.write_text(json.dumps({"web-ide-filesystem": "{truncated"}), encoding="utf-8")

    assert _run(settings_path, "--storage-path", str(storage), "--dump-tree") == 0

    captured = capsys.readouterr()
    assert "persistence_corrupt" in captured.err
    assert "src/App.jsx" in captured.out


def test_build_workspace_persists_saves_to_storage_path(tmp_path: Path) -> None:
    storage = tmp_path / "storage.json"
    workspace = app.build_workspace(Settings(storage_path=str(storage)))

    workspace.open("README.md")
    workspace.edit("README.md", "# Saved")
    assert workspace.save("README.md").ok

    reloaded = app.build_workspace(Settings(storage_path=str(storage)))
    assert reloaded.read("README.md") == "# Saved"


def test_build_workspace_uses_configured_status_delays() -> None:
    workspace = app.build_workspace(Settings(saved_status_seconds=0.0))
    workspace.open("README.md")

    workspace.save_trigger()()

    assert workspace.status.current() is None


def test_run_console_stops_at_exit() -> None:
    stdin = io.StringIO("pwd\nbogus\nexit\nwhoami\n")
    stdout = io.StringIO()

    assert app.run_console(app.CommandConsole(), stdin=stdin, stdout=stdout) == 0

    output = stdout.getvalue()
    assert "/home/user/web-ide\n" in output
    assert "Command not found: bogus" in output
    assert "webide-user" not in output
    assert output.startswith("$ ")


def test_coerce_cli_overrides_handles_field_types() -> None:
    overrides = app._coerce_cli_overrides(
        [
            'expanded_folders=["src", "public"]',
            "debug_logging=on",
            "error_status_seconds=4",
            "storage_path=none",
            "console_cwd_label=/srv",
        ]
    )

    assert overrides == {
        "expanded_folders": ["src", "public"],
        "debug_logging": True,
        "error_status_seconds": 4.0,
        "storage_path": None,
        "console_cwd_label": "/srv",
    }


def test_coerce_value_rejects_non_list_json() -> None:
    with pytest.raises(ValueError):
        app._coerce_value(list[str], '{"a": 1}')


def test_env_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEBIDE_DEBUG", "Yes")
    assert app._env_flag("WEBIDE_DEBUG") is True
    monkeypatch.delenv("WEBIDE_DEBUG")
    assert app._env_flag("WEBIDE_DEBUG", default=True) is True


def test_undecodable_storage_file_falls_back_to_default(
    tmp_path: Path, settings_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    storage = tmp_path / "storage.json"
    storage.write_bytes(b'{"web-ide-filesystem": "\xff\xfe"}')

    assert _run(settings_path, "--storage-path", str(storage), "--dump-tree") == 0
    assert "src/App.jsx" in capsys.readouterr().out

    workspace = app.build_workspace(Settings(storage_path=str(storage)))
    assert workspace.read("package.json") is not None


def test_directory_storage_path_falls_back_to_default(
    tmp_path: Path, settings_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    storage = tmp_path / "storage"
    storage.mkdir()

    assert _run(settings_path, "--storage-path", str(storage), "--cat", "README.md") == 0
    assert capsys.readouterr().out.startswith("# Web IDE Project")


def test_log_dir_option_routes_the_log_file(
    tmp_path: Path,
    settings_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr(app, "configure_logging", _configure_logging)
    log_dir = tmp_path / "logs"

    assert _run(settings_path, "--log-dir", str(log_dir), "--dump-settings") == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["settings"]["log_dir"] == str(log_dir)
    assert payload["meta"]["log_path"] == str(log_dir / "webide.log")
    assert (log_dir / "webide.log").exists()


def test_log_dir_from_settings_file(
    tmp_path: Path,
    settings_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr(app, "configure_logging", _configure_logging)
    settings_path.write_text(json.dumps({"log_dir": str(tmp_path / "from-file")}), encoding="utf-8")

    assert _run(settings_path, "--dump-tree") == 0

    assert (tmp_path / "from-file" / "webide.log").exists()
    assert capsys.readouterr().err == ""
