"""Application bootstrap helpers and the ``webide`` console script."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, TextIO, get_args, get_origin, get_type_hints

from .console import PROMPT, CommandConsole
from .editor.explorer import FileExplorer
from .editor.save_status import SaveStatusIndicator
from .editor.workspace import Workspace
from .events import Event, EventBus
from .services.blob_store import BlobStore, FileBlobStore, InMemoryBlobStore
from .services.persistence import PersistenceGateway
from .services.settings import Settings, SettingsStore
from .utils import logging as logging_utils
from .vfs.tree import walk_files

_LOGGER = logging.getLogger(__name__)
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}
_EXIT_COMMANDS = {"exit", "quit"}


def configure_logging(
    debug: bool = False,
    *,
    log_dir: str | Path | None = None,
    console: bool = False,
    force: bool = False,
) -> Path | None:
    level = logging.DEBUG if debug else logging.INFO
    log_path = logging_utils.setup_logging(level, log_dir=log_dir, console=console, force=force)
    _LOGGER.debug("Logging configured (level=%s, file=%s)", logging.getLevelName(level), log_path)
    return log_path


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    return active_store.load(overrides=overrides)


def build_blob_store(settings: Settings) -> BlobStore:
    if settings.storage_path:
        return FileBlobStore(settings.storage_path)
    _LOGGER.debug("No storage path configured; snapshots are kept in memory")
    return InMemoryBlobStore()


def build_workspace(
    settings: Settings,
    *,
    store: BlobStore | None = None,
    event_bus: EventBus[Event] | None = None,
) -> Workspace:
    """Restore-or-default construction of the process-wide workspace."""

    gateway = PersistenceGateway(store or build_blob_store(settings), key=settings.storage_key)
    status = SaveStatusIndicator(
        saved_seconds=settings.saved_status_seconds,
        error_seconds=settings.error_status_seconds,
    )
    return Workspace.create(gateway, event_bus=event_bus, status=status)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point invoked by the ``webide`` console script."""

    args = _parse_cli_args(argv)
    settings_path = args.settings_path or os.environ.get("WEBIDE_SETTINGS_PATH")
    store = SettingsStore(Path(settings_path).expanduser() if settings_path else None)
    try:
        overrides = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        return 2
    if args.storage_path:
        overrides["storage_path"] = args.storage_path
    if args.log_dir:
        overrides["log_dir"] = args.log_dir
    settings = load_settings(store=store, overrides=overrides or None)

    debug = _env_flag("WEBIDE_DEBUG", default=False)
    configure_logging(debug or settings.debug_logging, log_dir=settings.log_dir, console=debug)

    if args.dump_settings:
        _dump_settings(settings, store, overrides=overrides)
        return 0

    workspace = build_workspace(settings)
    if workspace.restore_error is not None:
        print(f"warning: {workspace.restore_error}; using the default project", file=sys.stderr)

    if args.cat:
        return _cat(workspace, args.cat)
    if args.console:
        return run_console(CommandConsole(home_label=settings.console_cwd_label))
    if args.edit:
        return run_editor(workspace, args.edit)
    if args.dump_tree:
        _dump_tree(workspace)
    else:
        _print_explorer(workspace, FileExplorer(settings.expanded_folders))
    return 0


def run_console(
    console: CommandConsole,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Line-based loop over the canned console until EOF or ``exit``."""

    source = stdin or sys.stdin
    destination = stdout or sys.stdout
    destination.write(PROMPT)
    destination.flush()
    for raw_line in source:
        line = raw_line.rstrip("\n")
        if line.strip() in _EXIT_COMMANDS:
            break
        for output in console.execute(line):
            destination.write(output + "\n")
        destination.write(PROMPT)
        destination.flush()
    destination.write("\n")
    return 0


def run_editor(workspace: Workspace, path: str) -> int:
    """Open ``path`` and show it in a Qt editor window until it is closed."""

    from PySide6.QtWidgets import QApplication

    from .ui.qt_surface import EditorWindow

    result = workspace.open(path)
    if not result.ok:
        print(f"Cannot open {path}: {result.error}", file=sys.stderr)
        return 1
    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("webide")
    window = EditorWindow(workspace)
    window.resize(900, 640)
    window.show()
    return int(app.exec())


def _cat(workspace: Workspace, path: str) -> int:
    content = workspace.read(path)
    if content is None:
        print(f"{path}: no such file", file=sys.stderr)
        return 1
    sys.stdout.write(content)
    if not content.endswith("\n"):
        sys.stdout.write("\n")
    return 0


def _dump_tree(workspace: Workspace, stream: TextIO | None = None) -> None:
    destination = stream or sys.stdout
    for path, node in walk_files(workspace.root):
        destination.write(f"{path}\t{node.language}\t{len(node.content)}\n")


def _print_explorer(workspace: Workspace, explorer: FileExplorer, stream: TextIO | None = None) -> None:
    destination = stream or sys.stdout
    for row in explorer.rows(workspace.root):
        marker = ("v " if row.expanded else "> ") if row.is_folder else "  "
        indent = "  " * row.depth
        destination.write(f"{indent}{marker}{row.name}\n")


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _parse_cli_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="webide",
        description="Inspect or edit the webide project tree.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.webide/settings.json path.",
    )
    parser.add_argument(
        "--storage-path",
        metavar="PATH",
        help="JSON file holding the persisted project snapshot.",
    )
    parser.add_argument(
        "--log-dir",
        metavar="DIR",
        help="Directory for webide.log (defaults to ~/.webide/logs).",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override a setting for this run (repeatable).",
    )
    parser.add_argument("--dump-settings", action="store_true", help="Print the effective settings and exit.")
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument("--dump-tree", action="store_true", help="List every file with its language and size.")
    actions.add_argument("--cat", metavar="PATH", help="Print the stored content of one file.")
    actions.add_argument("--console", action="store_true", help="Run the simulated terminal on stdin.")
    actions.add_argument("--edit", metavar="PATH", help="Open a file in the Qt editor window.")
    return parser.parse_args(argv)


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    fields = Settings.__dataclass_fields__  # type: ignore[attr-defined]
    type_hints = get_type_hints(Settings)
    for entry in items:
        if "=" not in entry:
            raise ValueError(f"Override '{entry}' must use KEY=VALUE syntax.")
        key, raw_value = entry.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError("Override is missing a field name.")
        if key not in fields:
            raise ValueError(f"Unknown setting '{key}'.")
        overrides[key] = _coerce_value(type_hints.get(key, fields[key].type), raw_value.strip())
    return overrides


def _coerce_value(annotation: Any, raw_value: str) -> Any:
    target = _resolve_annotation(annotation)
    if raw_value.lower() in {"none", "null"} and type(None) in get_args(annotation):
        return None
    if target is bool:
        return _parse_bool(raw_value)
    if target is float:
        return float(raw_value)
    if target is list:
        try:
            value = json.loads(raw_value or "[]")
        except json.JSONDecodeError as exc:
            raise ValueError("List overrides must be valid JSON arrays") from exc
        if not isinstance(value, list):
            raise ValueError("List overrides must be valid JSON arrays")
        return value
    return raw_value


def _resolve_annotation(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is None:
        return annotation
    if origin in {list, dict}:
        return origin
    args = [arg for arg in get_args(annotation) if arg is not type(None)]
    return args[0] if args else origin


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Cannot coerce '{value}' to a boolean.")


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    destination = stream or sys.stdout
    log_path = logging_utils.current_log_path()
    output = {
        "settings": asdict(settings),
        "meta": {
            "path": str(store.path),
            "cli_overrides": sorted(overrides.keys()),
            "log_path": str(log_path) if log_path is not None else None,
        },
    }
    json.dump(output, destination, indent=2)
    destination.write("\n")


if __name__ == "__main__":  # pragma: no cover - manual launch
    raise SystemExit(main())
