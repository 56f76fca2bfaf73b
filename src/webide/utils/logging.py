"""Logging setup for the ``webide`` package.

Handlers are attached to the ``webide`` logger rather than the root logger, so
embedding applications and test runners keep their own logging untouched.
Console output goes to stderr and never mixes with command output on stdout.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from pathlib import Path

__all__ = ["PACKAGE_LOGGER", "LOG_FILENAME", "resolve_log_dir", "setup_logging", "reset_logging", "current_log_path"]

PACKAGE_LOGGER = "webide"
LOG_FILENAME = "webide.log"
_DEFAULT_LOG_DIR = Path.home() / ".webide" / "logs"
_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"

_installed: list[logging.Handler] = []
_log_path: Path | None = None


def resolve_log_dir(log_dir: Path | str | None = None) -> Path:
    """Pick the log directory: explicit argument, ``WEBIDE_LOG_DIR``, then ``~/.webide/logs``."""

    return Path(log_dir or os.environ.get("WEBIDE_LOG_DIR") or _DEFAULT_LOG_DIR).expanduser()


def setup_logging(
    level: int = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = False,
    max_bytes: int = 512_000,
    backup_count: int = 2,
    force: bool = False,
) -> Path | None:
    """Attach a rotating ``webide.log`` handler and optionally a stderr handler.

    Returns the log file path, or ``None`` when the directory cannot be
    written; the process then keeps running with console logging only.
    Calling again without ``force`` keeps the existing configuration.
    """

    global _log_path
    if _installed and not force:
        return _log_path
    reset_logging()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        _install(package_logger, console_handler)

    target = resolve_log_dir(log_dir) / LOG_FILENAME
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            target, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    except OSError as exc:
        package_logger.warning("File logging disabled; cannot write %s: %s", target, exc)
        _log_path = None
        return None
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    _install(package_logger, file_handler)
    _log_path = target
    return target


def reset_logging() -> None:
    """Detach and close every handler installed by :func:`setup_logging`."""

    global _log_path
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    while _installed:
        handler = _installed.pop()
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    _log_path = None


def current_log_path() -> Path | None:
    return _log_path


def _install(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.addHandler(handler)
    _installed.append(handler)
