"""Settings dataclass and JSON persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

from .persistence import DEFAULT_STORAGE_KEY

__all__ = ["Settings", "SettingsStore"]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".webide"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_ENV_OVERRIDES: Mapping[str, str] = {
    "WEBIDE_STORAGE_PATH": "storage_path",
    "WEBIDE_STORAGE_KEY": "storage_key",
    "WEBIDE_LOG_DIR": "log_dir",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "WEBIDE_DEBUG_LOGGING": "debug_logging",
}
_FLOAT_ENV_OVERRIDES: Mapping[str, str] = {
    "WEBIDE_SAVED_STATUS_SECONDS": "saved_status_seconds",
    "WEBIDE_ERROR_STATUS_SECONDS": "error_status_seconds",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}


@dataclass(slots=True)
class Settings:
    """User-configurable settings persisted between runs."""

    storage_path: str | None = None
    storage_key: str = DEFAULT_STORAGE_KEY
    expanded_folders: list[str] = field(default_factory=lambda: ["src"])
    saved_status_seconds: float = 2.0
    error_status_seconds: float = 3.0
    debug_logging: bool = False
    console_cwd_label: str = "~"
    log_dir: str | None = None


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path).expanduser() if path is not None else _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, then apply environment and runtime overrides."""

        payload = self._read_payload()
        settings = Settings()
        if payload:
            settings = replace(settings, **self._validated_fields(payload))
        settings = self._apply_env_overrides(settings)
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="runtime")
        LOGGER.debug("Settings loaded from %s", self._path)
        return settings

    def save(self, settings: Settings) -> Path:
        data = asdict(settings)
        data["version"] = _SETTINGS_VERSION
        body = json.dumps(data, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        except OSError as exc:
            LOGGER.warning("Settings file %s could not be read: %s", self._path, exc)
            return {}
        if not isinstance(data, Mapping):
            LOGGER.warning("Settings file %s does not contain a JSON object", self._path)
            return {}
        return dict(data)

    def _validated_fields(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Return the fields of ``payload`` whose values match their declared type."""

        accepted: Dict[str, Any] = {}
        for name, value in _filter_fields(payload).items():
            try:
                accepted[name] = _FIELD_COERCERS[name](value)
            except (TypeError, ValueError) as exc:
                LOGGER.warning("Ignoring setting %r in %s: %s", name, self._path, exc)
        return accepted

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str,
    ) -> Settings:
        filtered = {key: value for key, value in _filter_fields(overrides).items() if value is not None}
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _FLOAT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = float(value)
            except ValueError:
                LOGGER.warning("Environment override %s=%s is not a valid float", env_name, value)
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {item.name for item in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}


def _as_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return _as_str(value)


def _as_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise TypeError("expected a list of strings")
    return list(value)


def _as_seconds(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise TypeError(f"expected a number, got {type(value).__name__}")
    seconds = float(value)
    if seconds < 0:
        raise ValueError("must not be negative")
    return seconds


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ValueError(f"cannot interpret {value!r} as a boolean")


_FIELD_COERCERS: Mapping[str, Callable[[Any], Any]] = {
    "storage_path": _as_optional_str,
    "storage_key": _as_str,
    "expanded_folders": _as_str_list,
    "saved_status_seconds": _as_seconds,
    "error_status_seconds": _as_seconds,
    "debug_logging": _as_bool,
    "console_cwd_label": _as_str,
    "log_dir": _as_optional_str,
}
