"""String-keyed blob stores backing workspace snapshots."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Protocol, runtime_checkable

__all__ = ["BlobStore", "InMemoryBlobStore", "FileBlobStore"]

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class BlobStore(Protocol):
    """Minimal key/value contract: whole string values, no partial updates."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryBlobStore:
    """Process-local store, used by tests and when no storage path is configured."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> tuple[str, ...]:
        return tuple(self._values)


class FileBlobStore:
    """Stores every key in one JSON object on disk.

    Writes go through a temporary sibling file that replaces the target, so a
    crash mid-write leaves the previous contents in place.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        value = self._read_payload().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        payload = self._read_payload()
        payload[key] = value
        self._write_payload(payload)

    def delete(self, key: str) -> None:
        payload = self._read_payload()
        if payload.pop(key, None) is not None:
            self._write_payload(payload)

    def _read_payload(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            LOGGER.warning("Blob store %s is not valid JSON: %s", self._path, exc)
            return {}
        except OSError as exc:
            LOGGER.warning("Blob store %s could not be read: %s", self._path, exc)
            return {}
        if isinstance(data, Mapping):
            return dict(data)
        LOGGER.warning("Blob store %s does not contain a JSON object", self._path)
        return {}

    def _write_payload(self, payload: Mapping[str, Any]) -> None:
        body = json.dumps(dict(payload), indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        try:
            tmp_path.write_text(body, encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
