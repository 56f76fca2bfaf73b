"""Snapshot/restore of the project tree to a string-keyed blob store.

Wire format: one JSON object per folder mapping child names to nodes. Files
are ``{"content": ..., "type": "file", "language": ...}``; nested folders add
``"type": "folder"`` next to their children; the root carries no
discriminator. Stored values are validated with ``jsonschema`` before they
are turned back into nodes.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import jsonschema
from jsonschema.exceptions import best_match

from ..errors import InvalidPathError, PersistenceCorruptError
from ..vfs.languages import language_for_path
from ..vfs.nodes import TYPE_KEY, FileNode, FolderNode, Node
from .blob_store import BlobStore

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "SNAPSHOT_SCHEMA",
    "PersistenceGateway",
    "tree_to_payload",
    "tree_from_payload",
]

LOGGER = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "web-ide-filesystem"
_FILE_TYPE = "file"
_FOLDER_TYPE = "folder"

_NAME_SCHEMA: dict[str, Any] = {"type": "string", "minLength": 1, "pattern": "^[^/]+$"}

SNAPSHOT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$defs": {
        "file": {
            "type": "object",
            "properties": {
                TYPE_KEY: {"const": _FILE_TYPE},
                "content": {"type": "string"},
                "language": {"type": "string"},
            },
            "required": [TYPE_KEY, "content"],
        },
        "folder": {
            "type": "object",
            "properties": {TYPE_KEY: {"const": _FOLDER_TYPE}},
            "required": [TYPE_KEY],
            "propertyNames": _NAME_SCHEMA,
            "additionalProperties": {"$ref": "#/$defs/node"},
        },
        "node": {"oneOf": [{"$ref": "#/$defs/file"}, {"$ref": "#/$defs/folder"}]},
    },
    "type": "object",
    "not": {"required": [TYPE_KEY]},
    "propertyNames": _NAME_SCHEMA,
    "additionalProperties": {"$ref": "#/$defs/node"},
}

_VALIDATOR = jsonschema.Draft202012Validator(SNAPSHOT_SCHEMA)


def tree_to_payload(root: FolderNode) -> dict[str, Any]:
    """Convert ``root`` into the JSON-ready mapping stored in the blob store."""

    return _folder_children_payload(root)


def _folder_children_payload(folder: FolderNode) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for name, child in folder.children.items():
        if isinstance(child, FolderNode):
            entry = _folder_children_payload(child)
            entry[TYPE_KEY] = _FOLDER_TYPE
            payload[name] = entry
        else:
            payload[name] = {"content": child.content, TYPE_KEY: _FILE_TYPE, "language": child.language}
    return payload


def tree_from_payload(payload: Any) -> FolderNode:
    """Validate ``payload`` and rebuild the tree it describes.

    Raises:
        PersistenceCorruptError: the payload does not describe a valid tree.
    """

    error = best_match(_VALIDATOR.iter_errors(payload))
    if error is not None:
        location = "/".join(str(part) for part in error.absolute_path)
        raise PersistenceCorruptError(
            message=f"Snapshot failed validation: {error.message}",
            details={"location": location},
        )
    try:
        return _folder_from_payload(payload)
    except InvalidPathError as exc:
        raise PersistenceCorruptError(
            message=f"Snapshot contains an invalid name: {exc.message}",
            details=dict(exc.details),
        ) from exc


def _folder_from_payload(payload: Mapping[str, Any]) -> FolderNode:
    children: dict[str, Node] = {}
    for name, entry in payload.items():
        if name == TYPE_KEY:
            continue
        if entry.get(TYPE_KEY) == _FOLDER_TYPE:
            children[name] = _folder_from_payload(entry)
        else:
            language = entry.get("language") or language_for_path(name)
            children[name] = FileNode(content=entry["content"], language=language)
    return FolderNode(children)


class PersistenceGateway:
    """Durable snapshot/restore of the whole tree under a single key."""

    def __init__(self, store: BlobStore, *, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._store = store
        self._key = key
        self.last_error: PersistenceCorruptError | None = None

    @property
    def key(self) -> str:
        return self._key

    @property
    def store(self) -> BlobStore:
        return self._store

    def snapshot(self, root: FolderNode) -> bool:
        """Overwrite the stored snapshot with ``root``.

        Write failures are logged and reported as ``False``; nothing awaits
        completion, so callers treat persistence as fire-and-forget.
        """

        body = json.dumps(tree_to_payload(root))
        try:
            self._store.set(self._key, body)
        except (OSError, ValueError) as exc:
            LOGGER.error("Failed to persist snapshot under %r: %s", self._key, exc)
            return False
        LOGGER.debug("Persisted snapshot under %r (%d bytes)", self._key, len(body))
        return True

    def load_snapshot(self) -> FolderNode | None:
        """Return the stored tree, ``None`` when absent.

        Raises:
            PersistenceCorruptError: the stored value cannot be read or parsed.
        """

        try:
            raw = self._store.get(self._key)
        except (OSError, ValueError) as exc:
            raise PersistenceCorruptError(
                message=f"Snapshot could not be read: {exc}",
                details={"key": self._key},
            ) from exc
        if raw is None:
            return None
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceCorruptError(
                message=f"Snapshot is not valid JSON: {exc.msg}",
                details={"line": exc.lineno, "column": exc.colno},
            ) from exc
        return tree_from_payload(payload)

    def restore(self) -> FolderNode | None:
        """Return the stored tree, or ``None`` when absent or unparsable."""

        self.last_error = None
        try:
            root = self.load_snapshot()
        except PersistenceCorruptError as exc:
            LOGGER.warning("Ignoring corrupt snapshot under %r: %s", self._key, exc)
            self.last_error = exc
            return None
        if root is not None:
            LOGGER.info("Restored snapshot under %r", self._key)
        return root

    def clear(self) -> None:
        self._store.delete(self._key)
