"""Composition root wiring the file tree, open sessions and persistence.

The UI never mutates the tree or the session list directly: it reads the
snapshots exposed here and calls :class:`Workspace` operations, each of which
returns an :class:`~webide.errors.OperationResult` instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from ..errors import (
    NoActiveSessionError,
    OperationResult,
    PathNotFoundError,
    SaveTargetMissingError,
    WorkspaceError,
)
from ..events import (
    ActiveSessionChanged,
    Event,
    EventBus,
    FileSaved,
    SaveFailed,
    SaveStatusChanged,
    SessionClosed,
    SessionModified,
    SessionOpened,
    TreeChanged,
    WorkspaceRestored,
)
from ..services.persistence import PersistenceGateway
from ..vfs.defaults import default_tree
from ..vfs.nodes import FileNode, FolderNode
from ..vfs.tree import VirtualFileTree
from .save_status import SaveStatusIndicator
from .session_model import EditorSession
from .sessions import SessionManager, normalize_path

__all__ = ["Workspace", "SaveTrigger"]

LOGGER = logging.getLogger(__name__)


class Workspace:
    """Owns the one authoritative tree and the derived session list."""

    def __init__(
        self,
        root: FolderNode | None = None,
        *,
        persistence: PersistenceGateway | None = None,
        event_bus: EventBus[Event] | None = None,
        status: SaveStatusIndicator | None = None,
    ) -> None:
        self._bus: EventBus[Event] = event_bus or EventBus()
        self._tree = VirtualFileTree(root if root is not None else default_tree(), persistence=persistence)
        self._sessions = SessionManager(self._tree.find)
        self._status = status or SaveStatusIndicator()
        self._status.add_listener(self._publish_status)
        self._previous_active: str | None = None
        self.restore_error: WorkspaceError | None = None

    @classmethod
    def create(
        cls,
        persistence: PersistenceGateway,
        *,
        default_factory: Callable[[], FolderNode] = default_tree,
        event_bus: EventBus[Event] | None = None,
        status: SaveStatusIndicator | None = None,
    ) -> "Workspace":
        """Restore the stored tree, or start from ``default_factory()``."""

        root = persistence.restore()
        source = "snapshot"
        if root is None:
            root = default_factory()
            source = "default"
        workspace = cls(root, persistence=persistence, event_bus=event_bus, status=status)
        workspace.restore_error = persistence.last_error
        LOGGER.info("Workspace initialised from %s", source)
        workspace._bus.publish(
            WorkspaceRestored(
                source=source,
                error_code=persistence.last_error.error_code if persistence.last_error else None,
            )
        )
        return workspace

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def events(self) -> EventBus[Event]:
        return self._bus

    @property
    def status(self) -> SaveStatusIndicator:
        return self._status

    @property
    def root(self) -> FolderNode:
        """Current tree root; immutable, so callers may keep it."""

        return self._tree.snapshot_root()

    @property
    def active_path(self) -> str | None:
        return self._sessions.active_path

    def active_session(self) -> EditorSession | None:
        session = self._sessions.active_session
        return replace(session) if session is not None else None

    def session(self, path: str) -> EditorSession | None:
        session = self._sessions.get(path)
        return replace(session) if session is not None else None

    def open_paths(self) -> tuple[str, ...]:
        return self._sessions.paths()

    def open_sessions(self) -> list[EditorSession]:
        return [replace(session) for session in self._sessions.iter_sessions()]

    def dirty_paths(self) -> tuple[str, ...]:
        return self._sessions.dirty_paths()

    def read(self, path: str) -> str | None:
        """Return the stored content of the file at ``path``, if any."""

        node = self._tree.read_file(path)
        return node.content if node is not None else None

    # ------------------------------------------------------------------
    # Session operations
    # ------------------------------------------------------------------
    def open(
        self,
        path: str,
        fallback_content: str | None = None,
        language: str | None = None,
    ) -> OperationResult:
        key = normalize_path(path)
        was_open = self._sessions.is_open(key)
        try:
            session = self._sessions.open(key, fallback_content, language)
        except PathNotFoundError as exc:
            LOGGER.warning("Cannot open %s: %s", key, exc)
            return OperationResult.failure(exc, key)
        if not was_open:
            self._bus.publish(SessionOpened(path=session.path, language=session.language))
        self._flush_active_change()
        return OperationResult.success(key)

    def select(self, path: str) -> OperationResult:
        """Activate an open session; unknown paths leave everything unchanged."""

        key = normalize_path(path)
        if self._sessions.select(key) is None:
            return OperationResult.failure(_no_session(key), key)
        self._flush_active_change()
        return OperationResult.success(key)

    def close(self, path: str) -> OperationResult:
        key = normalize_path(path)
        session = self._sessions.close(key)
        if session is None:
            return OperationResult.failure(_no_session(key), key)
        self._bus.publish(SessionClosed(path=key, modified=session.modified))
        self._flush_active_change()
        return OperationResult.success(key)

    def edit(self, path: str, new_content: str) -> OperationResult:
        key = normalize_path(path)
        try:
            session = self._sessions.edit(key, new_content)
        except NoActiveSessionError as exc:
            LOGGER.debug("Dropping edit for %s: %s", key, exc)
            return OperationResult.failure(exc, key)
        self._bus.publish(SessionModified(path=key, length=len(session.content)))
        return OperationResult.success(key)

    def save(self, path: str) -> OperationResult:
        """Write the session's working copy back to the tree.

        Order: find the session, read its content now, write the tree (which
        snapshots it), then clear the dirty flag. Any failure leaves the tree
        and the session exactly as they were.
        """

        key = normalize_path(path)
        session = self._sessions.get(key)
        if session is None:
            return self._save_failed(_no_session(key), key)

        content = session.content
        try:
            self._tree.write(key, content)
        except PathNotFoundError as exc:
            error = SaveTargetMissingError(
                message=f"Cannot save {key}: no file at that path",
                details={"path": key, **exc.details},
            )
            return self._save_failed(error, key)

        persisted = self._tree.last_snapshot_ok is not False
        self._sessions.mark_saved(key, content)
        LOGGER.info("Saved %s (%d chars, persisted=%s)", key, len(content), persisted)
        self._bus.publish(TreeChanged(path=key, operation="write"))
        self._bus.publish(FileSaved(path=key, length=len(content), persisted=persisted))
        return OperationResult.success(key)

    def save_trigger(self) -> "SaveTrigger":
        """Return a save callback that targets whatever is active when invoked."""

        return SaveTrigger(self)

    # ------------------------------------------------------------------
    # Tree operations
    # ------------------------------------------------------------------
    def create_file(self, path: str, content: str = "", language: str | None = None) -> OperationResult:
        key = normalize_path(path)
        try:
            self._tree.create_file(key, content, language)
        except WorkspaceError as exc:
            LOGGER.warning("Cannot create file %s: %s", key, exc)
            return OperationResult.failure(exc, key)
        self._bus.publish(TreeChanged(path=key, operation="create_file"))
        return OperationResult.success(key)

    def create_folder(self, path: str) -> OperationResult:
        key = normalize_path(path)
        try:
            self._tree.create_folder(key)
        except WorkspaceError as exc:
            LOGGER.warning("Cannot create folder %s: %s", key, exc)
            return OperationResult.failure(exc, key)
        self._bus.publish(TreeChanged(path=key, operation="create_folder"))
        return OperationResult.success(key)

    def file_node(self, path: str) -> FileNode | None:
        return self._tree.read_file(path)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _save_failed(self, error: WorkspaceError, path: str) -> OperationResult:
        LOGGER.warning("Save failed for %s: %s", path or "<root>", error)
        self._bus.publish(SaveFailed(path=path or None, error_code=error.error_code, message=error.message))
        return OperationResult.failure(error, path)

    def _flush_active_change(self) -> None:
        current = self._sessions.active_path
        if current == self._previous_active:
            return
        previous, self._previous_active = self._previous_active, current
        LOGGER.debug("Active session is now %s", current)
        self._bus.publish(ActiveSessionChanged(path=current, previous=previous))

    def _publish_status(self, status: str | None) -> None:
        self._bus.publish(SaveStatusChanged(status=status))


class SaveTrigger:
    """Zero-argument save callback registered once with a Text Surface.

    It holds the workspace, not a path or a content string: every call looks
    up the active path and that session's working copy at call time, so
    switching sessions after registration is always honoured.
    """

    __slots__ = ("_workspace",)

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def __call__(self) -> OperationResult | None:
        path = self._workspace.active_path
        if path is None:
            LOGGER.debug("Save trigger fired with no active session")
            return None
        status = self._workspace.status
        status.mark_saving()
        result = self._workspace.save(path)
        if result.ok:
            status.mark_saved()
        else:
            status.mark_error()
        return result


def _no_session(path: str) -> NoActiveSessionError:
    return NoActiveSessionError(message=f"No open session for {path or '<root>'}", details={"path": path})
