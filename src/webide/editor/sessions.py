"""Ordered set of open editing sessions and the active selection."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Optional, Protocol

from ..errors import NoActiveSessionError, PathNotFoundError
from ..vfs.languages import language_for_path
from ..vfs.nodes import FileNode, FolderNode, Node
from ..vfs.paths import join_path, split_path
from .session_model import EditorSession

__all__ = ["SessionManager", "ActiveSessionListener", "NodeLookup", "normalize_path"]

LOGGER = logging.getLogger(__name__)

NodeLookup = Callable[[str], Optional[Node]]


class ActiveSessionListener(Protocol):
    """Callback signature fired whenever the active session changes."""

    def __call__(self, session: Optional[EditorSession]) -> None:  # pragma: no cover - protocol
        ...


def normalize_path(path: str) -> str:
    """Canonical session key: segments joined by ``/`` without stray separators."""

    return join_path(split_path(path))


class SessionManager:
    """Manages open sessions (unique by path) and which one is active.

    Sessions keep their insertion order. ``lookup`` returns the authoritative
    tree node for a path, or ``None`` when nothing exists there.
    """

    def __init__(self, lookup: NodeLookup) -> None:
        self._lookup = lookup
        self._sessions: Dict[str, EditorSession] = {}
        self._order: List[str] = []
        self._active_path: str | None = None
        self._listeners: List[ActiveSessionListener] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(
        self,
        path: str,
        fallback_content: str | None = None,
        language: str | None = None,
    ) -> EditorSession:
        """Activate the session for ``path``, creating it on first open.

        An existing session is activated untouched so unsaved edits survive a
        second open with stale ``fallback_content``. A new session takes its
        content from the tree; ``fallback_content`` is only used when the tree
        has nothing at ``path``.

        Raises:
            PathNotFoundError: ``path`` names a folder (or the root), or the
                tree has no file there and no fallback content was supplied.
        """

        key = normalize_path(path)
        existing = self._sessions.get(key)
        if existing is not None:
            LOGGER.debug("Session %s already open; activating", key)
            self._set_active(key)
            return existing

        node = self._lookup(key)
        if isinstance(node, FolderNode):
            raise PathNotFoundError(path=key, details={"reason": "is_folder"})
        if isinstance(node, FileNode):
            session = EditorSession(path=key, content=node.content, language=node.language)
        elif fallback_content is not None:
            session = EditorSession(
                path=key,
                content=fallback_content,
                language=language or language_for_path(key),
            )
        else:
            raise PathNotFoundError(path=key, details={"reason": "no_file_and_no_fallback"})

        self._sessions[key] = session
        self._order.append(key)
        LOGGER.debug("Opened session %s (%d chars)", key, len(session.content))
        self._set_active(key)
        return session

    def select(self, path: str) -> EditorSession | None:
        """Activate an already-open session; unknown paths are ignored."""

        key = normalize_path(path)
        session = self._sessions.get(key)
        if session is None:
            LOGGER.debug("Ignoring select for unopened path %s", key)
            return None
        self._set_active(key)
        return session

    def close(self, path: str) -> EditorSession | None:
        """Remove and return the session for ``path``.

        Closing the active session activates the last remaining session in
        order, or leaves no session active.
        """

        key = normalize_path(path)
        session = self._sessions.pop(key, None)
        if session is None:
            return None
        self._order.remove(key)
        LOGGER.debug("Closed session %s (modified=%s)", key, session.modified)
        if self._active_path == key:
            self._set_active(self._order[-1] if self._order else None)
        return session

    def edit(self, path: str, new_content: str) -> EditorSession:
        """Replace the working copy; always marks the session dirty."""

        session = self.require(path)
        session.update_content(new_content)
        return session

    def mark_saved(self, path: str, saved_content: str) -> EditorSession:
        session = self.require(path)
        session.mark_saved(saved_content)
        return session

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def active_path(self) -> str | None:
        return self._active_path

    @property
    def active_session(self) -> EditorSession | None:
        if self._active_path is None:
            return None
        return self._sessions.get(self._active_path)

    def get(self, path: str) -> EditorSession | None:
        return self._sessions.get(normalize_path(path))

    def require(self, path: str) -> EditorSession:
        key = normalize_path(path)
        session = self._sessions.get(key)
        if session is None:
            raise NoActiveSessionError(
                message=f"No open session for {key or '<root>'}",
                details={"path": key},
            )
        return session

    def is_open(self, path: str) -> bool:
        return normalize_path(path) in self._sessions

    def iter_sessions(self) -> Iterator[EditorSession]:
        for key in self._order:
            yield self._sessions[key]

    def paths(self) -> tuple[str, ...]:
        return tuple(self._order)

    def count(self) -> int:
        return len(self._order)

    def dirty_paths(self) -> tuple[str, ...]:
        return tuple(key for key in self._order if self._sessions[key].modified)

    def snapshot(self) -> list[dict[str, object]]:
        """Return plain copies of every session, in order."""

        return [session.snapshot() for session in self.iter_sessions()]

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_active_listener(self, listener: ActiveSessionListener) -> None:
        self._listeners.append(listener)

    def remove_active_listener(self, listener: ActiveSessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set_active(self, key: str | None) -> None:
        if self._active_path == key:
            return
        self._active_path = key
        session = self.active_session
        for listener in list(self._listeners):
            listener(session)
