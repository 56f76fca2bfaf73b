"""Binding between a Text Surface and the workspace.

A Text Surface is the opaque editing widget: it shows ``(content, language)``,
reports every edit through a content-change callback and fires a
zero-argument save trigger on the save keybinding.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from ..events import ActiveSessionChanged
from .workspace import Workspace

__all__ = ["TextSurface", "BufferTextSurface", "EditorController"]

LOGGER = logging.getLogger(__name__)

ContentListener = Callable[[str], None]
SaveCallback = Callable[[], Any]


class TextSurface(Protocol):
    """Contract every editing widget implements."""

    def load(self, content: str, language: str) -> None:
        """Replace the displayed text without reporting it as an edit."""
        ...

    def clear(self) -> None:
        ...

    def set_content_listener(self, listener: ContentListener) -> None:
        ...

    def set_save_trigger(self, trigger: SaveCallback) -> None:
        ...


class BufferTextSurface:
    """Headless Text Surface backed by a plain string.

    ``type_text`` plays the role of a keystroke and ``press_save`` the role of
    the save keybinding.
    """

    def __init__(self) -> None:
        self.text = ""
        self.language: str | None = None
        self._content_listener: ContentListener | None = None
        self._save_trigger: SaveCallback | None = None
        self.trigger_registrations = 0

    def load(self, content: str, language: str) -> None:
        self.text = content
        self.language = language

    def clear(self) -> None:
        self.text = ""
        self.language = None

    def set_content_listener(self, listener: ContentListener) -> None:
        self._content_listener = listener

    def set_save_trigger(self, trigger: SaveCallback) -> None:
        self._save_trigger = trigger
        self.trigger_registrations += 1

    def type_text(self, new_text: str) -> None:
        self.text = new_text
        if self._content_listener is not None:
            self._content_listener(new_text)

    def press_save(self) -> Any:
        if self._save_trigger is None:
            return None
        return self._save_trigger()


class EditorController:
    """Keeps one Text Surface in step with the workspace's active session.

    The save trigger is registered exactly once, on :meth:`attach`. It is a
    :class:`~webide.editor.workspace.SaveTrigger`, so it resolves the active
    path and working copy when fired rather than when registered.
    """

    def __init__(self, workspace: Workspace, surface: TextSurface) -> None:
        self._workspace = workspace
        self._surface = surface
        self._attached = False

    @property
    def surface(self) -> TextSurface:
        return self._surface

    def attach(self) -> None:
        if self._attached:
            return
        self._surface.set_content_listener(self._on_content_change)
        self._surface.set_save_trigger(self._workspace.save_trigger())
        self._workspace.events.subscribe(ActiveSessionChanged, self._on_active_changed)
        self._attached = True
        self._show_active()

    def detach(self) -> None:
        if not self._attached:
            return
        self._workspace.events.unsubscribe(ActiveSessionChanged, self._on_active_changed)
        self._attached = False

    def _on_active_changed(self, _event: ActiveSessionChanged) -> None:
        self._show_active()

    def _show_active(self) -> None:
        session = self._workspace.active_session()
        if session is None:
            self._surface.clear()
            return
        self._surface.load(session.content, session.language)

    def _on_content_change(self, content: str) -> None:
        path = self._workspace.active_path
        if path is None:
            LOGGER.debug("Ignoring surface edit with no active session")
            return
        self._workspace.edit(path, content)
