"""PySide6 implementation of the Text Surface plus a small editor window."""

from __future__ import annotations

import logging
from typing import Any, Callable

from PySide6.QtCore import QTimer
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import QLabel, QPlainTextEdit, QVBoxLayout, QWidget

from ..editor.controller import EditorController
from ..editor.save_status import SaveStatusIndicator
from ..editor.workspace import Workspace

__all__ = ["QtTextSurface", "SaveStatusLabel", "EditorWindow"]

LOGGER = logging.getLogger(__name__)

_STATUS_TEXT = {"saving": "Saving...", "saved": "Saved", "error": "Save failed"}


class QtTextSurface(QPlainTextEdit):
    """``QPlainTextEdit`` that reports edits and fires the save trigger on Ctrl+S."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.language: str | None = None
        self._content_listener: Callable[[str], None] | None = None
        self._save_trigger: Callable[[], Any] | None = None
        self._loading = False
        self.save_shortcut = QShortcut(QKeySequence(QKeySequence.StandardKey.Save), self)
        self.save_shortcut.activated.connect(self._fire_save)
        self.textChanged.connect(self._emit_change)

    def load(self, content: str, language: str) -> None:
        self._loading = True
        try:
            self.setPlainText(content)
        finally:
            self._loading = False
        self.language = language

    def clear(self) -> None:
        self._loading = True
        try:
            super().clear()
        finally:
            self._loading = False
        self.language = None

    def set_content_listener(self, listener: Callable[[str], None]) -> None:
        self._content_listener = listener

    def set_save_trigger(self, trigger: Callable[[], Any]) -> None:
        self._save_trigger = trigger

    def _emit_change(self) -> None:
        if self._loading or self._content_listener is None:
            return
        self._content_listener(self.toPlainText())

    def _fire_save(self) -> None:
        if self._save_trigger is None:
            LOGGER.debug("Save shortcut pressed before a trigger was registered")
            return
        self._save_trigger()


class SaveStatusLabel(QLabel):
    """Label mirroring a :class:`SaveStatusIndicator`, polled so expiry shows up."""

    def __init__(self, indicator: SaveStatusIndicator, parent: QWidget | None = None, *, poll_ms: int = 250) -> None:
        super().__init__(parent)
        self._indicator = indicator
        self._timer = QTimer(self)
        self._timer.setInterval(poll_ms)
        self._timer.timeout.connect(self.refresh)
        self._timer.start()
        self.refresh()

    def refresh(self) -> None:
        status = self._indicator.current()
        self.setText(_STATUS_TEXT.get(status or "", ""))


class EditorWindow(QWidget):
    """Text surface and save status for the workspace's active session."""

    def __init__(self, workspace: Workspace, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.surface = QtTextSurface(self)
        self.status_label = SaveStatusLabel(workspace.status, self)
        layout = QVBoxLayout(self)
        layout.addWidget(self.surface)
        layout.addWidget(self.status_label)
        self.controller = EditorController(workspace, self.surface)
        self.controller.attach()
        active = workspace.active_path
        self.setWindowTitle(f"webide - {active}" if active else "webide")
