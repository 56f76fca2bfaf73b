"""Headless tests for the PySide6 text surface."""

from __future__ import annotations

import pytest

pytest.importorskip("PySide6.QtWidgets")

from webide.editor.workspace import Workspace
from webide.ui.qt_surface import EditorWindow, QtTextSurface
from webide.vfs.nodes import FileNode, FolderNode

pytestmark = pytest.mark.usefixtures("qtbot")


def _workspace() -> Workspace:
    return Workspace(FolderNode({"a.py": FileNode("a = 1", "python"), "b.md": FileNode("# b", "markdown")}))


def test_load_does_not_report_an_edit(qtbot) -> None:
    surface = QtTextSurface()
    qtbot.addWidget(surface)
    edits: list[str] = []
    surface.set_content_listener(edits.append)

    surface.load("x = 2", "python")
    surface.setPlainText("x = 3")

    assert edits == ["x = 3"]
    assert surface.language == "python"


def test_save_shortcut_fires_registered_trigger(qtbot) -> None:
    surface = QtTextSurface()
    qtbot.addWidget(surface)
    fired: list[bool] = []

    surface.save_shortcut.activated.emit()
    surface.set_save_trigger(lambda: fired.append(True))
    surface.save_shortcut.activated.emit()

    assert fired == [True]


def test_editor_window_edits_and_saves_active_session(qtbot) -> None:
    workspace = _workspace()
    workspace.open("a.py")
    window = EditorWindow(workspace)
    qtbot.addWidget(window)

    assert window.surface.toPlainText() == "a = 1"
    workspace.open("b.md")
    assert window.surface.toPlainText() == "# b"

    window.surface.setPlainText("# b, edited")
    assert workspace.dirty_paths() == ("b.md",)

    window.surface.save_shortcut.activated.emit()
    window.status_label.refresh()

    assert workspace.read("b.md") == "# b, edited"
    assert workspace.read("a.py") == "a = 1"
    assert window.status_label.text() == "Saved"


def test_editor_window_clears_when_last_session_closes(qtbot) -> None:
    workspace = _workspace()
    workspace.open("a.py")
    window = EditorWindow(workspace)
    qtbot.addWidget(window)

    workspace.close("a.py")

    assert window.surface.toPlainText() == ""
    assert window.surface.language is None
