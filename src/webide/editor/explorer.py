"""Sidebar model: which folders are expanded and which rows are visible."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from ..errors import OperationResult, PathNotFoundError
from ..vfs.nodes import FolderNode
from ..vfs.paths import find
from .workspace import Workspace

__all__ = ["ExplorerRow", "FileExplorer"]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExplorerRow:
    """One visible line of the explorer."""

    path: str
    name: str
    depth: int
    is_folder: bool
    expanded: bool = False
    language: str | None = None


class FileExplorer:
    """Renders a tree snapshot into rows and routes file clicks to the workspace.

    Only the expanded-folder set is owned here; the tree is always the
    snapshot passed in by the caller.
    """

    def __init__(self, expanded: Iterable[str] = ("src",)) -> None:
        self._expanded: set[str] = set(expanded)

    @property
    def expanded(self) -> frozenset[str]:
        return frozenset(self._expanded)

    def is_expanded(self, path: str) -> bool:
        return path in self._expanded

    def toggle(self, path: str) -> bool:
        """Flip a folder's expanded state and return the new state."""

        if path in self._expanded:
            self._expanded.discard(path)
            return False
        self._expanded.add(path)
        return True

    def rows(self, root: FolderNode) -> list[ExplorerRow]:
        rows: list[ExplorerRow] = []
        self._collect(root, "", 0, rows)
        return rows

    def _collect(self, folder: FolderNode, base: str, depth: int, rows: list[ExplorerRow]) -> None:
        for name, child in folder.children.items():
            path = f"{base}/{name}" if base else name
            if isinstance(child, FolderNode):
                expanded = path in self._expanded
                rows.append(ExplorerRow(path=path, name=name, depth=depth, is_folder=True, expanded=expanded))
                if expanded:
                    self._collect(child, path, depth + 1, rows)
            else:
                rows.append(
                    ExplorerRow(path=path, name=name, depth=depth, is_folder=False, language=child.language)
                )

    def activate(self, workspace: Workspace, path: str) -> OperationResult:
        """Handle a click: folders toggle, files open in the workspace."""

        node = find(workspace.root, path)
        if node is None:
            return OperationResult.failure(PathNotFoundError(path=path), path)
        if isinstance(node, FolderNode):
            self.toggle(path)
            return OperationResult.success(path)
        LOGGER.debug("Explorer opening %s", path)
        return workspace.open(path, node.content, node.language)
