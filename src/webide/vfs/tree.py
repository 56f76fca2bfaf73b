"""Stateful holder for the authoritative project tree."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from . import paths
from .nodes import FileNode, FolderNode, Node

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..services.persistence import PersistenceGateway

__all__ = ["VirtualFileTree", "walk_files"]

LOGGER = logging.getLogger(__name__)


class VirtualFileTree:
    """Owns the current root and swaps it atomically on every mutation.

    Readers always see either the previous root or the new one; the new root
    is installed before the persistence gateway snapshots it and before
    the mutating call returns.
    """

    def __init__(
        self,
        root: FolderNode | None = None,
        *,
        persistence: "PersistenceGateway | None" = None,
    ) -> None:
        self._root = root if root is not None else FolderNode()
        self._persistence = persistence
        self.last_snapshot_ok: bool | None = None

    @property
    def root(self) -> FolderNode:
        return self._root

    def snapshot_root(self) -> FolderNode:
        """Return the current root; it is immutable and safe to hand out."""

        return self._root

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def resolve(self, path: paths.PathLike) -> Node:
        return paths.resolve(self._root, path)

    def find(self, path: paths.PathLike) -> Node | None:
        return paths.find(self._root, path)

    def read(self, path: paths.PathLike) -> str:
        return paths.read_file_content(self._root, path)

    def read_file(self, path: paths.PathLike) -> FileNode | None:
        node = self.find(path)
        return node if isinstance(node, FileNode) else None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def write(self, path: paths.PathLike, content: str) -> FolderNode:
        """Replace a file's content and return the new root."""

        return self._commit(paths.write_file_content(self._root, path, content), "write", path)

    def create_file(
        self,
        path: paths.PathLike,
        content: str = "",
        language: str | None = None,
    ) -> FolderNode:
        new_root = paths.create_file(self._root, path, content, language)
        return self._commit(new_root, "create_file", path)

    def create_folder(self, path: paths.PathLike) -> FolderNode:
        return self._commit(paths.create_folder(self._root, path), "create_folder", path)

    def replace_root(self, root: FolderNode) -> None:
        """Install ``root`` wholesale without snapshotting it."""

        self._root = root

    def _commit(self, new_root: FolderNode, operation: str, path: paths.PathLike) -> FolderNode:
        self._root = new_root
        LOGGER.debug("Tree %s committed for %s", operation, paths.join_path(paths.split_path(path)))
        if self._persistence is not None:
            self.last_snapshot_ok = self._persistence.snapshot(new_root)
        return new_root


def walk_files(root: FolderNode, prefix: str = "") -> list[tuple[str, FileNode]]:
    """Return ``(path, file)`` pairs for every file below ``root``."""

    found: list[tuple[str, FileNode]] = []
    for name, child in root.children.items():
        child_path = f"{prefix}/{name}" if prefix else name
        if isinstance(child, FolderNode):
            found.extend(walk_files(child, child_path))
        else:
            found.append((child_path, child))
    return found
