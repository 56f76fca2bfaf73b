"""Pure path resolution and copy-on-write update helpers.

Every helper takes a root :class:`FolderNode` and never mutates it. Updates
rebuild only the chain of folders from the root to the changed node, so
siblings keep their identity and older roots stay valid for any reader still
holding them.
"""

from __future__ import annotations

from typing import Callable, Sequence

from ..errors import NodeExistsError, PathNotFoundError
from .languages import language_for_path
from .nodes import PATH_SEPARATOR, FileNode, FolderNode, Node, validate_name

__all__ = [
    "split_path",
    "join_path",
    "resolve",
    "find",
    "read_file_content",
    "write_file_content",
    "create_file",
    "create_folder",
]

PathLike = str | Sequence[str]


def split_path(path: PathLike) -> tuple[str, ...]:
    """Return the non-empty segments of ``path``.

    Leading, trailing and doubled separators are ignored, so ``""`` and
    ``"/"`` both address the root.
    """

    if isinstance(path, str):
        parts = path.split(PATH_SEPARATOR)
    else:
        parts = list(path)
    return tuple(part for part in parts if part)


def join_path(segments: Sequence[str]) -> str:
    return PATH_SEPARATOR.join(segments)


def resolve(root: FolderNode, path: PathLike) -> Node:
    """Descend one segment at a time and return the addressed node.

    Raises:
        PathNotFoundError: a segment is missing, or an intermediate segment
            names a file.
    """

    segments = split_path(path)
    current: Node = root
    for index, segment in enumerate(segments):
        if not isinstance(current, FolderNode):
            raise PathNotFoundError(
                path=join_path(segments),
                details={"reason": "not_a_folder", "segment": segments[index - 1]},
            )
        child = current.get(segment)
        if child is None:
            raise PathNotFoundError(
                path=join_path(segments),
                details={"reason": "missing_segment", "segment": segment},
            )
        current = child
    return current


def find(root: FolderNode, path: PathLike) -> Node | None:
    """Like :func:`resolve` but returns ``None`` instead of raising."""

    try:
        return resolve(root, path)
    except PathNotFoundError:
        return None


def read_file_content(root: FolderNode, path: PathLike) -> str:
    """Return the content of the file at ``path``; folders are not readable."""

    node = resolve(root, path)
    if not isinstance(node, FileNode):
        raise PathNotFoundError(path=join_path(split_path(path)), details={"reason": "is_folder"})
    return node.content


def write_file_content(root: FolderNode, path: PathLike, content: str) -> FolderNode:
    """Return a new root in which the file at ``path`` holds ``content``."""

    segments = split_path(path)
    if not segments:
        raise PathNotFoundError(path="", details={"reason": "is_folder"})
    name = segments[-1]

    def replace(parent: FolderNode) -> FolderNode:
        child = parent.get(name)
        if child is None:
            raise PathNotFoundError(
                path=join_path(segments),
                details={"reason": "missing_segment", "segment": name},
            )
        if not isinstance(child, FileNode):
            raise PathNotFoundError(path=join_path(segments), details={"reason": "is_folder"})
        return parent.with_child(name, child.with_content(content))

    return _update_folder(root, segments, len(segments) - 1, replace)


def create_file(
    root: FolderNode,
    path: PathLike,
    content: str = "",
    language: str | None = None,
) -> FolderNode:
    """Return a new root with a file added at ``path``.

    The parent folder must already exist. ``language`` defaults to the tag
    inferred from the file name.
    """

    segments = split_path(path)
    if not segments:
        raise NodeExistsError(message="The root folder already exists", details={"path": ""})
    name = validate_name(segments[-1])
    node = FileNode(content=content, language=language or language_for_path(name))
    return _insert(root, segments, node)


def create_folder(root: FolderNode, path: PathLike) -> FolderNode:
    """Return a new root with an empty folder added at ``path``."""

    segments = split_path(path)
    if not segments:
        raise NodeExistsError(message="The root folder already exists", details={"path": ""})
    validate_name(segments[-1])
    return _insert(root, segments, FolderNode())


def _insert(root: FolderNode, segments: tuple[str, ...], node: Node) -> FolderNode:
    name = segments[-1]

    def add(parent: FolderNode) -> FolderNode:
        if name in parent:
            raise NodeExistsError(
                message=f"{join_path(segments)} already exists",
                details={"path": join_path(segments)},
            )
        return parent.with_child(name, node)

    return _update_folder(root, segments, len(segments) - 1, add)


def _update_folder(
    folder: FolderNode,
    segments: tuple[str, ...],
    depth: int,
    transform: Callable[[FolderNode], FolderNode],
    index: int = 0,
) -> FolderNode:
    """Apply ``transform`` to the folder named by ``segments[:depth]``.

    Every folder on the way down is rebuilt around the transformed child.
    """

    if index == depth:
        return transform(folder)
    name = segments[index]
    child = folder.get(name)
    if child is None:
        raise PathNotFoundError(
            path=join_path(segments),
            details={"reason": "missing_segment", "segment": name},
        )
    if not isinstance(child, FolderNode):
        raise PathNotFoundError(
            path=join_path(segments),
            details={"reason": "not_a_folder", "segment": name},
        )
    return folder.with_child(name, _update_folder(child, segments, depth, transform, index + 1))
