"""Immutable node types making up the virtual project tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Union

from ..errors import InvalidPathError

__all__ = [
    "FileNode",
    "FolderNode",
    "Node",
    "PATH_SEPARATOR",
    "TYPE_KEY",
    "validate_name",
]

PATH_SEPARATOR = "/"
# Discriminator key used by the persisted format; never a legal child name.
TYPE_KEY = "type"


def validate_name(name: str) -> str:
    """Return ``name`` unchanged or raise :class:`InvalidPathError`."""

    if not isinstance(name, str) or not name:
        raise InvalidPathError(message="Node names must be non-empty strings", details={"name": name})
    if PATH_SEPARATOR in name:
        raise InvalidPathError(
            message=f"Node name {name!r} must not contain {PATH_SEPARATOR!r}",
            details={"name": name},
        )
    if name == TYPE_KEY:
        raise InvalidPathError(
            message=f"Node name {name!r} is reserved",
            details={"name": name},
        )
    return name


@dataclass(frozen=True, slots=True)
class FileNode:
    """Leaf node holding text content and the language tag chosen at creation."""

    content: str = ""
    language: str = "plaintext"

    @property
    def is_file(self) -> bool:
        return True

    def with_content(self, content: str) -> "FileNode":
        return FileNode(content=content, language=self.language)


@dataclass(frozen=True, slots=True)
class FolderNode:
    """Container node mapping child names to nodes.

    The mapping is exposed read-only; every change produces a new folder so
    outstanding references to an older tree never observe the mutation.
    """

    children: Mapping[str, "Node"] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen: dict[str, Node] = {}
        for name, child in dict(self.children).items():
            frozen[validate_name(name)] = child
        object.__setattr__(self, "children", MappingProxyType(frozen))

    @property
    def is_file(self) -> bool:
        return False

    def __len__(self) -> int:
        return len(self.children)

    def __contains__(self, name: object) -> bool:
        return name in self.children

    def __iter__(self) -> Iterator[str]:
        return iter(self.children)

    def get(self, name: str) -> "Node | None":
        return self.children.get(name)

    def with_child(self, name: str, child: "Node") -> "FolderNode":
        """Return a shallow copy with ``name`` bound to ``child``."""

        updated = dict(self.children)
        updated[validate_name(name)] = child
        return FolderNode(updated)


Node = Union[FileNode, FolderNode]
