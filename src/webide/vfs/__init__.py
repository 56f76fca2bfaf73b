"""In-memory virtual file system: nodes, path helpers and the tree holder."""

from .nodes import FileNode, FolderNode, Node
from .tree import VirtualFileTree

__all__ = ["FileNode", "FolderNode", "Node", "VirtualFileTree"]
