"""Error taxonomy shared by the virtual file system and editor workspace.

Errors carry a machine-readable ``error_code`` alongside the human message so
that callers at the UI boundary can branch on the failure kind without string
matching. Components raise these internally; :class:`~webide.editor.workspace.Workspace`
converts them into :class:`OperationResult` values before they reach the UI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class ErrorCode:
    """Constants for error codes reported by workspace operations."""

    NOT_FOUND = "not_found"
    INVALID_PATH = "invalid_path"
    ALREADY_EXISTS = "already_exists"
    SAVE_TARGET_MISSING = "save_target_missing"
    NO_ACTIVE_SESSION = "no_active_session"
    PERSISTENCE_CORRUPT = "persistence_corrupt"


@dataclass
class WorkspaceError(Exception):
    """Base exception for every recoverable workspace failure.

    Attributes:
        error_code: Machine-readable error identifier.
        message: Human-readable error description.
        details: Additional structured error information.
    """

    error_code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            result["details"] = dict(self.details)
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


@dataclass
class PathNotFoundError(WorkspaceError):
    """A path segment is missing, or a file/folder sits where the other was required."""

    error_code: str = field(default=ErrorCode.NOT_FOUND)
    message: str = field(default="Path not found")
    details: dict[str, Any] = field(default_factory=dict)

    path: str = field(default="")

    def __post_init__(self) -> None:
        if self.path:
            self.details.setdefault("path", self.path)
            if self.message == "Path not found":
                self.message = f"Path not found: {self.path}"
        super().__post_init__()


@dataclass
class InvalidPathError(WorkspaceError):
    """A node name is empty, contains a separator, or uses the reserved key."""

    error_code: str = field(default=ErrorCode.INVALID_PATH)
    message: str = field(default="Invalid path")
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class NodeExistsError(WorkspaceError):
    """A create operation targeted a name that is already taken."""

    error_code: str = field(default=ErrorCode.ALREADY_EXISTS)
    message: str = field(default="Node already exists")
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class SaveTargetMissingError(WorkspaceError):
    """A save addressed a path that is absent from the tree or is a folder."""

    error_code: str = field(default=ErrorCode.SAVE_TARGET_MISSING)
    message: str = field(default="Save target missing from the file tree")
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class NoActiveSessionError(WorkspaceError):
    """A save or edit referenced a path with no open session."""

    error_code: str = field(default=ErrorCode.NO_ACTIVE_SESSION)
    message: str = field(default="No open session for path")
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class PersistenceCorruptError(WorkspaceError):
    """The stored snapshot could not be parsed back into a tree."""

    error_code: str = field(default=ErrorCode.PERSISTENCE_CORRUPT)
    message: str = field(default="Stored snapshot is corrupt")
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class OperationResult:
    """Explicit success/failure value returned by workspace operations."""

    ok: bool
    path: str | None = None
    error: WorkspaceError | None = None

    @classmethod
    def success(cls, path: str | None = None) -> "OperationResult":
        return cls(ok=True, path=path)

    @classmethod
    def failure(cls, error: WorkspaceError, path: str | None = None) -> "OperationResult":
        return cls(ok=False, path=path, error=error)

    @property
    def error_code(self) -> str | None:
        return self.error.error_code if self.error is not None else None

    def __bool__(self) -> bool:
        return self.ok


__all__ = [
    "ErrorCode",
    "WorkspaceError",
    "PathNotFoundError",
    "InvalidPathError",
    "NodeExistsError",
    "SaveTargetMissingError",
    "NoActiveSessionError",
    "PersistenceCorruptError",
    "OperationResult",
]
