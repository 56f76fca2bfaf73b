"""Dataclass describing one open editing session."""

from __future__ import annotations

from dataclasses import dataclass

from ..vfs.languages import DEFAULT_LANGUAGE


@dataclass(slots=True)
class EditorSession:
    """Working copy of one file, independent of the tree until saved."""

    path: str
    content: str = ""
    language: str = DEFAULT_LANGUAGE
    modified: bool = False

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def title(self) -> str:
        """Tab label: the file name with a ``●`` marker while dirty."""

        return f"{self.name} ●" if self.modified else self.name

    def update_content(self, new_content: str) -> None:
        """Replace the working copy; any edit marks the session dirty."""

        self.content = new_content
        self.modified = True

    def mark_saved(self, saved_content: str) -> None:
        self.content = saved_content
        self.modified = False

    def snapshot(self) -> dict[str, object]:
        return {
            "path": self.path,
            "content": self.content,
            "language": self.language,
            "modified": self.modified,
        }
