"""Language tag inference from file names."""

from __future__ import annotations

from typing import Mapping

__all__ = ["DEFAULT_LANGUAGE", "EXTENSION_LANGUAGES", "language_for_path"]

DEFAULT_LANGUAGE = "plaintext"

EXTENSION_LANGUAGES: Mapping[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "css": "css",
    "html": "html",
    "json": "json",
    "md": "markdown",
    "py": "python",
}


def language_for_path(path: str) -> str:
    """Return the language tag for ``path`` based on its final extension."""

    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return DEFAULT_LANGUAGE
    extension = name.rsplit(".", 1)[-1].lower()
    return EXTENSION_LANGUAGES.get(extension, DEFAULT_LANGUAGE)
