"""Core of a browser-style code editor: virtual project tree, editing sessions and persistence."""

__version__ = "0.1.0"
