"""Canned-command terminal simulation."""

from .commands import PROMPT, CommandConsole

__all__ = ["CommandConsole", "PROMPT"]
