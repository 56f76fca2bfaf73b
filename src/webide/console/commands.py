"""Simulated shell answering a fixed table of canned commands.

The console is deliberately not connected to the project tree: ``ls`` and
``cat`` answer from static tables regardless of what the explorer shows.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, List, Sequence

__all__ = ["CommandConsole", "PROMPT"]

LOGGER = logging.getLogger(__name__)

PROMPT = "$ "
_ENTER = "\r"
_BACKSPACE = "\x7f"
_NEWLINE = "\r\n"

CommandHandler = Callable[[Sequence[str]], List[str]]

_HELP_LINES = [
    "Available commands:",
    "  help       - Show this help message",
    "  clear      - Clear the terminal",
    "  ls         - List files in current directory",
    "  pwd        - Show current directory",
    "  cd <dir>   - Change directory",
    "  cat <file> - Display file contents",
    "  echo <msg> - Display message",
    "  date       - Show current date and time",
    "  whoami     - Show current user",
    "  node -v    - Show Node.js version",
    "  npm -v     - Show npm version",
]

_LISTING = ["src/", "public/", "package.json", "README.md", "vite.config.js", "eslint.config.js"]
_KNOWN_DIRECTORIES = ("src", "public", "components")
_WORKING_DIRECTORY = "/home/user/web-ide"

_MOCK_FILES: Dict[str, List[str]] = {
    "package.json": [
        "{",
        '  "name": "web-ide",',
        '  "version": "1.0.0",',
        '  "type": "module",',
        '  "dependencies": {',
        '    "react": "^18.2.0"',
        "  }",
        "}",
    ],
    "README.md": [
        "# Web IDE",
        "",
        "A modern web-based IDE built with React.",
        "",
        "## Features",
        "- File explorer",
        "- Code editor",
        "- Terminal",
        "- Live preview",
    ],
}


class CommandConsole:
    """Line-oriented fake terminal.

    :meth:`execute` maps a complete input line to output lines. :meth:`feed`
    accepts raw keystroke data the way a terminal widget delivers it and
    returns the text to echo back, prompt included.
    """

    def __init__(
        self,
        *,
        home_label: str = "~",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._home = home_label
        self._clock = clock
        self.current_directory = home_label
        self.current_line = ""
        self.transcript: List[str] = []
        self._commands: Dict[str, CommandHandler] = {
            "help": lambda _args: list(_HELP_LINES),
            "clear": self._clear,
            "ls": lambda _args: list(_LISTING),
            "pwd": lambda _args: [_WORKING_DIRECTORY],
            "cd": self._cd,
            "cat": self._cat,
            "echo": lambda args: [" ".join(args)],
            "date": lambda _args: [self._clock().strftime("%a %b %d %Y %H:%M:%S")],
            "whoami": lambda _args: ["webide-user"],
            "node -v": lambda _args: ["v18.17.0"],
            "npm -v": lambda _args: ["9.8.1"],
        }

    @property
    def commands(self) -> tuple[str, ...]:
        return tuple(self._commands)

    def execute(self, line: str) -> List[str]:
        """Run one input line; the whole line is matched before its first word."""

        text = line.strip()
        if not text:
            return []
        command, *args = text.split(" ")
        handler = self._commands.get(text) or self._commands.get(command)
        if handler is None:
            output = [f"Command not found: {command}"]
        else:
            output = handler(args)
        LOGGER.debug("Console ran %r -> %d line(s)", text, len(output))
        self.transcript.extend(output)
        return output

    def feed(self, data: str) -> str:
        """Consume keystroke data and return the terminal echo."""

        echo: List[str] = []
        for char in data:
            if char == _ENTER:
                echo.append(_NEWLINE)
                if self.current_line.strip():
                    for out in self.execute(self.current_line):
                        echo.append(out + _NEWLINE)
                self.current_line = ""
                echo.append(PROMPT)
            elif char == _BACKSPACE:
                if self.current_line:
                    self.current_line = self.current_line[:-1]
                    echo.append("\b \b")
            elif char >= " ":
                self.current_line += char
                echo.append(char)
        return "".join(echo)

    # ------------------------------------------------------------------
    # Command handlers
    # ------------------------------------------------------------------
    def _clear(self, _args: Sequence[str]) -> List[str]:
        self.transcript.clear()
        return []

    def _cd(self, args: Sequence[str]) -> List[str]:
        if not args or not args[0]:
            self.current_directory = self._home
            return ["Changed to home directory"]
        target = args[0]
        if target == "..":
            self.current_directory = self._home
            return ["Changed to parent directory"]
        if target in _KNOWN_DIRECTORIES:
            self.current_directory = f"{self._home}/{target}"
            return [f"Changed to directory: {target}"]
        return [f"cd: {target}: No such file or directory"]

    def _cat(self, args: Sequence[str]) -> List[str]:
        if not args or not args[0]:
            return ["cat: missing file operand"]
        name = args[0]
        lines = _MOCK_FILES.get(name)
        if lines is None:
            return [f"cat: {name}: No such file or directory"]
        return list(lines)
