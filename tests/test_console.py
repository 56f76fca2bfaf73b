"""Tests for the canned-command console."""

from __future__ import annotations

from datetime import datetime

import pytest

from webide.console import PROMPT, CommandConsole


@pytest.fixture
def console() -> CommandConsole:
    return CommandConsole(clock=lambda: datetime(2024, 3, 5, 14, 7, 9))


def test_help_lists_commands(console: CommandConsole) -> None:
    output = console.execute("help")

    assert output[0] == "Available commands:"
    assert any(line.strip().startswith("node -v") for line in output)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("pwd", ["/home/user/web-ide"]),
        ("echo hello   world", ["hello   world"]),
        ("whoami", ["webide-user"]),
        ("node -v", ["v18.17.0"]),
        ("npm -v", ["9.8.1"]),
        ("date", ["Tue Mar 05 2024 14:07:09"]),
        ("cat", ["cat: missing file operand"]),
        ("cat nope.txt", ["cat: nope.txt: No such file or directory"]),
        ("rm -rf /", ["Command not found: rm"]),
        ("   ", []),
    ],
)
def test_canned_responses(console: CommandConsole, line: str, expected: list[str]) -> None:
    assert console.execute(line) == expected


def test_ls_and_cat_ignore_the_project_tree(console: CommandConsole) -> None:
    assert console.execute("ls")[:2] == ["src/", "public/"]
    assert console.execute("cat package.json")[1] == '  "name": "web-ide",'


def test_cd_updates_current_directory(console: CommandConsole) -> None:
    assert console.execute("cd src") == ["Changed to directory: src"]
    assert console.current_directory == "~/src"
    assert console.execute("cd ..") == ["Changed to parent directory"]
    assert console.current_directory == "~"
    assert console.execute("cd nowhere") == ["cd: nowhere: No such file or directory"]
    assert console.execute("cd") == ["Changed to home directory"]


def test_clear_empties_transcript(console: CommandConsole) -> None:
    console.execute("whoami")
    assert console.transcript == ["webide-user"]

    assert console.execute("clear") == []
    assert console.transcript == []


def test_feed_echoes_keystrokes_and_runs_on_enter(console: CommandConsole) -> None:
    echo = console.feed("pwdx\x7f")
    assert echo == "pwdx\b \b"
    assert console.current_line == "pwd"

    echo = console.feed("\r")

    assert echo == "\r\n/home/user/web-ide\r\n" + PROMPT
    assert console.current_line == ""


def test_feed_ignores_control_characters(console: CommandConsole) -> None:
    assert console.feed("\x1b\x7f") == ""
    assert console.feed("\r") == "\r\n" + PROMPT


def test_commands_property_lists_table(console: CommandConsole) -> None:
    assert "help" in console.commands
    assert "npm -v" in console.commands
