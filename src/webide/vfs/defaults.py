"""Starter project used when no stored snapshot can be restored."""

from __future__ import annotations

from .nodes import FileNode, FolderNode

__all__ = ["default_tree"]

_APP_JSX = """import React from 'react'
import './App.css'

function App() {
  return (
    <div className="app">
      <h1>Hello World!</h1>
      <p>Welcome to the Web IDE</p>
    </div>
  )
}

export default App"""

_APP_CSS = """.app {
  text-align: center;
  padding: 20px;
}

h1 {
  color: #61dafb;
  margin-bottom: 20px;
}

p {
  font-size: 18px;
  color: #888;
}"""

_HEADER_JSX = """import React from 'react'

const Header = () => {
  return (
    <header>
      <h1>My App Header</h1>
    </header>
  )
}

export default Header"""

_INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Web IDE</title>
</head>
<body>
  <div id="root"></div>
</body>
</html>"""

_PACKAGE_JSON = """{
  "name": "web-ide-project",
  "version": "1.0.0",
  "dependencies": {
    "react": "^18.2.0",
    "react-dom": "^18.2.0"
  }
}"""

_README_MD = """# Web IDE Project

This is a sample project created in the Web IDE.

## Features

- File explorer
- Code editor with syntax highlighting
- Live preview
- Terminal

## Getting Started

1. Edit your files in the editor
2. Switch to preview to see your changes
3. Use the terminal for commands"""


def default_tree() -> FolderNode:
    """Return a fresh copy of the built-in project tree."""

    return FolderNode(
        {
            "src": FolderNode(
                {
                    "App.jsx": FileNode(_APP_JSX, "javascript"),
                    "App.css": FileNode(_APP_CSS, "css"),
                    "components": FolderNode({"Header.jsx": FileNode(_HEADER_JSX, "javascript")}),
                }
            ),
            "public": FolderNode({"index.html": FileNode(_INDEX_HTML, "html")}),
            "package.json": FileNode(_PACKAGE_JSON, "json"),
            "README.md": FileNode(_README_MD, "markdown"),
        }
    )
