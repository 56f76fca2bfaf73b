"""Qt front end. Importing this package requires PySide6."""
