"""Editor package: sessions, the workspace composition root and UI models."""

from . import session_model, sessions, workspace

__all__ = ["session_model", "sessions", "workspace"]
