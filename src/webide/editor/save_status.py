"""Transient save indicator shown next to the tab strip."""

from __future__ import annotations

import time
from typing import Callable, List, Optional

__all__ = ["SaveStatusIndicator", "SAVING", "SAVED", "ERROR"]

SAVING = "saving"
SAVED = "saved"
ERROR = "error"

StatusListener = Callable[[Optional[str]], None]


class SaveStatusIndicator:
    """Holds ``saving`` / ``saved`` / ``error`` and clears itself after a delay.

    The clear is purely time based: nothing waits for persistence to
    acknowledge the write. Expiry is evaluated lazily on read, so no timer
    thread is needed; a Qt front end may additionally poll with a ``QTimer``.
    """

    def __init__(
        self,
        *,
        saved_seconds: float = 2.0,
        error_seconds: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
        listener: StatusListener | None = None,
    ) -> None:
        self._saved_seconds = saved_seconds
        self._error_seconds = error_seconds
        self._clock = clock
        self._listeners: List[StatusListener] = [listener] if listener is not None else []
        self._status: str | None = None
        self._clear_at: float | None = None

    def current(self) -> str | None:
        if self._clear_at is not None and self._clock() >= self._clear_at:
            self._set(None, None)
        return self._status

    def mark_saving(self) -> None:
        self._set(SAVING, None)

    def mark_saved(self) -> None:
        self._set(SAVED, self._clock() + self._saved_seconds)

    def mark_error(self) -> None:
        self._set(ERROR, self._clock() + self._error_seconds)

    def clear(self) -> None:
        self._set(None, None)

    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def _set(self, status: str | None, clear_at: float | None) -> None:
        changed = status != self._status
        self._status = status
        self._clear_at = clear_at
        if changed:
            for listener in list(self._listeners):
                listener(status)
