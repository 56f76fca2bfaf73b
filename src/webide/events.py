"""Typed publish/subscribe bus used to broadcast workspace state changes.

Observers such as the explorer, the tab strip or a status label subscribe to
the event types they render; they never reach into the workspace's state.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, DefaultDict, Generic, TypeVar
from weakref import WeakMethod

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="Event")

Handler = Callable[[E], None]


@dataclass(slots=True)
class Event:
    """Base class for every workspace event."""


# =============================================================================
# Session events
# =============================================================================


@dataclass(slots=True)
class SessionOpened(Event):
    """A new editing session was created for ``path``."""

    path: str
    language: str


@dataclass(slots=True)
class SessionClosed(Event):
    """The session for ``path`` was destroyed; ``modified`` is its final dirty flag."""

    path: str
    modified: bool


@dataclass(slots=True)
class ActiveSessionChanged(Event):
    """The active session moved from ``previous`` to ``path`` (``None`` = no session)."""

    path: str | None
    previous: str | None = None


@dataclass(slots=True)
class SessionModified(Event):
    """The working copy for ``path`` changed and is now dirty."""

    path: str
    length: int


# =============================================================================
# Tree & save events
# =============================================================================


@dataclass(slots=True)
class TreeChanged(Event):
    """The tree root was replaced by a mutation at ``path``.

    Attributes:
        path: The path whose node was written or created.
        operation: ``"write"``, ``"create_file"`` or ``"create_folder"``.
    """

    path: str
    operation: str


@dataclass(slots=True)
class FileSaved(Event):
    """A session's content was written back to the tree and snapshotted."""

    path: str
    length: int
    persisted: bool = True


@dataclass(slots=True)
class SaveFailed(Event):
    """A save did not change any state.

    Attributes:
        path: The path the save addressed, if any.
        error_code: Machine-readable reason (see :class:`webide.errors.ErrorCode`).
        message: Human-readable description.
    """

    path: str | None
    error_code: str
    message: str


@dataclass(slots=True)
class SaveStatusChanged(Event):
    """The transient save indicator changed (``None`` means cleared)."""

    status: str | None


@dataclass(slots=True)
class WorkspaceRestored(Event):
    """The workspace finished start-up.

    Attributes:
        source: ``"snapshot"`` when the tree came from the blob store,
            ``"default"`` when the built-in project was used.
        error_code: Set when a stored snapshot was present but unusable.
    """

    source: str
    error_code: str | None = None


class EventBus(Generic[E]):
    """Synchronous publish/subscribe dispatcher.

    Handlers run in registration order. Bound methods are held weakly so a
    discarded observer is dropped automatically; plain functions and lambdas
    are held strongly. A handler that raises is logged and the remaining
    handlers still run.

    Not thread-safe; everything runs on the single UI event thread.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: DefaultDict[type[Event], list[_HandlerRef]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        self._handlers[event_type].append(_HandlerRef.create(handler))
        logger.debug("Subscribed %s to %s", _handler_name(handler), event_type.__name__)

    def unsubscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Remove the first registration of ``handler``; unknown handlers are ignored."""

        handlers = self._handlers.get(event_type)
        if not handlers:
            return
        for index, handler_ref in enumerate(handlers):
            if handler_ref.matches(handler):
                handlers.pop(index)
                return

    def publish(self, event: E) -> None:
        event_type = type(event)
        handlers = self._handlers.get(event_type)
        if not handlers:
            return
        logger.debug("Publishing %s to %d handler(s)", event_type.__name__, len(handlers))

        dead: list[_HandlerRef] = []
        for handler_ref in list(handlers):
            handler = handler_ref.resolve()
            if handler is None:
                dead.append(handler_ref)
                continue
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Handler %s raised for event %s", _handler_name(handler), event_type.__name__
                )
        for handler_ref in dead:
            handlers.remove(handler_ref)

    def clear(self) -> None:
        self._handlers.clear()

    def handler_count(self, event_type: type[E] | None = None) -> int:
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(handlers) for handlers in self._handlers.values())


class _HandlerRef:
    """Weak reference for bound methods, strong reference for everything else."""

    __slots__ = ("_ref", "_is_weak")

    def __init__(self, handler_ref: WeakMethod | Handler, is_weak: bool) -> None:
        self._ref = handler_ref
        self._is_weak = is_weak

    @classmethod
    def create(cls, handler: Handler) -> "_HandlerRef":
        if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
            try:
                return cls(WeakMethod(handler), is_weak=True)
            except TypeError:
                pass
        return cls(handler, is_weak=False)

    def resolve(self) -> Handler | None:
        if not self._is_weak:
            return self._ref  # type: ignore[return-value]
        return self._ref()  # type: ignore[operator]

    def matches(self, handler: Handler) -> bool:
        resolved = self.resolve()
        return resolved is not None and resolved == handler


def _handler_name(handler: Handler) -> str:
    if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
        return f"{type(handler.__self__).__name__}.{handler.__func__.__name__}"
    return getattr(handler, "__name__", repr(handler))


__all__ = [
    "Event",
    "EventBus",
    "Handler",
    "SessionOpened",
    "SessionClosed",
    "ActiveSessionChanged",
    "SessionModified",
    "TreeChanged",
    "FileSaved",
    "SaveFailed",
    "SaveStatusChanged",
    "WorkspaceRestored",
]
