"""Process-wide event target and scoped listener engagement.

Pointer releases and clicks outside a grid, as well as clipboard events,
are observed at document scope rather than on the grid itself. Every grid
on the page shares one :class:`Document`; a grid only keeps listeners
attached while it is engaged, so the number of attached listeners tracks
the number of grids currently in use rather than the number ever created.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from sheetgrid.events import EventType

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class Document:
    """Event target shared by all grids."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def add_event_listener(self, event_type: EventType, listener: Listener) -> None:
        """Attach *listener*. Adding the same listener twice is a no-op."""
        listeners = self._listeners.setdefault(event_type, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, event_type: EventType, listener: Listener) -> None:
        listeners = self._listeners.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def dispatch_event(self, event: Any) -> Any:
        """Call every listener registered for ``event.type``.

        Listeners attached or detached while dispatching take effect from
        the next event on.
        """
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)
        return event

    def listener_count(self, event_type: EventType | None = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(listeners) for listeners in self._listeners.values())


_global_document: Document | None = None


def get_document() -> Document:
    global _global_document
    if _global_document is None:
        _global_document = Document()
    return _global_document


def set_document(document: Document) -> None:
    global _global_document
    _global_document = document


class Engagement:
    """Handle over a fixed set of document listeners.

    :meth:`acquire` attaches the whole set and :meth:`release` detaches it.
    Both are idempotent: overlapping acquires attach once and the set is
    released exactly once.
    """

    def __init__(
        self,
        document: Document,
        listeners: dict[EventType, Listener],
        name: str = "engagement",
    ) -> None:
        self._document = document
        self._listeners = dict(listeners)
        self._name = name
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def acquire(self) -> bool:
        """Attach the listeners. Returns ``False`` if already attached."""
        if self._active:
            return False
        for event_type, listener in self._listeners.items():
            self._document.add_event_listener(event_type, listener)
        self._active = True
        logger.debug("%s acquired (%s)", self._name, ", ".join(self._listeners))
        return True

    def release(self) -> bool:
        """Detach the listeners. Returns ``False`` if nothing was attached."""
        if not self._active:
            return False
        for event_type, listener in self._listeners.items():
            self._document.remove_event_listener(event_type, listener)
        self._active = False
        logger.debug("%s released", self._name)
        return True

    def __enter__(self) -> Engagement:
        self.acquire()
        return self

    def __exit__(self, *exc: object) -> None:
        self.release()
