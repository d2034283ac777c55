"""Named events and a simple observer list per event.

The host editor forwards its notifications (file opened, selection changed,
focus changed, ...) through an EventSource. Subscribers are plain callables
that receive the event keyword arguments.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class Events:
    """Constants for event names emitted by the host."""

    # Buffer lifecycle and content
    FILE_OPENED = "file-opened"
    FILE_SAVED = "file-saved"
    BUFFER_CHANGED = "buffer-changed"
    BUFFER_RENAMED = "buffer-renamed"
    READ_ONLY_CHANGED = "read-only-changed"
    MODE_CHANGED = "mode-changed"
    ENCODING_CHANGED = "encoding-changed"
    INDENT_CHANGED = "indent-changed"

    # Editing state
    SELECTION_CHANGED = "selection-changed"
    SEARCH_UPDATED = "search-updated"

    # External processes
    VC_REFRESHED = "vc-refreshed"
    CHECKER_FINISHED = "checker-finished"

    # Windows and focus
    FOCUS_CHANGED = "focus-changed"
    WINDOW_CONFIGURATION_CHANGED = "window-configuration-changed"


class EventSource:
    """Keeps an ordered list of listeners per event name."""

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}

    def subscribe(self, event: str, listener: Listener) -> None:
        """Add a listener for an event.

        Subscribing the same listener twice has no effect.
        """
        listeners = self._listeners.setdefault(event, [])
        if listener not in listeners:
            listeners.append(listener)

    def unsubscribe(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event)
        if not listeners:
            return
        try:
            listeners.remove(listener)
        except ValueError:
            return
        if not listeners:
            del self._listeners[event]

    def listeners(self, event: str) -> List[Listener]:
        """Return a copy of the listeners registered for an event."""
        return list(self._listeners.get(event, ()))

    def emit(self, event: str, **kwargs: Any) -> int:
        """Call every listener of an event.

        A listener that raises is logged and skipped; the remaining
        listeners still run.

        Returns:
            Number of listeners that completed without raising
        """
        delivered = 0
        # Listeners may (un)subscribe while we iterate
        for listener in self.listeners(event):
            try:
                listener(event=event, **kwargs)
            except Exception:
                logger.exception(f"Listener {listener!r} failed for event {event}")
                continue
            delivered += 1
        return delivered

    def clear(self) -> None:
        self._listeners.clear()
