"""Per-scope cache of rendered segment text.

Entries are created lazily on the first get() for a (segment, scope) pair and
recomputed only when stale:

- triggered segments go stale when one of their trigger events fires for a
  matching scope, or on an explicit refresh;
- volatile segments (no triggers) are recomputed once per redraw pass for
  the focused scope; other scopes recompute them at most once per pass, and
  only when the line is actually displayed.

A render function that raises keeps the last good value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set

from .events import EventSource
from .segments import Segment, SegmentContext, SegmentRegistry
from .state import Scope

logger = logging.getLogger(__name__)

ContextResolver = Callable[[Scope], Optional[SegmentContext]]


@dataclass
class CacheEntry:
    value: str = ""
    dirty: bool = True
    computed_pass: int = -1
    failed: bool = False


class SegmentCache:
    """Caches segment output per scope and wires trigger events."""

    def __init__(
        self,
        registry: SegmentRegistry,
        resolve_context: ContextResolver,
        events: Optional[EventSource] = None,
    ):
        """Initialize the cache.

        Args:
            registry: Where segment names are resolved
            resolve_context: Builds the SegmentContext for a scope, or
                returns None when the scope no longer exists
            events: Event source to subscribe trigger events on
        """
        self._registry = registry
        self._resolve_context = resolve_context
        self._events = events
        self._entries: Dict[Scope, Dict[str, CacheEntry]] = {}
        self._pass = 0
        self._subscribed: Set[str] = set()
        self._missing_logged: Set[str] = set()

        self.open()
        registry.on_declare(self._on_declare)
        registry.on_remove(self._on_remove)

    @property
    def redraw_pass(self) -> int:
        return self._pass

    def tick(self) -> int:
        """Start a new redraw pass; volatile entries computed earlier go stale."""
        self._pass += 1
        return self._pass

    def get(self, name: str, scope: Scope, displayed: bool = False) -> str:
        """Return the segment text for a scope, recomputing it when stale.

        Unknown segments and scopes that no longer exist render as "".

        Args:
            name: Segment name
            scope: Scope key of the surface
            displayed: The text is going on screen in this redraw pass, so
                volatile segments of unfocused scopes are brought up to date
        """
        segment = self._registry.resolve(name)
        if segment is None:
            if name not in self._missing_logged:
                logger.debug(f"Segment {name} is not declared; rendering empty")
                self._missing_logged.add(name)
            return ""

        context = self._resolve_context(scope)
        if context is None:
            return ""

        entries = self._entries.setdefault(scope, {})
        entry = entries.get(name)
        if entry is None:
            entry = CacheEntry(value=segment.init_value or "")
            entries[name] = entry

        if self._is_stale(segment, entry, context, displayed):
            self._compute(segment, entry, context)
        return entry.value

    def peek(self, name: str, scope: Scope) -> Optional[CacheEntry]:
        """Return the entry without computing anything."""
        return self._entries.get(scope, {}).get(name)

    def _is_stale(self, segment: Segment, entry: CacheEntry, context: SegmentContext,
                  displayed: bool) -> bool:
        if entry.dirty:
            return True
        if not segment.volatile or entry.computed_pass == self._pass:
            return False
        return context.active or displayed

    def _compute(self, segment: Segment, entry: CacheEntry, context: SegmentContext) -> None:
        try:
            value = segment.render(context)
        except Exception:
            # Keep the last good value; log only the first failure of a streak
            if not entry.failed:
                logger.exception(f"Segment {segment.name} failed to render")
            entry.failed = True
        else:
            entry.value = value or ""
            entry.failed = False
        entry.dirty = False
        entry.computed_pass = self._pass

    def invalidate(self, name: str, scope: Scope) -> None:
        """Mark one entry dirty; it is recomputed on the next get()."""
        entry = self.peek(name, scope)
        if entry is not None:
            entry.dirty = True

    def invalidate_all(self, scope: Scope) -> None:
        """Mark every entry of a scope dirty."""
        for entry in self._entries.get(scope, {}).values():
            entry.dirty = True

    def invalidate_event(
        self,
        event: str,
        surface: Optional[str] = None,
        buffer: Optional[str] = None,
    ) -> int:
        """Mark dirty every entry whose segment is triggered by event.

        Only scopes matching the surface/buffer filters are touched; with no
        filters every scope is.

        Returns:
            Number of entries marked dirty
        """
        count = 0
        for scope, entries in self._entries.items():
            if not scope.matches(surface, buffer):
                continue
            for name, entry in entries.items():
                segment = self._registry.resolve(name)
                if segment is not None and event in segment.triggers:
                    entry.dirty = True
                    count += 1
        return count

    def invalidate_volatile(self, surface: Optional[str] = None, buffer: Optional[str] = None) -> None:
        """Mark volatile entries of matching scopes dirty."""
        for scope, entries in self._entries.items():
            if not scope.matches(surface, buffer):
                continue
            for name, entry in entries.items():
                segment = self._registry.resolve(name)
                if segment is not None and segment.volatile:
                    entry.dirty = True

    def refresh(self, name: Optional[str] = None) -> None:
        """Manual refresh: mark entries of one segment (or all) dirty."""
        for entries in self._entries.values():
            for entry_name, entry in entries.items():
                if name is None or entry_name == name:
                    entry.dirty = True

    def drop_scope(self, surface: Optional[str] = None, buffer: Optional[str] = None) -> int:
        """Remove every entry whose scope matches the filters.

        At least one filter is required; use clear() to drop everything.

        Returns:
            Number of scopes removed
        """
        if surface is None and buffer is None:
            return 0
        doomed = [scope for scope in self._entries if scope.matches(surface, buffer)]
        for scope in doomed:
            del self._entries[scope]
        return len(doomed)

    def prune(self) -> int:
        """Drop scopes that no longer resolve to a live surface.

        Returns:
            Number of scopes removed
        """
        doomed = [scope for scope in self._entries if self._resolve_context(scope) is None]
        for scope in doomed:
            del self._entries[scope]
        if doomed:
            logger.debug(f"Pruned {len(doomed)} unreachable cache scopes")
        return len(doomed)

    def scopes(self) -> List[Scope]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def open(self) -> None:
        """Subscribe the triggers of every declared segment."""
        for name in self._registry.names():
            segment = self._registry.resolve(name)
            if segment is not None:
                self._wire(segment)

    def close(self) -> None:
        """Unsubscribe from the event source; open() wires everything again."""
        if self._events is not None:
            for event in self._subscribed:
                self._events.unsubscribe(event, self._on_event)
        self._subscribed.clear()

    def _on_declare(self, segment: Segment, previous: Optional[Segment]) -> None:
        self._wire(segment)
        # A redefined segment must not serve text from the old render function
        if previous is not None:
            self.refresh(segment.name)

    def _on_remove(self, segment: Segment) -> None:
        for entries in self._entries.values():
            entries.pop(segment.name, None)

    def _wire(self, segment: Segment) -> None:
        if self._events is None:
            return
        for event in segment.triggers:
            if event not in self._subscribed:
                self._events.subscribe(event, self._on_event)
                self._subscribed.add(event)

    def _on_event(self, event: str, surface: Optional[str] = None,
                  buffer: Optional[str] = None, **kwargs) -> None:
        self.invalidate_event(event, surface=surface, buffer=buffer)
