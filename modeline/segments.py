"""Segment registry.

A segment is a named render function plus the events that make its cached
value stale. Feature code declares segments independently; presets refer to
them by name and the registry resolves the name at render time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .settings import ModelineSettings
    from .state import Buffer, Surface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmentContext:
    """What a render function gets to look at."""
    surface: 'Surface'
    buffer: Optional['Buffer']
    active: bool
    settings: 'ModelineSettings'


RenderFunction = Callable[[SegmentContext], Optional[str]]


@dataclass(frozen=True)
class Segment:
    """A declared segment.

    Attributes:
        name: Unique identifier referenced by presets
        render: Function from SegmentContext to text (None renders empty)
        triggers: Events that invalidate the cached value. An empty set
            marks the segment volatile: it is recomputed on every redraw
            pass for the focused surface.
        init_value: Shown before the first computation
        styled: Wrap the text in the active/inactive face when assembling
    """
    name: str
    render: RenderFunction
    triggers: FrozenSet[str] = frozenset()
    init_value: Optional[str] = None
    styled: bool = True

    @property
    def volatile(self) -> bool:
        return not self.triggers


class SegmentRegistry:
    """Maps segment names to declarations; the last declaration wins."""

    def __init__(self):
        self._segments: Dict[str, Segment] = {}
        self._listeners: List[Callable[[Segment, Optional[Segment]], None]] = []
        self._remove_listeners: List[Callable[[Segment], None]] = []

    def declare(
        self,
        name: str,
        render: RenderFunction,
        triggers: Iterable[str] = (),
        init_value: Optional[str] = None,
        styled: bool = True,
    ) -> Segment:
        """Register a segment, replacing any earlier one with the same name.

        Args:
            name: Segment name
            render: Render function
            triggers: Event names that invalidate the cached value
            init_value: Text shown before the first computation
            styled: Apply the active/inactive face when assembling

        Returns:
            The new Segment
        """
        segment = Segment(
            name=name,
            render=render,
            triggers=frozenset(triggers),
            init_value=init_value,
            styled=styled,
        )
        previous = self._segments.get(name)
        if previous is not None:
            logger.debug(f"Redeclaring segment {name}")
        self._segments[name] = segment
        for listener in list(self._listeners):
            listener(segment, previous)
        return segment

    def segment(
        self,
        name: str,
        triggers: Iterable[str] = (),
        init_value: Optional[str] = None,
        styled: bool = True,
    ) -> Callable[[RenderFunction], RenderFunction]:
        """Decorator form of declare()."""
        def decorator(render: RenderFunction) -> RenderFunction:
            self.declare(name, render, triggers=triggers, init_value=init_value, styled=styled)
            return render
        return decorator

    def resolve(self, name: str) -> Optional[Segment]:
        return self._segments.get(name)

    def remove(self, name: str) -> Optional[Segment]:
        segment = self._segments.pop(name, None)
        if segment is not None:
            for listener in list(self._remove_listeners):
                listener(segment)
        return segment

    def names(self) -> List[str]:
        return list(self._segments)

    def on_declare(self, listener: Callable[[Segment, Optional[Segment]], None]) -> None:
        """Call listener(new, previous) whenever a segment is declared."""
        self._listeners.append(listener)

    def on_remove(self, listener: Callable[[Segment], None]) -> None:
        """Call listener(removed) whenever a declared segment is removed."""
        self._remove_listeners.append(listener)

    def __contains__(self, name: object) -> bool:
        return name in self._segments

    def __len__(self) -> int:
        return len(self._segments)
