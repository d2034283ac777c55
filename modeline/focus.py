"""Tracks which surface is focused.

Only one surface is active at a time, or none when the whole application
lost input focus. Segments ask the tracker instead of guessing from which
surface happens to be drawing, since split layouts draw several surfaces per
redraw.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .state import Surface

logger = logging.getLogger(__name__)

FocusListener = Callable[[Optional[str], Optional[str]], None]


class FocusTracker:
    """Two-state machine: focused(surface) or unfocused."""

    def __init__(self):
        self._active: Optional[str] = None
        self._prompting = False
        self._listeners: List[FocusListener] = []

    @property
    def active(self) -> Optional[str]:
        """Id of the focused surface, or None."""
        return self._active

    @property
    def prompting(self) -> bool:
        return self._prompting

    def is_active(self, surface_id: Optional[str]) -> bool:
        return surface_id is not None and surface_id == self._active

    def add_listener(self, listener: FocusListener) -> None:
        """Call listener(previous, current) on every focus transition."""
        self._listeners.append(listener)

    def window_configuration_changed(self, selected: 'Surface') -> bool:
        """Window layout changed with `selected` as the selected surface.

        Returns:
            True if the focused surface changed
        """
        return self._enter(selected)

    def surface_entered(self, surface: 'Surface') -> bool:
        """The user explicitly moved into a surface."""
        return self._enter(surface)

    def application_focus_out(self) -> bool:
        """The application lost OS input focus; every surface is inactive."""
        return self._set(None)

    def application_focus_in(self, selected: Optional['Surface']) -> bool:
        """The application regained OS input focus."""
        if selected is None:
            return self._set(None)
        if selected.transient:
            # Keep whatever was focused before; a prompt cannot be the focus
            return False
        return self._set(selected.id)

    def begin_prompt(self) -> None:
        """A minibuffer prompt became active; layout changes are ignored."""
        self._prompting = True

    def end_prompt(self) -> None:
        self._prompting = False

    def forget(self, surface_id: str) -> bool:
        """Drop focus if the destroyed surface had it."""
        if self._active == surface_id:
            return self._set(None)
        return False

    def _enter(self, surface: 'Surface') -> bool:
        if surface.transient or self._prompting:
            logger.debug(f"Ignoring focus change to {surface.id} (transient={surface.transient}, "
                         f"prompting={self._prompting})")
            return False
        return self._set(surface.id)

    def _set(self, surface_id: Optional[str]) -> bool:
        previous = self._active
        if previous == surface_id:
            return False
        self._active = surface_id
        for listener in list(self._listeners):
            listener(previous, surface_id)
        return True
