"""Assembles cached segment text into a full-width status line."""

from __future__ import annotations

from typing import Callable, Dict, Mapping, Optional, Tuple

import blessed

from .bar import Bar
from .cache import SegmentCache
from .focus import FocusTracker
from .presets import FormatState
from .segments import SegmentRegistry
from .settings import ModelineSettings
from .state import Surface


def compute_padding(total: int, left: int, right: int) -> int:
    """Columns of padding between left and right; never negative."""
    return max(0, total - left - right)


class FormatAssembler:
    """Renders a surface's status line from its FormatState."""

    def __init__(
        self,
        registry: SegmentRegistry,
        cache: SegmentCache,
        focus: FocusTracker,
        formats: Mapping[str, FormatState],
        bar: Bar,
        settings: Optional[ModelineSettings] = None,
        term: Optional[blessed.Terminal] = None,
        measure: Optional[Callable[[str], int]] = None,
    ):
        """Initialize the assembler.

        Args:
            registry: Segment declarations (for the styled flag)
            cache: Source of segment text
            focus: Decides active vs inactive styling
            formats: Surface id -> FormatState, owned by the caller
            bar: Bar decoration
            settings: Faces for styled segments
            term: Terminal used for faces and width measurement
            measure: Display width of a styled string; defaults to the
                terminal's length(), which skips escape sequences and
                counts wide glyphs as two cells
        """
        self.registry = registry
        self.cache = cache
        self.focus = focus
        self.formats = formats
        self.bar = bar
        self.settings = settings or ModelineSettings()
        self.term = term or bar.term
        self.measure = measure or self.term.length

    def render_sides(self, surface: Surface) -> Tuple[str, str]:
        """Return the (left, right) strings of a surface."""
        state = self.formats.get(surface.id)
        if state is None:
            return "", ""
        active = self.focus.is_active(surface.id)
        scope = surface.scope
        left = "".join(self._segment_text(name, scope, active) for name in state.left)
        right = "".join(self._segment_text(name, scope, active) for name in state.right)
        return left, right

    def render(self, surface: Surface) -> str:
        """Render the whole line, right side flush with the surface edge.

        Content wider than the surface is returned unpadded; truncating it
        is up to whatever draws the line.
        """
        left, right = self.render_sides(surface)
        active = self.focus.is_active(surface.id)
        available = surface.width - self.bar.cells
        padding = compute_padding(available, self.measure(left), self.measure(right))
        body = left + " " * padding + right
        block = self.bar.render(active)
        if self.bar.position == "end":
            return body + block
        return block + body

    def _segment_text(self, name: str, scope, active: bool) -> str:
        text = self.cache.get(name, scope, displayed=True)
        if not text:
            return ""
        segment = self.registry.resolve(name)
        if segment is None or not segment.styled:
            return text
        face = self.settings.active_face if active else self.settings.inactive_face
        return self.term.formatter(face)(text)

    def widths(self, surface: Surface) -> Dict[str, int]:
        """Measured widths of the parts of a surface's line."""
        left, right = self.render_sides(surface)
        left_width = self.measure(left)
        right_width = self.measure(right)
        return {
            'bar': self.bar.cells,
            'left': left_width,
            'right': right_width,
            'padding': compute_padding(surface.width - self.bar.cells, left_width, right_width),
        }
