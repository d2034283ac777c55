"""The bar: a coloured block at one end of the status line.

The bar carries no content. Its colour tells the focused surface apart from
the others. The bitmap is rebuilt only when its geometry, placement or
colours change, never per redraw.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import blessed

from .constants import ModelineConstants

logger = logging.getLogger(__name__)


class Bar:
    """Fixed-size decoration drawn at the start or end of the line."""

    def __init__(
        self,
        term: Optional[blessed.Terminal] = None,
        width: int = ModelineConstants.BAR_WIDTH,
        height: int = ModelineConstants.BAR_HEIGHT,
        position: str = ModelineConstants.BAR_POSITION,
        visible: bool = True,
        active_color: str = ModelineConstants.BAR_ACTIVE_COLOR,
        inactive_color: str = ModelineConstants.BAR_INACTIVE_COLOR,
    ):
        self.term = term or blessed.Terminal()
        self._width = max(0, width)
        self._height = max(1, height)
        self._position = self._check_position(position)
        self._visible = visible
        self._active_color = active_color
        self._inactive_color = inactive_color
        self._bitmap: Dict[bool, List[List[str]]] = {}
        self._rows: Dict[bool, str] = {}
        self.generation = 0
        self._regenerate()

    @staticmethod
    def _check_position(position: str) -> str:
        if position not in ModelineConstants.BAR_POSITIONS:
            raise ValueError(f"Bar position must be one of {ModelineConstants.BAR_POSITIONS}, got {position!r}")
        return position

    def configure(self, **changes) -> bool:
        """Change several settings and regenerate once.

        Accepts width, height, position, visible, active_color and
        inactive_color.

        Returns:
            True if anything changed (and the bitmap was rebuilt)
        """
        changed = False
        for key, value in changes.items():
            attr = f"_{key}"
            if key not in ('width', 'height', 'position', 'visible', 'active_color', 'inactive_color'):
                raise TypeError(f"Unknown bar setting: {key}")
            if key == 'position':
                value = self._check_position(value)
            elif key == 'width':
                value = max(0, value)
            elif key == 'height':
                value = max(1, value)
            if getattr(self, attr) != value:
                setattr(self, attr, value)
                changed = True
        if changed:
            self._regenerate()
        return changed

    @property
    def width(self) -> int:
        return self._width

    @width.setter
    def width(self, value: int) -> None:
        self.configure(width=value)

    @property
    def height(self) -> int:
        return self._height

    @height.setter
    def height(self, value: int) -> None:
        self.configure(height=value)

    @property
    def position(self) -> str:
        return self._position

    @position.setter
    def position(self, value: str) -> None:
        self.configure(position=value)

    @property
    def visible(self) -> bool:
        return self._visible

    @visible.setter
    def visible(self, value: bool) -> None:
        self.configure(visible=value)

    @property
    def cells(self) -> int:
        """Columns the bar adds to the line."""
        return self._width if self._visible else 0

    def bitmap(self, active: bool) -> List[List[str]]:
        """height x width grid of colour names for a focus state."""
        return [row[:] for row in self._bitmap[active]]

    def render(self, active: bool) -> str:
        """Return the bar as a styled string for one line."""
        return self._rows[active]

    def _regenerate(self) -> None:
        self.generation += 1
        for active, color in ((True, self._active_color), (False, self._inactive_color)):
            if not self._visible:
                self._bitmap[active] = []
                self._rows[active] = ""
                continue
            self._bitmap[active] = [[color] * self._width for _ in range(self._height)]
            block = " " * self._width
            self._rows[active] = self.term.formatter(f"on_{color}")(block) if block else ""
        logger.debug(
            f"Bar regenerated: {self._width}x{self._height} at {self._position}, "
            f"visible={self._visible}"
        )
