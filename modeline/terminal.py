"""Terminal interface using Blessed for status line display."""

import blessed
from typing import Dict, Optional

from .constants import ModelineConstants


class TerminalInterface:
    """Draws status lines to the terminal using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        # Virtual screen state for minimal updates: row -> last drawn text
        self._last_rows: Dict[int, str] = {}
        self._last_width: Optional[int] = None

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        print(self.term.enter_fullscreen, end='')
        print(self.term.hide_cursor, end='')
        print(self.term.clear, end='', flush=True)
        self.is_fullscreen = True

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(self.term.exit_fullscreen, end='')
            print(self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False

    def invalidate_frame(self) -> None:
        """Forget what is on screen so the next update repaints everything.

        Use this after a resize or when something else drew over the
        status lines.
        """
        self._last_rows = {}
        self._last_width = None

    def length(self, text: str) -> int:
        """Display width of text: escape sequences are skipped and wide
        glyphs count as two cells."""
        return self.term.length(text)

    def fit(self, text: str, width: int) -> str:
        """Truncate or pad a styled string to exactly `width` cells."""
        if self.term.length(text) > width:
            text = self.term.truncate(text, width)
        return self.term.ljust(text, width) + self.term.normal

    def draw_status_lines(self, lines: Dict[int, str]) -> int:
        """Draw status lines keyed by terminal row, skipping unchanged rows.

        Falls back to a full clear on first paint or when the terminal
        width changed.

        Returns:
            Number of rows actually written
        """
        if self._last_width != self.term.width:
            print(self.term.home + self.term.clear, end='')
            self._last_rows = {}
            self._last_width = self.term.width

        written = 0
        for row, text in sorted(lines.items()):
            display = self.fit(text, self.term.width)
            if self._last_rows.get(row) == display:
                continue
            print(self.term.move(row, 0) + display, end='')
            self._last_rows[row] = display
            written += 1
        print('', end='', flush=True)
        return written

    def draw_text(self, row: int, text: str) -> None:
        """Draw plain text on a row (e.g. window contents in the demo)."""
        print(self.term.move(row, 0) + self.fit(text, self.term.width), end='')

    def draw_error_message(self, message1: str, message2: str = ""):
        """Draw an error message in the center of the screen.

        Args:
            message1: Primary error message
            message2: Secondary information
        """
        print(self.term.home + self.term.clear, end='')
        self.invalidate_frame()

        center_y = self.term.height // 2
        print(self.term.move(center_y - 1, 0) + self.term.center(message1), end='')
        if message2:
            print(self.term.move(center_y, 0) + self.term.center(message2), end='')
        print('', end='', flush=True)

    def too_narrow(self) -> bool:
        return self.term.width < ModelineConstants.MIN_DEMO_WIDTH

    def get_key(self, timeout=None):
        """Get a single keypress from the user.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            A blessed Keystroke, or None on timeout
        """
        key = self.term.inkey(timeout=timeout)
        return key if key else None

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows."""
        return self.term.height
