"""Host editor state read by segment render functions.

The host owns and mutates these objects; the modeline only reads them.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional


class Scope(NamedTuple):
    """Cache scope: the surface showing a buffer."""
    surface: str
    buffer: Optional[str]

    def matches(self, surface: Optional[str] = None, buffer: Optional[str] = None) -> bool:
        """True if this scope matches the given filters (None matches anything)."""
        if surface is not None and self.surface != surface:
            return False
        if buffer is not None and self.buffer != buffer:
            return False
        return True


@dataclass
class VcStatus:
    """Version-control state of a file."""
    branch: str
    state: str = "up-to-date"  # edited, added, removed, conflict, needs-merge, needs-update, unregistered
    backend: str = "Git"


@dataclass
class CheckerStatus:
    """Result of the last syntax-checker run."""
    state: str = "finished"  # running, finished, errored, interrupted, not-checked
    errors: int = 0
    warnings: int = 0
    infos: int = 0

    @property
    def total(self) -> int:
        return self.errors + self.warnings + self.infos


@dataclass
class SearchMatches:
    current: int
    total: int


@dataclass
class Selection:
    """Size of the active text selection."""
    lines: int
    chars: int

    @property
    def empty(self) -> bool:
        return self.chars == 0


@dataclass
class Buffer:
    """A snapshot of the buffer attributes segments care about."""
    id: str
    name: str
    path: Optional[str] = None
    project_root: Optional[str] = None
    remote_host: Optional[str] = None
    mode: str = "fundamental"
    modified: bool = False
    read_only: bool = False
    encoding: str = "utf-8"
    eol: str = "LF"
    indent_tabs: bool = False
    indent_width: int = 4
    tab_width: int = 8
    line: int = 1
    column: int = 0
    line_count: int = 1
    text: str = ""
    size: Optional[int] = None  # Bytes, supplied by the host
    vc: Optional[VcStatus] = None
    checker: Optional[CheckerStatus] = None
    search: Optional[SearchMatches] = None
    selection: Optional[Selection] = None

    @property
    def has_selection(self) -> bool:
        return self.selection is not None and not self.selection.empty


@dataclass
class Surface:
    """A window that shows one buffer and draws its own status line."""
    id: str
    buffer: Optional[Buffer] = None
    width: int = 80
    height: int = 24
    row: int = 0  # Terminal row of the status line
    transient: bool = False  # Minibuffer or popup; never takes focus

    @property
    def scope(self) -> Scope:
        return Scope(self.id, self.buffer.id if self.buffer is not None else None)
