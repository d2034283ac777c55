"""Modeline CLI entry point.

Allows running via `python -m modeline` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from .version import get_version_string

DEMO_KEYS = (
    "o: other window  j/k: move  m: modify  s: select  /: search  v: vc  c: checker  "
    "p: preset  f: app focus  :: prompt  q: quit"
)

VC_CYCLE = ("up-to-date", "edited", "added", "conflict")
CHECKER_CYCLE = ("finished", "running", "errored")


class Demo:
    """Two windows and a minibuffer drawn with live status lines."""

    def __init__(self, context, terminal):
        from .state import Buffer, CheckerStatus, Surface, VcStatus

        self.context = context
        self.terminal = terminal
        self.running = False
        code = Buffer(
            id="demo.py", name="demo.py", path="/src/project/demo.py",
            project_root="/src/project", mode="python", line_count=120,
            size=3480, vc=VcStatus(branch="main"), checker=CheckerStatus(),
        )
        notes = Buffer(
            id="NOTES.txt", name="NOTES.txt", path="/src/project/NOTES.txt",
            project_root="/src/project", mode="text", line_count=12,
            text="Status lines are assembled from cached segments.",
        )
        self.surfaces = [Surface(id="top", buffer=code), Surface(id="bottom", buffer=notes)]
        self.minibuffer = Surface(id="minibuffer", transient=True)
        for surface in self.surfaces:
            context.add_surface(surface)
        context.add_surface(self.minibuffer)
        self.layout()
        context.enter_surface("top")

    def layout(self) -> None:
        width = self.terminal.width
        half = max(2, (self.terminal.height - 2) // 2)
        for i, surface in enumerate(self.surfaces):
            surface.width = width
            surface.height = half
            surface.row = (i + 1) * half - 1

    @property
    def focused(self):
        for surface in self.surfaces:
            if self.context.focus.is_active(surface.id):
                return surface
        return None

    def draw(self) -> None:
        if self.terminal.too_narrow():
            from .constants import ModelineConstants
            self.terminal.draw_error_message(
                ModelineConstants.TERMINAL_TOO_NARROW_MESSAGE.format(ModelineConstants.MIN_DEMO_WIDTH)
            )
            return
        lines = self.context.redraw()
        rows = {surface.row: lines[surface.id] for surface in self.surfaces}
        rows[self.terminal.height - 1] = DEMO_KEYS
        self.terminal.draw_status_lines(rows)

    def handle_key(self, key: str) -> None:
        from .events import Events
        from .state import SearchMatches, Selection

        ctx = self.context
        surface = self.focused
        buf = surface.buffer if surface is not None else None

        if key == "q":
            self.running = False
        elif key == "o":
            other = self.surfaces[1] if surface is self.surfaces[0] else self.surfaces[0]
            ctx.enter_surface(other.id)
        elif key == "f":
            if ctx.focus.active is None:
                ctx.application_focus_in(self.surfaces[0].id)
            else:
                ctx.application_focus_out()
        elif key == ":":
            if ctx.focus.prompting:
                ctx.focus.end_prompt()
            else:
                ctx.focus.begin_prompt()
        elif buf is None:
            return
        elif key in ("j", "k"):
            step = 1 if key == "j" else -1
            buf.line = min(max(1, buf.line + step), buf.line_count)
        elif key == "m":
            buf.modified = not buf.modified
            ctx.emit(Events.BUFFER_CHANGED, buffer=buf.id)
        elif key == "s":
            buf.selection = None if buf.has_selection else Selection(lines=3, chars=42)
            ctx.emit(Events.SELECTION_CHANGED, buffer=buf.id)
        elif key == "/":
            buf.search = None if buf.search else SearchMatches(current=1, total=7)
            ctx.emit(Events.SEARCH_UPDATED, buffer=buf.id)
        elif key == "v" and buf.vc is not None:
            buf.vc.state = VC_CYCLE[(VC_CYCLE.index(buf.vc.state) + 1) % len(VC_CYCLE)]
            ctx.emit(Events.VC_REFRESHED, buffer=buf.id)
        elif key == "c" and buf.checker is not None:
            state = CHECKER_CYCLE[(CHECKER_CYCLE.index(buf.checker.state) + 1) % len(CHECKER_CYCLE)]
            buf.checker.state = state
            buf.checker.warnings = (buf.checker.warnings + 1) % 4
            ctx.emit(Events.CHECKER_FINISHED, buffer=buf.id)
        elif key == "p":
            names = ctx.presets.names()
            current = ctx.formats[surface.id].preset
            ctx.assign_preset(surface.id, names[(names.index(current) + 1) % len(names)])

    def run(self) -> None:
        from .constants import ModelineConstants

        self.terminal.setup()
        self.running = True
        try:
            with self.terminal.term.cbreak():
                while self.running:
                    self.draw()
                    key = self.terminal.get_key(timeout=ModelineConstants.DEMO_TICK_SECONDS)
                    if key is None:
                        continue
                    self.handle_key(str(key))
        except KeyboardInterrupt:
            pass
        finally:
            self.terminal.cleanup()


def run_demo(no_icons: bool = False) -> None:
    """Run the interactive status line demo until 'q' is pressed."""
    from .context import ModelineContext
    from .terminal import TerminalInterface

    terminal = TerminalInterface()
    context = ModelineContext.from_persistence(term=terminal.term, measure=terminal.length)
    if no_icons:
        context.settings.icons = False
        context.cache.refresh()
    with context:
        Demo(context, terminal).run()


def _option_value(args: List[str], name: str) -> Optional[str]:
    if name in args:
        i = args.index(name)
        if i + 1 < len(args):
            return args[i + 1]
    return None


def main() -> None:
    # Very small arg parsing: --version, --demo [--no-icons] [--log-file PATH]
    args = sys.argv[1:]
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return

    log_file = _option_value(args, "--log-file")
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    if "--demo" in args:
        run_demo(no_icons="--no-icons" in args)
        return

    print("usage: modeline [--version] [--demo [--no-icons] [--log-file PATH]]")


if __name__ == "__main__":  # pragma: no cover
    main()
