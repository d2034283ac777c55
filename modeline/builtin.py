"""Built-in segments and presets.

Each render function reads the buffer/surface state it is given and returns
its text with its own surrounding spaces, or None to show nothing.
"""

from __future__ import annotations

import os
import time
from typing import Callable, Optional, TYPE_CHECKING

from .constants import ModelineConstants
from .events import Events
from .segments import SegmentContext

if TYPE_CHECKING:
    from .context import ModelineContext

VC_STATE_MARKERS = {
    "up-to-date": "",
    "edited": "*",
    "added": "+",
    "removed": "-",
    "conflict": "!",
    "needs-merge": "!",
    "needs-update": "↓",
    "unregistered": "?",
}


def format_size(size: int) -> str:
    """Human-readable byte count: 512B, 1.5k, 12.0M."""
    if size < 1024:
        return f"{size}B"
    value = float(size)
    for unit in ("k", "M", "G"):
        value /= 1024
        if value < 1024:
            return f"{value:.1f}{unit}"
    return f"{value:.1f}T"


def buffer_name(ctx: SegmentContext) -> str:
    """Name of the buffer according to the buffer_file_name_style setting."""
    buf = ctx.buffer
    style = ctx.settings.buffer_file_name_style
    if style == "file-name" and buf.path:
        return os.path.basename(buf.path)
    if style == "relative-to-project" and buf.path and buf.project_root:
        try:
            return os.path.relpath(buf.path, buf.project_root)
        except ValueError:
            # Different drives on Windows
            return buf.path
    return buf.name


def render_buffer_info(ctx: SegmentContext) -> Optional[str]:
    buf = ctx.buffer
    if buf is None:
        return None
    icons = ctx.settings.icons
    if buf.read_only:
        state = ModelineConstants.ICON_READ_ONLY if icons else ModelineConstants.TEXT_READ_ONLY
    elif buf.modified:
        state = ModelineConstants.ICON_MODIFIED if icons else ModelineConstants.TEXT_MODIFIED
    else:
        state = ModelineConstants.ICON_SAVED if icons else ModelineConstants.TEXT_SAVED
    return f" {state} {buffer_name(ctx)} "


def render_buffer_position(ctx: SegmentContext) -> Optional[str]:
    buf = ctx.buffer
    if buf is None:
        return None
    if buf.line_count <= 1:
        where = "All"
    elif buf.line <= 1:
        where = "Top"
    elif buf.line >= buf.line_count:
        where = "Bot"
    else:
        where = f"{100 * buf.line // buf.line_count}%"
    return f" {buf.line}:{buf.column} {where} "


def render_matches(ctx: SegmentContext) -> Optional[str]:
    buf = ctx.buffer
    if buf is None or buf.search is None:
        return None
    return f" {buf.search.current}/{buf.search.total} "


def render_selection_info(ctx: SegmentContext) -> Optional[str]:
    buf = ctx.buffer
    if buf is None or not buf.has_selection or not ctx.active:
        return None
    selection = buf.selection
    if selection.lines > 1:
        return f" {selection.lines}L {selection.chars}C "
    return f" {selection.chars}C "


def render_word_count(ctx: SegmentContext) -> Optional[str]:
    buf = ctx.buffer
    if buf is None or buf.mode not in ctx.settings.word_count_modes:
        return None
    return f" {len(buf.text.split())}W "


def render_major_mode(ctx: SegmentContext) -> Optional[str]:
    if ctx.buffer is None:
        return None
    return f" {ctx.buffer.mode} "


def render_vcs(ctx: SegmentContext) -> Optional[str]:
    buf = ctx.buffer
    if buf is None or buf.vc is None:
        return None
    vc = buf.vc
    marker = VC_STATE_MARKERS.get(vc.state, "")
    if ctx.settings.icons:
        return f" {ModelineConstants.ICON_VC_BRANCH} {vc.branch}{marker} "
    return f" {vc.backend}:{vc.branch}{marker} "


def render_checker(ctx: SegmentContext) -> Optional[str]:
    buf = ctx.buffer
    if buf is None or buf.checker is None:
        return None
    checker = buf.checker
    icons = ctx.settings.icons
    if checker.state == "running":
        return f" {ModelineConstants.ICON_CHECKER_RUNNING if icons else '-'} "
    if checker.state == "errored":
        return f" {ModelineConstants.ICON_CHECKER_ERROR if icons else '!'} "
    if checker.state == "interrupted":
        return " . "
    if checker.state != "finished":
        return None
    if checker.total == 0:
        return f" {ModelineConstants.ICON_CHECKER_OK if icons else 'OK'} "
    return f" {checker.errors}/{checker.warnings}/{checker.infos} "


def render_buffer_encoding(ctx: SegmentContext) -> Optional[str]:
    buf = ctx.buffer
    if buf is None:
        return None
    is_default = (
        buf.encoding.lower() == ModelineConstants.DEFAULT_ENCODING
        and buf.eol == ModelineConstants.DEFAULT_EOL
    )
    if is_default and ctx.settings.hide_default_encoding:
        return None
    return f" {buf.eol} {buf.encoding.upper()} "


def render_indent_info(ctx: SegmentContext) -> Optional[str]:
    buf = ctx.buffer
    if buf is None:
        return None
    if buf.indent_tabs:
        return f" TAB {buf.tab_width} "
    return f" SPC {buf.indent_width} "


def render_remote_host(ctx: SegmentContext) -> Optional[str]:
    buf = ctx.buffer
    if buf is None or not buf.remote_host:
        return None
    return f"@{buf.remote_host} "


def render_project(ctx: SegmentContext) -> Optional[str]:
    buf = ctx.buffer
    if buf is None or not buf.project_root:
        return None
    return f" {os.path.basename(os.path.normpath(buf.project_root))} "


def render_buffer_size(ctx: SegmentContext) -> Optional[str]:
    # The host supplies the size; scanning the file here would stall redraws
    buf = ctx.buffer
    if buf is None or buf.size is None:
        return None
    return f" {format_size(buf.size)} "


def make_time_renderer(clock: Callable[[], time.struct_time]) -> Callable[[SegmentContext], str]:
    def render_time(ctx: SegmentContext) -> str:
        return f" {time.strftime('%H:%M', clock())} "
    return render_time


def install(context: 'ModelineContext', clock: Optional[Callable[[], time.struct_time]] = None) -> None:
    """Declare the built-in segments and presets on a context."""
    declare = context.declare_segment

    declare("buffer-info", render_buffer_info, triggers=(
        Events.FILE_OPENED, Events.FILE_SAVED, Events.BUFFER_CHANGED,
        Events.BUFFER_RENAMED, Events.READ_ONLY_CHANGED,
    ))
    declare("buffer-position", render_buffer_position)
    declare("matches", render_matches, triggers=(Events.SEARCH_UPDATED,))
    declare("selection-info", render_selection_info)
    declare("word-count", render_word_count, triggers=(Events.BUFFER_CHANGED, Events.MODE_CHANGED))
    declare("major-mode", render_major_mode, triggers=(Events.MODE_CHANGED,))
    declare("vcs", render_vcs, triggers=(Events.VC_REFRESHED, Events.FILE_SAVED))
    declare("checker", render_checker, triggers=(Events.CHECKER_FINISHED,))
    declare("buffer-encoding", render_buffer_encoding,
            triggers=(Events.ENCODING_CHANGED, Events.FILE_OPENED))
    declare("indent-info", render_indent_info, triggers=(Events.INDENT_CHANGED, Events.MODE_CHANGED))
    declare("remote-host", render_remote_host, triggers=(Events.FILE_OPENED,), styled=False)
    declare("project", render_project, triggers=(Events.FILE_OPENED,))
    declare("buffer-size", render_buffer_size, triggers=(Events.FILE_OPENED, Events.FILE_SAVED))
    declare("time", make_time_renderer(clock or time.localtime))

    preset = context.declare_preset
    preset("main",
           left=("buffer-info", "remote-host", "buffer-position", "word-count", "matches"),
           right=("buffer-encoding", "major-mode", "vcs", "checker"))
    preset("minimal",
           left=("buffer-info", "matches"),
           right=("buffer-position", "major-mode"))
    preset("special",
           left=("buffer-info", "buffer-position", "matches"),
           right=("buffer-size", "buffer-encoding", "major-mode"))
    preset("prog",
           left=("buffer-info", "remote-host", "buffer-position", "matches"),
           right=("indent-info", "buffer-encoding", "major-mode", "vcs", "checker"))
    preset("project",
           left=("project",),
           right=("major-mode",))
    preset("vcs",
           left=("buffer-info", "buffer-position", "matches"),
           right=("major-mode", "vcs"))
    preset("dashboard",
           left=("project",),
           right=("time",))

    bind = context.presets.bind_mode
    bind("dired", "project")
    bind("magit-status", "vcs")
    bind("dashboard", "dashboard")
    bind("help", "special")
    for mode in ("python", "c", "rust", "go", "emacs-lisp"):
        bind(mode, "prog")
