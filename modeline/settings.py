"""Typed modeline settings."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Tuple

from .constants import ModelineConstants


@dataclass
class ModelineSettings:
    """User-tunable behaviour of the modeline.

    Attributes:
        bar_width: Columns taken by the bar decoration
        bar_height: Rows the bar bitmap spans
        bar_position: "start" or "end" of the line
        bar_visible: Whether the bar is drawn at all
        bar_active_color: Bar colour on the focused surface
        bar_inactive_color: Bar colour on other surfaces
        active_face: Face for styled segments on the focused surface
        inactive_face: Face for styled segments elsewhere
        icons: Use icon glyphs instead of plain-text markers
        buffer_file_name_style: How buffer-info names the buffer
        hide_default_encoding: Hide buffer-encoding for utf-8 + LF buffers
        word_count_modes: Major modes that show a word count
        auto_presets: Reassign presets when a buffer's major mode changes
        default_preset: Preset used for new surfaces
    """
    bar_width: int = ModelineConstants.BAR_WIDTH
    bar_height: int = ModelineConstants.BAR_HEIGHT
    bar_position: str = ModelineConstants.BAR_POSITION
    bar_visible: bool = True
    bar_active_color: str = ModelineConstants.BAR_ACTIVE_COLOR
    bar_inactive_color: str = ModelineConstants.BAR_INACTIVE_COLOR
    active_face: str = ModelineConstants.ACTIVE_FACE
    inactive_face: str = ModelineConstants.INACTIVE_FACE
    icons: bool = True
    buffer_file_name_style: str = ModelineConstants.DEFAULT_BUFFER_FILE_NAME_STYLE
    hide_default_encoding: bool = True
    word_count_modes: Tuple[str, ...] = field(
        default_factory=lambda: ModelineConstants.WORD_COUNT_MODES
    )
    auto_presets: bool = True
    default_preset: str = ModelineConstants.DEFAULT_PRESET

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ModelineSettings':
        """Build settings from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if 'word_count_modes' in values:
            values['word_count_modes'] = tuple(values['word_count_modes'])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['word_count_modes'] = list(self.word_count_modes)
        return data
