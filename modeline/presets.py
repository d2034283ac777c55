"""Presets: named (left, right) segment layouts, and per-surface format state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

LEFT = "left"
RIGHT = "right"


@dataclass(frozen=True)
class Preset:
    name: str
    left: Tuple[str, ...] = ()
    right: Tuple[str, ...] = ()


@dataclass
class FormatState:
    """Working segment lists of one surface.

    The lists are copies of the preset's, so inserting a segment here
    leaves the preset and every other surface untouched.
    """
    preset: str
    left: List[str] = field(default_factory=list)
    right: List[str] = field(default_factory=list)

    @classmethod
    def from_preset(cls, preset: Preset) -> 'FormatState':
        return cls(preset=preset.name, left=list(preset.left), right=list(preset.right))

    def insert(self, name: str, side: str = LEFT, index: Optional[int] = None) -> bool:
        """Insert a segment into one side; no-op if already present.

        Returns:
            True if the segment was inserted
        """
        if name in self.left or name in self.right:
            return False
        target = self._side(side)
        if index is None or index > len(target):
            target.append(name)
        else:
            target.insert(max(0, index), name)
        return True

    def remove(self, name: str) -> bool:
        """Remove a segment from whichever side holds it."""
        for target in (self.left, self.right):
            if name in target:
                target.remove(name)
                return True
        return False

    def _side(self, side: str) -> List[str]:
        if side == LEFT:
            return self.left
        if side == RIGHT:
            return self.right
        raise ValueError(f"Unknown side: {side}")


class PresetRegistry:
    """Named presets plus an optional major-mode to preset mapping."""

    def __init__(self):
        self._presets: Dict[str, Preset] = {}
        self._modes: Dict[str, str] = {}

    def declare(self, name: str, left: Iterable[str] = (), right: Iterable[str] = ()) -> Preset:
        """Register a preset, replacing any earlier one with the same name."""
        preset = Preset(name=name, left=tuple(left), right=tuple(right))
        if name in self._presets:
            logger.debug(f"Redeclaring preset {name}")
        self._presets[name] = preset
        return preset

    def resolve(self, name: str) -> Optional[Preset]:
        return self._presets.get(name)

    def names(self) -> List[str]:
        return list(self._presets)

    def bind_mode(self, mode: str, preset: str) -> None:
        """Use `preset` for buffers in major mode `mode`."""
        self._modes[mode] = preset

    def preset_for_mode(self, mode: Optional[str], default: str) -> str:
        if mode is None:
            return default
        return self._modes.get(mode, default)

    def __contains__(self, name: object) -> bool:
        return name in self._presets
