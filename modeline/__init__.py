"""Modeline - segment-based status lines for text editors."""

from .context import ModelineContext
from .events import EventSource, Events
from .presets import FormatState, Preset, PresetRegistry
from .segments import Segment, SegmentContext, SegmentRegistry
from .settings import ModelineSettings
from .state import Buffer, Scope, Surface

__all__ = [
    'ModelineContext',
    'EventSource',
    'Events',
    'FormatState',
    'Preset',
    'PresetRegistry',
    'Segment',
    'SegmentContext',
    'SegmentRegistry',
    'ModelineSettings',
    'Buffer',
    'Scope',
    'Surface',
]
