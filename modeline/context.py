"""The modeline context: one explicitly owned object per application.

It owns the segment and preset registries, the cache, the focus tracker,
the bar and the assembler, plus the surfaces and buffers the host has
announced. The host creates it at startup, forwards events to it, asks it
to redraw, and shuts it down on exit.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterable, Optional

import blessed

from . import builtin
from .assembler import FormatAssembler
from .bar import Bar
from .cache import SegmentCache
from .events import EventSource, Events
from .focus import FocusTracker
from .presets import LEFT, FormatState, Preset, PresetRegistry
from .segments import RenderFunction, Segment, SegmentContext, SegmentRegistry
from .settings import ModelineSettings
from .settings_persistence import SettingsPersistence, get_persistence
from .state import Buffer, Scope, Surface

logger = logging.getLogger(__name__)

SELECTION_SEGMENT = "selection-info"


class ModelineContext:
    """Wires the modeline components together for one application."""

    def __init__(
        self,
        settings: Optional[ModelineSettings] = None,
        term: Optional[blessed.Terminal] = None,
        measure: Optional[Callable[[str], int]] = None,
        install_builtins: bool = True,
        clock: Optional[Callable[[], time.struct_time]] = None,
    ):
        self.settings = settings or ModelineSettings()
        self.term = term or blessed.Terminal()
        self.events = EventSource()
        self.segments = SegmentRegistry()
        self.presets = PresetRegistry()
        self.focus = FocusTracker()
        self.surfaces: Dict[str, Surface] = {}
        self.buffers: Dict[str, Buffer] = {}
        self.formats: Dict[str, FormatState] = {}
        self.cache = SegmentCache(self.segments, self._segment_context, self.events)
        self.bar = Bar(self.term, **self._bar_options(self.settings))
        self.assembler = FormatAssembler(
            self.segments,
            self.cache,
            self.focus,
            self.formats,
            self.bar,
            settings=self.settings,
            term=self.term,
            measure=measure,
        )
        self.running = False
        self.focus.add_listener(self._on_focus_changed)
        if install_builtins:
            builtin.install(self, clock=clock)

    @classmethod
    def from_persistence(
        cls,
        persistence: Optional[SettingsPersistence] = None,
        **kwargs: Any,
    ) -> 'ModelineContext':
        """Build a context from saved settings, presets and mode bindings."""
        persistence = persistence or get_persistence()
        settings = ModelineSettings.from_dict(persistence.load_settings())
        context = cls(settings=settings, **kwargs)
        for name, layout in persistence.load_presets().items():
            context.declare_preset(name, layout.get('left', ()), layout.get('right', ()))
        for mode, preset in persistence.load_mode_presets().items():
            context.presets.bind_mode(mode, preset)
        return context

    # Lifecycle

    def start(self) -> None:
        """Subscribe to the host events the context reacts to."""
        if self.running:
            return
        self.cache.open()
        self.events.subscribe(Events.SELECTION_CHANGED, self._on_selection_changed)
        self.events.subscribe(Events.MODE_CHANGED, self._on_mode_changed)
        self.running = True

    def shutdown(self) -> None:
        """Drop all state and unsubscribe everything."""
        self.events.unsubscribe(Events.SELECTION_CHANGED, self._on_selection_changed)
        self.events.unsubscribe(Events.MODE_CHANGED, self._on_mode_changed)
        self.cache.close()
        self.cache.clear()
        self.focus.application_focus_out()
        self.surfaces.clear()
        self.buffers.clear()
        self.formats.clear()
        self.running = False

    def __enter__(self) -> 'ModelineContext':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # Registration

    def declare_segment(
        self,
        name: str,
        render: RenderFunction,
        triggers: Iterable[str] = (),
        init_value: Optional[str] = None,
        styled: bool = True,
    ) -> Segment:
        return self.segments.declare(name, render, triggers=triggers, init_value=init_value, styled=styled)

    def declare_preset(self, name: str, left: Iterable[str] = (), right: Iterable[str] = ()) -> Preset:
        return self.presets.declare(name, left, right)

    # Surfaces and buffers

    def add_surface(self, surface: Surface, preset: Optional[str] = None) -> None:
        """Announce a new surface and give it a preset."""
        self.surfaces[surface.id] = surface
        if surface.buffer is not None:
            self.buffers[surface.buffer.id] = surface.buffer
        name = preset or self._preset_for(surface.buffer)
        if not self.assign_preset(surface.id, name):
            self.assign_preset(surface.id, self.settings.default_preset)

    def remove_surface(self, surface_id: str) -> None:
        """Forget a destroyed surface and every cache entry it owned."""
        self.surfaces.pop(surface_id, None)
        self.formats.pop(surface_id, None)
        self.cache.drop_scope(surface=surface_id)
        self.focus.forget(surface_id)

    def show_buffer(self, surface_id: str, buffer: Buffer) -> None:
        """Switch the buffer displayed in a surface."""
        surface = self.surfaces.get(surface_id)
        if surface is None:
            logger.warning(f"show_buffer: unknown surface {surface_id}")
            return
        old_scope = surface.scope
        surface.buffer = buffer
        self.buffers[buffer.id] = buffer
        self.cache.drop_scope(surface=old_scope.surface, buffer=old_scope.buffer)
        if self.settings.auto_presets:
            self._reassign_for_mode(surface)

    def remove_buffer(self, buffer_id: str) -> None:
        """Forget a killed buffer; surfaces that showed it become empty."""
        self.buffers.pop(buffer_id, None)
        self.cache.drop_scope(buffer=buffer_id)
        for surface in self.surfaces.values():
            if surface.buffer is not None and surface.buffer.id == buffer_id:
                surface.buffer = None

    def assign_preset(self, surface_id: str, name: str) -> bool:
        """Give a surface the layout of a preset.

        Returns:
            False (and keeps the current layout) if the surface or the
            preset is unknown
        """
        if surface_id not in self.surfaces:
            logger.warning(f"Cannot assign preset {name}: unknown surface {surface_id}")
            return False
        preset = self.presets.resolve(name)
        if preset is None:
            logger.warning(f"Unknown preset {name} for surface {surface_id}")
            return False
        self.formats[surface_id] = FormatState.from_preset(preset)
        self._sync_selection(surface_id)
        return True

    # Focus

    def enter_surface(self, surface_id: str) -> bool:
        surface = self.surfaces.get(surface_id)
        return surface is not None and self.focus.surface_entered(surface)

    def window_configuration_changed(self, selected_id: str) -> bool:
        surface = self.surfaces.get(selected_id)
        return surface is not None and self.focus.window_configuration_changed(surface)

    def application_focus_out(self) -> bool:
        return self.focus.application_focus_out()

    def application_focus_in(self, selected_id: Optional[str]) -> bool:
        surface = self.surfaces.get(selected_id) if selected_id is not None else None
        return self.focus.application_focus_in(surface)

    # Events and rendering

    def emit(self, event: str, surface: Optional[str] = None, buffer: Optional[str] = None,
             **kwargs: Any) -> int:
        """Forward a host event to every subscriber."""
        return self.events.emit(event, surface=surface, buffer=buffer, **kwargs)

    def render(self, surface_id: str) -> str:
        """Render one surface's status line without starting a new pass."""
        surface = self.surfaces.get(surface_id)
        if surface is None:
            return ""
        return self.assembler.render(surface)

    def redraw(self) -> Dict[str, str]:
        """Start a redraw pass and render every non-transient surface.

        Cache scopes left behind by surfaces or buffers the host swapped out
        directly are pruned first.
        """
        self.cache.prune()
        self.cache.tick()
        return {
            surface.id: self.assembler.render(surface)
            for surface in self.surfaces.values()
            if not surface.transient
        }

    def apply_settings(self, settings: ModelineSettings) -> None:
        """Switch to new settings; the bar regenerates if its options changed."""
        self.settings = settings
        self.assembler.settings = settings
        self.bar.configure(**self._bar_options(settings))
        self.cache.refresh()

    # Internals

    @staticmethod
    def _bar_options(settings: ModelineSettings) -> Dict[str, Any]:
        return {
            'width': settings.bar_width,
            'height': settings.bar_height,
            'position': settings.bar_position,
            'visible': settings.bar_visible,
            'active_color': settings.bar_active_color,
            'inactive_color': settings.bar_inactive_color,
        }

    def _segment_context(self, scope: Scope) -> Optional[SegmentContext]:
        surface = self.surfaces.get(scope.surface)
        if surface is None or surface.scope != scope:
            return None
        return SegmentContext(
            surface=surface,
            buffer=surface.buffer,
            active=self.focus.is_active(surface.id),
            settings=self.settings,
        )

    def _preset_for(self, buffer: Optional[Buffer]) -> str:
        default = self.settings.default_preset
        if buffer is None or not self.settings.auto_presets:
            return default
        return self.presets.preset_for_mode(buffer.mode, default)

    def _reassign_for_mode(self, surface: Surface) -> None:
        name = self._preset_for(surface.buffer)
        state = self.formats.get(surface.id)
        if state is None or state.preset != name:
            self.assign_preset(surface.id, name)

    def _surfaces_showing(self, buffer_id: Optional[str]):
        for surface in self.surfaces.values():
            if surface.buffer is not None and (buffer_id is None or surface.buffer.id == buffer_id):
                yield surface

    def _sync_selection(self, surface_id: Optional[str]) -> None:
        """Show selection-info on the focused surface while it has a selection."""
        if surface_id is None:
            return
        state = self.formats.get(surface_id)
        surface = self.surfaces.get(surface_id)
        if state is None or surface is None:
            return
        preset = self.presets.resolve(state.preset)
        if preset is not None and (SELECTION_SEGMENT in preset.left or SELECTION_SEGMENT in preset.right):
            return
        selecting = (
            surface.buffer is not None
            and surface.buffer.has_selection
            and self.focus.is_active(surface_id)
        )
        if selecting:
            state.insert(SELECTION_SEGMENT, LEFT, 1)
        else:
            state.remove(SELECTION_SEGMENT)

    def _on_selection_changed(self, event: str, surface: Optional[str] = None,
                              buffer: Optional[str] = None, **kwargs: Any) -> None:
        if surface is not None:
            self._sync_selection(surface)
            return
        for shown in list(self._surfaces_showing(buffer)):
            self._sync_selection(shown.id)

    def _on_mode_changed(self, event: str, surface: Optional[str] = None,
                         buffer: Optional[str] = None, **kwargs: Any) -> None:
        if not self.settings.auto_presets:
            return
        for shown in list(self._surfaces_showing(buffer)):
            if surface is None or shown.id == surface:
                self._reassign_for_mode(shown)

    def _on_focus_changed(self, previous: Optional[str], current: Optional[str]) -> None:
        for surface_id in (previous, current):
            if surface_id is not None:
                self.cache.invalidate_volatile(surface=surface_id)
                self._sync_selection(surface_id)
        self.events.emit(Events.FOCUS_CHANGED, previous=previous, current=current)
