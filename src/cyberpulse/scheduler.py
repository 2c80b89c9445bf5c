"""
Animation lifecycle.

``AnimationScheduler`` arms one tick at a time on an external tick
source, runs the full render pass when it fires, and re-arms itself
while running. Resize and pointer input are staged and only become
visible at the start of the next tick.
"""

import enum
import itertools
import logging
from typing import Callable, Protocol

from cyberpulse.core.sampler import SpectrumSource
from cyberpulse.errors import SurfaceUnavailable
from cyberpulse.renderer import FrameContext, FrameRenderer, RenderState
from cyberpulse.surface import DrawingSurface

logger = logging.getLogger(__name__)


class TickSource(Protocol):
    """External frame clock (display refresh or a test driver)."""

    def request(self, callback: Callable[[], None]) -> int: ...

    def cancel(self, handle: int) -> None: ...


class FrameClock:
    """
    Tick source driven explicitly by the host loop.

    ``request`` arms a callback for the next ``fire``; callbacks armed
    while firing wait for the following one.
    """

    def __init__(self):
        self._pending: dict[int, Callable[[], None]] = {}
        self._ids = itertools.count(1)

    def request(self, callback: Callable[[], None]) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int):
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def fire(self) -> int:
        """Run every callback armed before this call. Returns how many ran."""
        due = self._pending
        self._pending = {}
        for callback in due.values():
            callback()
        return len(due)


class SchedulerState(enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class AnimationScheduler:
    """
    Owns the per-session RenderState and the Stopped/Running lifecycle.

    Args:
        renderer: Frame renderer to invoke on each tick.
        surface: Target drawing surface.
        tick_source: Clock that invokes armed callbacks.
        is_playing: Polled once per tick; False samples silence.
        source: Initial spectrum source, may be attached later.
    """

    def __init__(
        self,
        renderer: FrameRenderer,
        surface: DrawingSurface | None,
        tick_source: TickSource,
        is_playing: Callable[[], bool] = lambda: False,
        source: SpectrumSource | None = None,
    ):
        self.renderer = renderer
        self.surface = surface
        self.tick_source = tick_source
        self.is_playing = is_playing
        self.source = source

        self.state = SchedulerState.STOPPED
        self.render_state: RenderState | None = None
        self.context: FrameContext | None = None
        self.ticks = 0

        self._handle: int | None = None
        self._session = 0
        self._pending_size: tuple[int, int] | None = None
        self._pending_pointer: tuple[float, float] | None = None
        self._pointer = (0.0, 0.0)

    @property
    def running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    # --- Lifecycle ---

    def start(self):
        """
        Transition to Running and arm the first tick.

        Raises:
            SurfaceUnavailable: If there is no surface or it is not ready.
        """
        if self.running:
            return
        if self.surface is None or not self.surface.ready:
            raise SurfaceUnavailable("Drawing surface is not ready; cannot start animation")

        width, height = self._pending_size or self.surface.size
        self._pending_size = None
        if self.surface.size != (width, height):
            self.surface.resize(width, height)

        self.context = FrameContext(width, height, self._pointer)
        self.render_state = self.renderer.new_state(width, height)
        self.state = SchedulerState.RUNNING
        self._session += 1
        logger.info("Animation started at %dx%d", width, height)
        self._arm()

    def stop(self):
        """Cancel the armed tick; no render pass runs after this returns."""
        if not self.running:
            return
        self.state = SchedulerState.STOPPED
        self._session += 1
        if self._handle is not None:
            self.tick_source.cancel(self._handle)
            self._handle = None
        logger.info("Animation stopped after %d ticks", self.ticks)

    def _arm(self):
        # Ticks from an earlier session are ignored even if already dispatched
        session = self._session
        self._handle = self.tick_source.request(lambda: self._tick(session))

    # --- Input staging ---

    def on_resize(self, width: int, height: int):
        """Stage new canvas bounds for the next tick."""
        if width <= 0 or height <= 0:
            logger.warning("Ignoring resize to %dx%d", width, height)
            return
        self._pending_size = (int(width), int(height))

    def set_pointer_offset(self, dx: float, dy: float):
        """Stage a pointer offset, clamped to the configured range."""
        limit = self.renderer.cfg.pointer_range
        self._pending_pointer = (
            min(limit, max(-limit, dx)),
            min(limit, max(-limit, dy)),
        )

    def on_pointer(self, x: float, y: float, window_width: int, window_height: int):
        """Convert a window pointer position to a centered offset and stage it."""
        if window_width <= 0 or window_height <= 0:
            return
        span = self.renderer.cfg.pointer_range * 2.0
        self.set_pointer_offset(
            (x / window_width - 0.5) * span,
            (y / window_height - 0.5) * span,
        )

    def attach_source(self, source: SpectrumSource):
        self.source = source

    def detach_source(self):
        self.source = None

    # --- Tick ---

    def _apply_pending(self) -> FrameContext:
        width, height = self.context.width, self.context.height
        if self._pending_size is not None:
            width, height = self._pending_size
            self._pending_size = None
            self.surface.resize(width, height)
            logger.debug("Applied resize %dx%d", width, height)
        if self._pending_pointer is not None:
            self._pointer = self._pending_pointer
            self._pending_pointer = None
        return FrameContext(width, height, self._pointer)

    def _tick(self, session: int):
        if session != self._session or not self.running:
            return
        self._handle = None

        self.context = self._apply_pending()
        self.renderer.render(
            self.render_state,
            self.source,
            bool(self.is_playing()),
            self.context,
            self.surface,
        )
        self.ticks += 1

        if self.running and session == self._session:
            self._arm()
