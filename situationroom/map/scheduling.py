"""Cooperative scheduling primitives for the map layer: debounce and pulse.

Both run as asyncio tasks on the single application event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

from config.defaults import PULSE_AMPLITUDE, PULSE_FRAME_INTERVAL, PULSE_PHASE_STEP
from situationroom.map.styles import marker_radius_expression
from situationroom.map.surface import MapSurface

logger = logging.getLogger(__name__)


class Debouncer:
    """Collapses bursts of trigger() calls into one callback after ``delay``.

    Each trigger restarts the window. Only the waiting phase is cancellable:
    once the window elapses the callback runs, and later triggers start a new
    window without touching work the callback already started.

    Args:
        delay: Quiet period in seconds.
        callback: Zero-argument callable run when the window elapses.
    """

    def __init__(self, delay: float, callback: Callable[[], Any]) -> None:
        self.delay = delay
        self._callback = callback
        self._task: Optional[asyncio.Task] = None
        self.fire_count = 0

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._wait())

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait for the pending window (if any) to elapse or be cancelled."""
        if self._task is not None:
            await asyncio.wait({self._task})

    async def _wait(self) -> None:
        await asyncio.sleep(self.delay)
        self._task = None
        self.fire_count += 1
        self._callback()


class PulseAnimation:
    """Repeating task that oscillates a circle layer's radius.

    The animation is bound to one incarnation of a layer: each tick checks
    that the surface still holds that same layer object and stops otherwise,
    so removing or replacing the layer ends the task without outside help.

    Args:
        surface: Map surface holding the layer.
        layer_id: Id of the layer to animate (must exist at construction).
        step: Phase increment per frame (radians).
        amplitude: Radius oscillation in pixels.
        frame_interval: Seconds between frames.
    """

    def __init__(
        self,
        surface: MapSurface,
        layer_id: str,
        step: float = PULSE_PHASE_STEP,
        amplitude: float = PULSE_AMPLITUDE,
        frame_interval: float = PULSE_FRAME_INTERVAL,
    ) -> None:
        self._surface = surface
        self.layer_id = layer_id
        self._layer = surface.get_layer(layer_id)
        self.step = step
        self.amplitude = amplitude
        self.frame_interval = frame_interval
        self.phase = 0.0
        self.frames = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def owns_layer(self) -> bool:
        layer = self._surface.get_layer(self.layer_id)
        return layer is not None and layer is self._layer

    def start(self) -> "PulseAnimation":
        if not self.running:
            self._task = asyncio.get_running_loop().create_task(self._run())
        return self

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        """Wait for the task to end (after stop() or self-termination)."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    def tick(self) -> bool:
        """Advance one frame. Returns False when the owning layer is gone."""
        if not self.owns_layer():
            return False
        self.phase += self.step
        self._surface.set_paint_property(
            self.layer_id,
            "circle-radius",
            marker_radius_expression(self.phase, self.amplitude),
        )
        self.frames += 1
        return True

    async def _run(self) -> None:
        while self.tick():
            await asyncio.sleep(self.frame_interval)
        logger.debug("Pulse on %s stopped after %d frames", self.layer_id, self.frames)
