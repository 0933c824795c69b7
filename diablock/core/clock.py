"""Simulation clock for Diablock.

Drives a GameSession at a fixed interval on an asyncio task. Each tick
runs synchronously inside the event loop, so commands issued from other
coroutines always land between two ticks. A failing tick or tick listener
is logged and the loop carries on.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from diablock.core.session import GameSession

logger = logging.getLogger(__name__)

TickListener = Callable[[List[Dict[str, Any]]], None]


class SimulationClock:
    """
    Fixed-interval tick driver.

    Usage:
        clock = SimulationClock(session)
        await clock.start()
        ...
        clock.pause()
        await clock.step()
        await clock.stop()
    """

    def __init__(
        self,
        session: "GameSession",
        interval_ms: Optional[int] = None,
        on_tick: Optional[TickListener] = None,
    ):
        self.session = session
        self.interval_ms = interval_ms or session.config.tick_interval_ms
        self.on_tick = on_tick
        self._task: Optional[asyncio.Task] = None
        self._paused = False

    @property
    def interval(self) -> float:
        """Seconds between ticks."""
        return self.interval_ms / 1000.0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def paused(self) -> bool:
        return self._paused

    # -- lifecycle --

    async def start(self) -> None:
        if self.running:
            return
        self._paused = False
        self._task = asyncio.create_task(self._run(), name=f"clock-{self.session.id}")
        logger.info("Clock for session %s started (interval=%dms)", self.session.id, self.interval_ms)

    def pause(self) -> None:
        self._paused = True
        logger.debug("Clock for session %s paused at tick %d", self.session.id, self.session.world.tick)

    def resume(self) -> None:
        self._paused = False
        logger.debug("Clock for session %s resumed at tick %d", self.session.id, self.session.world.tick)

    async def step(self, count: int = 1) -> List[Dict[str, Any]]:
        """Execute ``count`` ticks now. A running clock is paused first."""
        if self.running and not self._paused:
            self.pause()
        return self._advance(count)

    async def stop(self) -> None:
        """Cancel the tick task and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Clock for session %s stopped at tick %d", self.session.id, self.session.world.tick)

    # -- internals --

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if self._paused:
                continue
            try:
                self._advance(1)
            except Exception:
                logger.exception(
                    "Tick failed for session %s at tick %d", self.session.id, self.session.world.tick
                )

    def _advance(self, count: int) -> List[Dict[str, Any]]:
        events = self.session.tick(count)
        if self.on_tick is not None and events:
            try:
                self.on_tick(events)
            except Exception:
                logger.exception("Tick listener failed for session %s", self.session.id)
        return events
