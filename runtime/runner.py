import asyncio
import logging
from typing import List

from engine.config import ROUND_MS, TIME_COMPRESSION
from engine.engine import Engine
from engine.model import Event, State
from .eventlog import EventLog

log = logging.getLogger(__name__)


class RoundRunner:
    """Async driver that plays one combat round per tick until the battle is decided."""

    def __init__(self, engine: Engine, round_ms: int = ROUND_MS,
                 time_compression: float = TIME_COMPRESSION):
        self.engine = engine
        self.round_ms = round_ms
        self.time_compression = time_compression
        self.sleep_s = self._pause(time_compression)
        self.events = EventLog()
        self._task: asyncio.Task | None = None
        self._lock = asyncio.Lock()

    def _pause(self, time_compression: float) -> float:
        return (self.round_ms / 1000.0) / max(1.0, time_compression)

    @property
    def finished(self) -> bool:
        """A faction was wiped out, or the battle stalled."""
        return not self.engine.running

    async def start(self):
        """Begin playing rounds in the background; a no-op if already playing."""
        if self._task:
            return
        self._task = asyncio.create_task(self._play())

    async def stop(self):
        """Abandon the battle wherever it stands."""
        if not self._task:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def wait_finished(self):
        """Block until the battle is decided."""
        if self._task:
            await asyncio.shield(self._task)

    async def _play(self):
        """One engine round per tick, logged; exits once the engine stops running."""
        while not self.finished:
            async with self._lock:
                evts: List[Event] = self.engine.step()
            self.events.append_many(evts)
            if self.finished:
                break
            await asyncio.sleep(self.sleep_s)
        log.info("Battle over after %d rounds (%s, %d events)",
                 self.engine.state.rounds, self.engine.phase.value, len(self.events))

    async def snapshot(self) -> State:
        """Board and units as of the last completed round."""
        async with self._lock:
            return self.engine.snapshot()

    def set_time_compression(self, time_compression: float):
        """Replay speed: 1.0 plays one round per round_ms, higher plays faster."""
        self.time_compression = max(0.1, min(1000.0, time_compression))
        self.sleep_s = self._pause(self.time_compression)
        log.info("Playing rounds at %sx (%.4fs between rounds)", self.time_compression, self.sleep_s)
