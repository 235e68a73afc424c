"""Watermark-driven poller that pulls remote changes into MC."""

from typing import Any, Dict, Optional
import asyncio
import logging

from ..core.exceptions import RemoteStoreError
from ..core.models import BRIDGE_SOURCE, PollStats
from ..utils.date import is_after, utc_now_iso
from .engine import SyncEngine


class RemotePoller:
    """Recurring pull of remote tasks changed since the last successful batch.

    The watermark lives in memory only and starts at construction time, so
    remote edits made while the process was down are missed unless they are
    touched again. Ticks never overlap: a tick that finds another one in
    flight reports zeros instead of queueing.
    """

    def __init__(
        self,
        engine: SyncEngine,
        interval: float = 30.0,
        batch_size: int = 50,
        watermark: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.engine = engine
        self.interval = interval
        self.batch_size = batch_size
        self.watermark = watermark or utc_now_iso()
        self.logger = logger or logging.getLogger(__name__)
        self.last_run_at: Optional[str] = None
        self._in_flight = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def _advance(self, candidate: Optional[str]) -> None:
        if candidate and is_after(candidate, self.watermark):
            self.watermark = candidate

    async def poll(self) -> PollStats:
        """Run one poll cycle and return its counts."""
        if not self.engine.configured or self._in_flight:
            return PollStats()
        self._in_flight = True

        stats = PollStats()
        try:
            try:
                tasks = await self.engine.remote.fetch_changed_since(
                    self.watermark, exclude_source=BRIDGE_SOURCE, limit=self.batch_size
                )
            except RemoteStoreError as e:
                self.logger.error(f"Remote query error: {e.message}")
                return PollStats(errors=1)

            if not tasks:
                return stats

            stats.polled = len(tasks)
            self.logger.info(f"Found {stats.polled} updated CRM tasks since {self.watermark}")

            for remote in tasks:
                result = await self.engine.pull_task(remote)
                if result.success and not result.skipped:
                    stats.synced += 1
                if not result.success:
                    stats.errors += 1

            self._advance(tasks[-1].updated_at)
        except Exception as e:
            self.logger.error(f"Poll error: {e}")
            stats.errors += 1
        finally:
            self.last_run_at = utc_now_iso()
            self._in_flight = False

        return stats

    async def _run(self) -> None:
        await self.poll()
        while True:
            await asyncio.sleep(self.interval)
            await self.poll()

    def start(self) -> None:
        """Schedule an immediate poll, then one every ``interval`` seconds.

        Must be called with an event loop running.
        """
        if self.running:
            return
        if not self.engine.configured:
            self.logger.info("Supabase not configured, poller disabled")
            return

        self.logger.info(f"Starting - polling every {self.interval:g}s")
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self.logger.info("Stopped")

    def status(self) -> Dict[str, Any]:
        return {
            "running": self.running,
            "last_poll_time": self.watermark,
            "last_run_at": self.last_run_at,
        }
