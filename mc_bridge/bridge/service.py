"""Process-wide bridge service: lifecycle, outbound queue and admin surface."""

from typing import Any, Awaitable, Callable, Dict, List, Optional
import asyncio
import logging
import time

import httpx

from ..core.config import BridgeConfig
from ..core.models import PollStats, RemoteTask, SyncResult
from ..events import EventBroadcaster
from ..stores.local import LocalTaskStore
from ..stores.remote import RemoteTaskStore
from .dedup import DedupGuard
from .engine import NOT_CONFIGURED, SyncEngine
from .health import build_health_report
from .listener import BridgeEventListener
from .poller import RemotePoller


Job = Callable[[], Awaitable[Any]]


class BridgeService:
    """Owns every piece of mutable bridge state for one process.

    Construct one per process (or per test) and attach it to the local
    broadcaster. Nothing starts until the first change event arrives; if the
    remote store is not configured at that point the bridge stays inert for
    the life of the service.
    """

    def __init__(
        self,
        config: BridgeConfig,
        local_store: LocalTaskStore,
        remote_store: Optional[RemoteTaskStore] = None,
        clock: Callable[[], float] = time.monotonic,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.local = local_store
        self.logger = logger or logging.getLogger(__name__)

        if remote_store is None and config.is_configured:
            remote_store = RemoteTaskStore(config, transport=transport, logger=self.logger)
        self.remote = remote_store

        self.dedup = DedupGuard(
            window=config.dedup_window,
            sweep_interval=config.dedup_sweep_interval,
            clock=clock,
            logger=self.logger,
        )
        self.engine = SyncEngine(config, local_store, self.remote, self.dedup, logger=self.logger)
        self.poller = RemotePoller(
            self.engine,
            interval=config.poll_interval,
            batch_size=config.poll_batch_size,
            logger=self.logger,
        )
        self.listener = BridgeEventListener(self, logger=self.logger)

        self._initialized = False
        self._active = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None
        self._background: List[asyncio.Task] = []

    @property
    def configured(self) -> bool:
        return self.engine.configured

    @property
    def active(self) -> bool:
        return self._active

    def attach(self, broadcaster: EventBroadcaster) -> None:
        """Subscribe the bridge to local change events (idempotent)."""
        broadcaster.subscribe(self.listener)

    # ------------------------------------------------------------------
    # Lifecycle

    def ensure_initialized(self) -> None:
        """Activate the bridge once; later calls are no-ops."""
        if self._initialized:
            return

        if not self.configured:
            self._initialized = True
            self.logger.info("Not configured - bridge disabled")
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.logger.warning("No running event loop; bridge activation deferred")
            return

        self._initialized = True
        self._loop = loop
        self._queue = asyncio.Queue()
        self._active = True
        self.logger.info("Initializing - starting CRM poller")

        for index in range(max(1, self.config.push_workers)):
            self._background.append(loop.create_task(self._worker(index)))
        self._background.append(loop.create_task(self.dedup.run_sweeper()))
        self.poller.start()

    def submit(self, job: Job) -> None:
        """Enqueue ``job`` without waiting; safe from any thread."""
        if not self._active or self._loop is None:
            self.logger.debug("Bridge inactive, dropping job")
            return
        self._loop.call_soon_threadsafe(self._queue.put_nowait, job)

    async def _worker(self, index: int) -> None:
        while True:
            job = await self._queue.get()
            try:
                await job()
            except Exception as e:
                self.logger.error(f"Bridge worker {index} job failed: {e}")
            finally:
                self._queue.task_done()

    async def drain(self) -> None:
        """Wait until every queued job has run."""
        if self._queue is not None:
            await self._queue.join()

    async def shutdown(self) -> None:
        await self.poller.stop()
        for task in self._background:
            task.cancel()
        for task in self._background:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._background = []
        self._active = False
        if self.remote is not None:
            await self.remote.aclose()

    # ------------------------------------------------------------------
    # Administrative surface

    def status(self) -> Dict[str, Any]:
        poller = self.poller.status()
        return {
            "configured": self.configured,
            "connected": self.remote is not None,
            "active": self._active,
            "poller_running": poller["running"],
            "last_poll_time": poller["last_poll_time"],
            "last_run_at": poller["last_run_at"],
            "dedup_cache_size": len(self.dedup),
            "queue_depth": self._queue.qsize() if self._queue is not None else 0,
        }

    async def health(self) -> Dict[str, Any]:
        return await build_health_report(self)

    async def trigger_poll(self) -> PollStats:
        return await self.poller.poll()

    async def trigger_push(self, task_id: str) -> SyncResult:
        if not self.configured:
            return SyncResult(success=False, error=NOT_CONFIGURED)
        task = self.local.get_task(task_id)
        if task is None:
            return SyncResult(success=False, error="Task not found in MC")
        return await self.engine.push_task(task)

    async def trigger_pull(self, record: Dict[str, Any]) -> SyncResult:
        """Sync one remote record given as a raw row."""
        if not record or not record.get("id") or not record.get("title"):
            return SyncResult(success=False, error="task.id and task.title are required")
        return await self.engine.pull_task(RemoteTask.from_dict(record))
