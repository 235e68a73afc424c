"""Time-windowed echo suppression for the sync bridge.

A write received from one side re-emits a change on the other side. The
guard remembers which records were just synchronized so that the echo is
reported as ``skipped`` instead of being written back to its origin.
"""

from typing import Callable, Dict, Optional
import asyncio
import logging
import time


PUSH_DIRECTION = "mc-to-crm"
PULL_DIRECTION = "crm-to-mc"

DEFAULT_WINDOW = 30.0
DEFAULT_SWEEP_INTERVAL = 60.0


def dedup_key(direction: str, record_id: str) -> str:
    """Build a direction-tagged key so push and pull ids never collide."""
    return f"{direction}:{record_id}"


class DedupGuard:
    """Set of recently synchronized keys that expire after ``window`` seconds."""

    def __init__(
        self,
        window: float = DEFAULT_WINDOW,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        self.window = window
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._entries: Dict[str, float] = {}
        self.logger = logger or logging.getLogger(__name__)

    def __len__(self) -> int:
        return len(self._entries)

    def mark(self, key: str) -> None:
        self._entries[key] = self._clock()

    def was_recent(self, key: str) -> bool:
        """True iff ``key`` was marked within the window; evicts it if expired."""
        marked_at = self._entries.get(key)
        if marked_at is None:
            return False
        if self._clock() - marked_at > self.window:
            del self._entries[key]
            return False
        return True

    def sweep(self) -> int:
        """Evict every expired entry and return how many were removed."""
        now = self._clock()
        expired = [key for key, marked_at in self._entries.items() if now - marked_at > self.window]
        for key in expired:
            del self._entries[key]
        if expired:
            self.logger.debug(f"Dedup sweep evicted {len(expired)} entries")
        return len(expired)

    def discard(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    async def run_sweeper(self) -> None:
        """Sweep forever at ``sweep_interval``; cancel the task to stop."""
        while True:
            await asyncio.sleep(self.sweep_interval)
            self.sweep()
