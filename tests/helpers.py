"""Shared helpers for bridge tests."""

import asyncio

# Fixed point well before any timestamp the tests create.
EPOCH_WATERMARK = "2026-01-01T00:00:00+00:00"


class ManualClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def settle(rounds: int = 10) -> None:
    """Let scheduled callbacks and freshly created tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


async def flush(service) -> None:
    """Wait for every job the bridge listener has enqueued so far."""
    await settle()
    await service.drain()
    await settle()
