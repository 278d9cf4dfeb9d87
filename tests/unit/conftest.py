"""
Shared fixtures for the unit test suite.

FakeClock replaces both the clock and the sleep primitive of the scheduler
and the transport. Sleeping coroutines only resume when a test advances the
clock, so rolling windows, pauses and backoff run in simulated time.
"""

import asyncio

import pytest

from api_pacer.scheduler import Scheduler


async def settle(rounds: int = 100) -> None:
    """Let every ready task run until the loop goes quiet."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeClock:
    """Manually advanced clock with a matching async sleep."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []
        self._waiters: list[tuple[float, asyncio.Future[None]]] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append((self.now + delay, future))
        await future

    async def advance(self, seconds: float) -> None:
        """Move time forward, waking sleepers in deadline order."""
        target = self.now + seconds
        while True:
            await settle()
            due = [w for w in self._waiters if w[0] <= target]
            if not due:
                break
            deadline, future = min(due, key=lambda w: w[0])
            self._waiters.remove((deadline, future))
            self.now = max(self.now, deadline)
            if not future.done():
                future.set_result(None)
        self.now = target
        await settle()


@pytest.fixture
def clock():
    """Create a fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    """Create a scheduler with the default budget table on the fake clock."""
    return Scheduler(clock=clock, sleep=clock.sleep)
