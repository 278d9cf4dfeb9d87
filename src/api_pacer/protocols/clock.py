# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocols for time sources injected into the scheduler and transport."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ClockProtocol(Protocol):
    """Monotonic clock returning seconds, e.g. ``time.monotonic``."""

    def __call__(self) -> float: ...


@runtime_checkable
class SleepProtocol(Protocol):
    """Cooperative delay, e.g. ``asyncio.sleep``."""

    async def __call__(self, delay: float, /) -> None: ...
