# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Rolling per-method admission window."""

from collections import deque


class MethodWindow:
    """
    Admission timestamps for one method over a trailing window.

    A timestamp ``t`` belongs to the window at ``now`` when
    ``now - window_seconds < t <= now``. Older entries are pruned lazily
    whenever the window is inspected or written.
    """

    def __init__(self, method: str, window_seconds: float = 60.0) -> None:
        self.method = method
        self.window_seconds = window_seconds
        self._timestamps: deque[float] = deque()

    def __len__(self) -> int:
        return len(self._timestamps)

    def prune(self, now: float) -> None:
        """Drop timestamps that have left the window."""
        cutoff = now - self.window_seconds
        while self._timestamps and self._timestamps[0] <= cutoff:
            self._timestamps.popleft()

    def count(self, now: float) -> int:
        self.prune(now)
        return len(self._timestamps)

    def peek_count(self, now: float) -> int:
        """Count admissions in the window at ``now`` without pruning."""
        cutoff = now - self.window_seconds
        return sum(1 for t in self._timestamps if t > cutoff)

    def record(self, now: float) -> None:
        self.prune(now)
        self._timestamps.append(now)

    def wait_time(self, now: float, limit: int, margin: float = 0.0) -> float:
        """
        Seconds to wait before another admission fits under ``limit``.

        Returns 0 when the window has room. Otherwise waits for the oldest
        timestamp to age out, plus ``margin``.
        """
        if self.count(now) < limit:
            return 0.0
        oldest = self._timestamps[0]
        return max(0.0, oldest + self.window_seconds - now + margin)


__all__ = ["MethodWindow"]
