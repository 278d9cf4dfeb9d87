# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Admission scheduler for rate-limited API calls.

The scheduler owns one priority queue of pending calls and admits them one
at a time. Before each admission it honours a global pause set by the
server's rate limit signal and a rolling per-method budget. A call that
comes back rate limited is put back at the very front of the queue and
retried once the pause has elapsed; its caller never sees the rejection.
"""

import asyncio
import heapq
import itertools
import logging
import math
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import replace
from typing import Any

from ..exceptions import SchedulerError
from ..observability.collector import MetricsCollector
from ..protocols.classifier import RateLimitClassifierProtocol
from ..protocols.clock import ClockProtocol, SleepProtocol
from ..types.queue import QueuedCall
from ..types.response import detect_rate_limit
from .config import SchedulerConfig
from .window import MethodWindow

logger = logging.getLogger(__name__)

# Heap rank for calls re-queued after a rate limit; outranks every priority.
REQUEUE_RANK = float("-inf")


class Scheduler:
    """
    Priority queue with per-method budgets and a global rate limit pause.

    Calls are ordered by ascending priority, then by submission order. A
    single worker task drains the queue; it is started by submit() when idle
    and exits once the queue is empty. Actions run one at a time.

    The queue, the method windows and the pause deadline are private to the
    worker. Callers interact only through submit()/call() and the returned
    futures.

    Example:
        >>> scheduler = Scheduler()
        >>> response = await scheduler.call(
        ...     "chat.postMessage", lambda: post(body), priority=Priority.HIGH
        ... )
    """

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        *,
        classifier: RateLimitClassifierProtocol = detect_rate_limit,
        clock: ClockProtocol = time.monotonic,
        sleep: SleepProtocol = asyncio.sleep,
        metrics: MetricsCollector | None = None,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            config: Budgets, window length and defaults
            classifier: Recognises rate-limited results and extracts the delay
            clock: Monotonic time source in seconds
            sleep: Cooperative delay used for every wait
            metrics: Optional Prometheus collector
        """
        self.config = config if config is not None else SchedulerConfig()
        self._classifier = classifier
        self._clock = clock
        self._sleep = sleep
        self._metrics = metrics

        self._queue: list[tuple[float, int, QueuedCall]] = []
        self._sequence = itertools.count()
        self._windows: dict[str, MethodWindow] = {}
        self._paused_until: float | None = None

        self._processing = False
        self._worker: asyncio.Task[None] | None = None
        self._in_flight: QueuedCall | None = None

        self._admissions = 0
        self._rate_limit_hits = 0

    # ===== PUBLIC API =====

    def submit(
        self,
        method: str,
        request_func: Callable[[], Awaitable[Any]],
        priority: int | None = None,
    ) -> "asyncio.Future[Any]":
        """
        Queue a call and return a future for its outcome.

        Must be called from a running event loop. Never blocks: the call is
        queued and the worker is started if it is idle.

        Args:
            method: API method name, used for budget bucketing
            request_func: Zero-argument async callable performing one call
            priority: Lower is sooner; defaults to config.default_priority

        Returns:
            Future resolved with the action's result or exception

        Raises:
            SchedulerError: If no event loop is running
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise SchedulerError("submit() requires a running event loop") from e

        if priority is None:
            priority = self.config.default_priority

        call = QueuedCall(
            method=method,
            request_func=request_func,
            priority=int(priority),
            enqueued_at=self._clock(),
            future=loop.create_future(),
        )
        heapq.heappush(self._queue, (call.priority, next(self._sequence), call))
        self._update_queue_depth()
        logger.debug(
            f"Queued {method} (priority {call.priority}, depth {len(self._queue)})"
        )

        self._ensure_worker(loop)
        return call.future

    async def call(
        self,
        method: str,
        request_func: Callable[[], Awaitable[Any]],
        priority: int | None = None,
    ) -> Any:
        """Submit a call and wait for its outcome."""
        return await self.submit(method, request_func, priority)

    async def join(self) -> None:
        """Wait until the worker has drained the queue. Cancels nothing."""
        while self._worker is not None and not self._worker.done():
            await asyncio.wait({self._worker})

    @property
    def queue_depth(self) -> int:
        return len(self._queue)

    @property
    def is_processing(self) -> bool:
        return self._processing

    @property
    def paused_until(self) -> float | None:
        """Clock reading before which nothing is admitted, or None."""
        return self._paused_until

    def get_metrics(self) -> dict[str, Any]:
        """
        Get current scheduler metrics.

        Returns:
            Dictionary containing queue depth, worker state, remaining pause,
            admission counts per method window and lifetime counters.
        """
        now = self._clock()
        paused_for = 0.0
        if self._paused_until is not None:
            paused_for = max(0.0, self._paused_until - now)
        return {
            "queue_depth": len(self._queue),
            "processing": self._processing,
            "paused_for": paused_for,
            "admissions": self._admissions,
            "rate_limited": self._rate_limit_hits,
            "windows": {
                method: window.peek_count(now)
                for method, window in self._windows.items()
            },
        }

    # ===== ADMISSION LOOP =====

    def _ensure_worker(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._processing:
            return
        self._processing = True
        self._worker = loop.create_task(self._process_queue())
        self._worker.add_done_callback(self._on_worker_done)

    def _on_worker_done(self, task: "asyncio.Task[None]") -> None:
        call, self._in_flight = self._in_flight, None

        if task.cancelled():
            logger.info("Admission worker cancelled")
            if call is not None and not call.future.done():
                call.future.cancel()
            return

        exc = task.exception()
        if exc is None:
            return

        logger.error(f"Admission worker failed: {exc!r}")
        if call is not None and not call.future.done():
            call.future.set_exception(exc)
        # A cancelled worker stays down; a failed one resumes the queue
        if self._queue:
            self._ensure_worker(task.get_loop())

    async def _process_queue(self) -> None:
        logger.debug("Admission worker started")
        try:
            while self._queue:
                now = self._clock()

                if self._paused_until is not None and self._paused_until > now:
                    await self._sleep(max(0.0, self._paused_until - now))
                    continue

                call = self._queue[0][2]
                self._check_queue_delay(call, now)

                wait = self._budget_wait(call.method, now)
                if wait > 0:
                    logger.debug(f"Budget for {call.method} exhausted, waiting {wait:.2f}s")
                    await self._sleep(wait)
                    continue

                heapq.heappop(self._queue)
                self._in_flight = call
                self._window(call.method).record(now)
                self._admissions += 1
                self._update_queue_depth()
                if self._metrics:
                    self._metrics.record_admission(call.method, call.wait_time(now))

                await self._execute(call)
                self._in_flight = None
        finally:
            self._processing = False
            logger.debug("Admission worker idle")

    def _check_queue_delay(self, call: QueuedCall, now: float) -> None:
        waited = call.wait_time(now)
        if waited > self.config.queue_delay_warning:
            logger.warning(
                f"Queue delay warning: {call.method} waited {math.ceil(waited)}s "
                f"(queue depth: {len(self._queue)})"
            )
            if self._metrics:
                self._metrics.record_queue_delay_warning(call.method)

    def _budget_wait(self, method: str, now: float) -> float:
        limit = self.config.method_limits.get(method)
        if limit is None:
            return 0.0
        return self._window(method).wait_time(now, limit, self.config.window_margin)

    def _window(self, method: str) -> MethodWindow:
        window = self._windows.get(method)
        if window is None:
            window = MethodWindow(method, self.config.window_seconds)
            self._windows[method] = window
        return window

    async def _execute(self, call: QueuedCall) -> None:
        call.attempts += 1
        try:
            action = asyncio.ensure_future(call.request_func())
        except Exception as e:
            self._fail(call, e)
            return

        # Separate task: an action ending cancelled must not stop the worker
        try:
            await asyncio.wait({action})
        except asyncio.CancelledError:
            action.cancel()
            raise

        if action.cancelled():
            logger.debug(f"Action for {call.method} was cancelled")
            call.future.cancel()
            return

        try:
            result = action.result()
            retry_after = self._classifier(result)
        except Exception as e:
            self._fail(call, e)
            return

        if retry_after is not None:
            self._pause_and_requeue(call, retry_after)
            return

        if call.future.done():
            logger.debug(f"Discarding result for {call.method}: caller gave up")
            return
        call.future.set_result(result)

    def _fail(self, call: QueuedCall, error: Exception) -> None:
        if not call.future.done():
            call.future.set_exception(error)

    def _pause_and_requeue(self, call: QueuedCall, retry_after: float) -> None:
        if not (math.isfinite(retry_after) and retry_after > 0):
            retry_after = self.config.default_retry_after

        self._paused_until = self._clock() + retry_after
        self._rate_limit_hits += 1
        logger.warning(f"Rate limited on {call.method}, retrying after {retry_after:g}s")
        if self._metrics:
            self._metrics.record_rate_limited(call.method)

        heapq.heappush(self._queue, (REQUEUE_RANK, next(self._sequence), call))
        self._update_queue_depth()

    def _update_queue_depth(self) -> None:
        if self._metrics:
            self._metrics.set_queue_depth(len(self._queue))


# Factory function for easy creation with dependency injection
def create_scheduler(
    method_limits: Mapping[str, int] | None = None,
    config: SchedulerConfig | None = None,
    **kwargs: Any,
) -> Scheduler:
    """
    Factory function to create a Scheduler.

    Args:
        method_limits: Budget table replacing the config's table, if given
        config: Optional scheduler config (default created if not provided)
        **kwargs: Additional arguments passed to the Scheduler constructor

    Returns:
        Configured Scheduler instance

    Raises:
        ValueError: If the budget table is invalid
    """
    if config is None:
        config = SchedulerConfig()

    if method_limits is not None:
        config = replace(config, method_limits=method_limits)

    return Scheduler(config=config, **kwargs)


__all__ = [
    "REQUEUE_RANK",
    "Scheduler",
    "create_scheduler",
]
