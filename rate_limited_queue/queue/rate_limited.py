import inspect
import logging
import threading
import time
from typing import Any, Callable, Optional

from ..tasks.entry import TaskEntry
from .base import BaseRateLimitedQueue

logger = logging.getLogger(__name__)


class RateLimitedQueue(BaseRateLimitedQueue):
    """
    In-memory task queue that runs at most max_calls_per_second tasks per second.

    Tasks run one at a time, in insertion order (prepend jumps the line), on a
    daemon timer thread. A single re-entrant lock guards the queue, so tasks and
    callbacks may append to, remove from, or stop their own queue.

    Tasks are plain callables. Coroutine functions are not awaited here; use
    AsyncRateLimitedQueue for them.

    Examples:
        queue = RateLimitedQueue(5)  # one task every 200ms
        queue.append(lambda: api.fetch(1), on_success=print, on_error=log_error)
        queue.start()

        # Rate from a string
        queue = RateLimitedQueue.from_rate_limit("10/60s")
    """

    def __init__(
        self,
        max_calls_per_second: float = 1,
        *,
        name: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
        timer_factory: Callable[[float, Callable[[], None]], Any] = threading.Timer,
    ):
        """
        Args:
            max_calls_per_second: Rate limit, may be fractional (0.2 = one call every 5s).
            name: Label used in log messages and stats.
            clock: Monotonic clock in seconds.
            timer_factory: Builds a startable, cancellable timer from (delay, callback).
        """
        self._timer_factory = timer_factory
        super().__init__(max_calls_per_second, name=name, clock=clock)

    def _create_lock(self):
        return threading.RLock()

    def _create_timer(self, delay: float, callback: Callable[[], None]) -> Any:
        timer = self._timer_factory(delay, callback)
        timer.daemon = True
        timer.start()
        return timer

    def _handle_result(self, entry: TaskEntry, result: Any) -> None:
        if inspect.isawaitable(result):
            logger.warning(
                f"Task {entry.name} returned an awaitable that {self.name} will not await; "
                f"use AsyncRateLimitedQueue for coroutine tasks"
            )
        super()._handle_result(entry, result)
