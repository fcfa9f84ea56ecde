import asyncio
import inspect
import time
from contextlib import nullcontext
from functools import partial
from typing import Any, Callable, Optional

from ..tasks.entry import TaskEntry
from .base import BaseRateLimitedQueue


class AsyncRateLimitedQueue(BaseRateLimitedQueue):
    """
    Rate limited queue driven by an asyncio event loop.

    Tasks may be plain callables or coroutine functions. When a task returns
    an awaitable it is awaited to completion before its callbacks run and
    before the next wake-up is armed, so at most one task is in flight.

    The queue must be used from the loop's thread. The loop is taken from the
    ``loop`` argument or from the running loop the first time a wake-up is
    armed.
    """

    def __init__(
        self,
        max_calls_per_second: float = 1,
        *,
        name: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self._loop = loop
        self._in_flight: Optional[asyncio.Future] = None
        super().__init__(max_calls_per_second, name=name, clock=clock)

    def _create_lock(self):
        # Single-threaded; state is only touched from the loop.
        return nullcontext()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise RuntimeError(
                    f"Queue {self.name} needs a running event loop or an explicit loop"
                ) from e
        return self._loop

    def _create_timer(self, delay: float, callback: Callable[[], None]) -> Any:
        return self._get_loop().call_later(delay, callback)

    def _handle_result(self, entry: TaskEntry, result: Any) -> None:
        if not inspect.isawaitable(result):
            self._complete(entry, result=result)
            return

        try:
            loop = self._get_loop()
        except RuntimeError as e:
            if inspect.iscoroutine(result):
                result.close()
            self._complete(entry, error=e)
            raise

        future = asyncio.ensure_future(result, loop=loop)
        self._in_flight = future
        future.add_done_callback(partial(self._on_task_done, entry))

    def _on_task_done(self, entry: TaskEntry, future: asyncio.Future) -> None:
        self._in_flight = None

        if future.cancelled():
            self._complete(entry, error=asyncio.CancelledError())
        elif future.exception() is not None:
            self._complete(entry, error=future.exception())
        else:
            self._complete(entry, result=future.result())

        self._update_schedule()

    @property
    def in_flight(self) -> bool:
        """True while an awaitable task is running."""
        return self._in_flight is not None
