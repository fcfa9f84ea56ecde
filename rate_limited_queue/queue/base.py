import logging
import time
from collections import deque
from datetime import datetime
from functools import partial
from typing import Any, Callable, Deque, Dict, Optional, Union

from ..config import DEFAULT_QUEUE_NAME, QueueConfig
from ..core.rate_limiter import RateLimit, time_until_next_slot, validate_calls_per_second
from ..tasks.entry import ErrorCallback, SuccessCallback, Task, TaskEntry
from .stats import QueueStats

logger = logging.getLogger(__name__)


class BaseRateLimitedQueue:
    """
    Scheduling engine shared by the threaded and asyncio queues.

    Holds the pending tasks, the Stopped/Active state and the single
    outstanding wake-up. Subclasses decide how a wake-up is armed and
    cancelled and which lock guards the state.
    """

    def __init__(
        self,
        max_calls_per_second: float = 1,
        *,
        name: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        rate = validate_calls_per_second(max_calls_per_second)

        self.max_calls_per_second = max_calls_per_second
        self.interval_millis = 1000 / rate
        self.interval = self.interval_millis / 1000
        self.name = name or DEFAULT_QUEUE_NAME

        self._clock = clock
        self._lock = self._create_lock()
        self._pending: Deque[TaskEntry] = deque()
        self._active = False
        self._executing = False
        self._last_execution_at: Optional[float] = None
        self._last_execution_wall: Optional[datetime] = None
        self._timer: Any = None
        self._timer_generation = 0
        self._stats: Dict[str, int] = {
            "tasks_enqueued": 0,
            "tasks_removed": 0,
            "tasks_executed": 0,
            "tasks_succeeded": 0,
            "tasks_failed": 0,
        }

    @classmethod
    def from_rate_limit(cls, rate_limit: Union[RateLimit, str], **kwargs):
        """Create a queue from a RateLimit or a string like '10/60s'."""
        if isinstance(rate_limit, str):
            rate_limit = RateLimit.from_string(rate_limit)
        return cls(rate_limit.calls_per_second, **kwargs)

    @classmethod
    def from_config(cls, config: Optional[QueueConfig] = None, **kwargs):
        """Create a queue from configuration (environment variables when config is None)."""
        if config is None:
            config = QueueConfig()
        kwargs.setdefault("name", config.name)
        return cls(config.calls_per_second(), **kwargs)

    # Hooks

    def _create_lock(self):
        raise NotImplementedError

    def _create_timer(self, delay: float, callback: Callable[[], None]) -> Any:
        raise NotImplementedError

    def _cancel_timer(self, timer: Any) -> None:
        timer.cancel()

    def _handle_result(self, entry: TaskEntry, result: Any) -> None:
        self._complete(entry, result=result)

    # State

    def start(self) -> bool:
        """
        Start processing tasks.

        Returns False if the queue was already started. Otherwise the first
        task is processed right away when the rate window allows it and True
        is returned.
        """
        with self._lock:
            if self._active:
                return False

            self._active = True
            logger.info(
                f"Queue {self.name} started ({self.max_calls_per_second} calls/s, "
                f"{len(self._pending)} pending)"
            )
            self._update_schedule()
            return True

    def stop(self) -> None:
        """Stop processing. Pending tasks stay queued; a running task is not interrupted."""
        with self._lock:
            if not self._active:
                return

            self._active = False
            if self._timer is not None:
                self._cancel_timer(self._timer)
                self._timer = None
            logger.info(f"Queue {self.name} stopped ({len(self._pending)} pending)")

    def is_started(self) -> bool:
        return self._active

    def is_stopped(self) -> bool:
        return not self.is_started()

    def is_empty(self) -> bool:
        return len(self._pending) == 0

    def is_not_empty(self) -> bool:
        return not self.is_empty()

    def get_queue_size(self) -> int:
        return len(self._pending)

    def __len__(self) -> int:
        return self.get_queue_size()

    def get_max_calls_per_second(self) -> float:
        return self.max_calls_per_second

    # Queue mutation

    def append(
        self,
        task: Task,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        """Add a task behind every pending task."""
        self._enqueue(task, True, on_success, on_error)

    def prepend(
        self,
        task: Task,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        """Add a task in front of every pending task."""
        self._enqueue(task, False, on_success, on_error)

    def _enqueue(
        self,
        task: Task,
        to_back: bool,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        entry = TaskEntry.create(task, on_success, on_error)

        with self._lock:
            if self.is_empty() or to_back:
                self._pending.append(entry)
            else:
                self._pending.appendleft(entry)
            self._stats["tasks_enqueued"] += 1

            self._update_schedule()

    def remove(self, task: Task) -> int:
        """Remove every pending occurrence of task. Returns how many were removed."""
        with self._lock:
            kept = deque(entry for entry in self._pending if entry.task is not task)
            removed = len(self._pending) - len(kept)
            self._pending = kept

            if removed:
                self._stats["tasks_removed"] += removed
                logger.info(f"Removed {removed} task(s) from queue {self.name}")
            return removed

    def get_stats(self) -> QueueStats:
        with self._lock:
            return QueueStats(
                name=self.name,
                max_calls_per_second=self.max_calls_per_second,
                tasks_waiting=len(self._pending),
                is_active=self._active,
                last_execution_at=self._last_execution_wall,
                **self._stats,
            )

    # Scheduling

    def _update_schedule(self) -> None:
        if self.is_empty() or self.is_stopped():
            return
        if self._timer is not None or self._executing:
            return

        delay = time_until_next_slot(
            self._last_execution_at, self._clock(), self.interval
        )
        if delay is not None:
            self._arm(delay)
            return

        self._process_next()
        if self._timer is None and not self._executing:
            if self.is_not_empty() and self.is_started():
                self._arm(self.interval)

    def _arm(self, delay: float) -> None:
        self._timer_generation += 1
        callback = partial(self._on_timer, self._timer_generation)
        self._timer = self._create_timer(delay, callback)
        logger.debug(f"Queue {self.name} next task in {delay:.3f}s")

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if self._timer is None or generation != self._timer_generation:
                logger.debug(f"Queue {self.name} ignoring stale wake-up")
                return

            self._timer = None
            if self.is_stopped() or self.is_empty():
                return

            self._process_next()
            self._update_schedule()

    def _process_next(self) -> None:
        entry = self._pending.popleft()
        self._executing = True
        self._last_execution_at = self._clock()
        self._last_execution_wall = datetime.now()
        logger.debug(f"Queue {self.name} executing {entry.name}")

        try:
            result = entry.task()
        except Exception as e:
            self._complete(entry, error=e)
            return
        except BaseException:
            self._executing = False
            raise

        self._handle_result(entry, result)

    def _complete(
        self,
        entry: TaskEntry,
        result: Any = None,
        error: Optional[BaseException] = None,
    ) -> None:
        try:
            if error is None:
                entry.succeed(result)
            else:
                entry.fail(error)
        finally:
            self._executing = False

        self._stats["tasks_executed"] += 1
        if error is None:
            self._stats["tasks_succeeded"] += 1
        else:
            self._stats["tasks_failed"] += 1
