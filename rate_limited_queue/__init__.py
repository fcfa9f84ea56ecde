"""
Rate Limited Queue - In-memory task queue that never runs faster than a set rate.

Throttles calls to a rate limited resource (e.g. an API with a quota) while
keeping FIFO order and allowing tasks to be prepended.
"""

from .config import QueueConfig
from .core.rate_limiter import RateLimit
from .queue import AsyncRateLimitedQueue, QueueStats, RateLimitedQueue
from .tasks.entry import TaskEntry

__version__ = "0.1.0"
__all__ = [
    "RateLimitedQueue",
    "AsyncRateLimitedQueue",
    "QueueConfig",
    "QueueStats",
    "RateLimit",
    "TaskEntry",
]
