# Rate limited queue implementations

from .async_queue import AsyncRateLimitedQueue
from .rate_limited import RateLimitedQueue
from .stats import QueueStats

__all__ = ["RateLimitedQueue", "AsyncRateLimitedQueue", "QueueStats"]
