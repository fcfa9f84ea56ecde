# Core rate limiting functionality

from .rate_limiter import RateLimit, time_until_next_slot, validate_calls_per_second

__all__ = ["RateLimit", "time_until_next_slot", "validate_calls_per_second"]
