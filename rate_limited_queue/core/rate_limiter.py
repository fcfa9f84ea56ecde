import logging
import math
import re
from numbers import Real
from typing import Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

_RATE_PATTERN = re.compile(r"^(\d+)/(\d+)([smh])$")

# Largest unit first so __str__ picks the most natural one
_UNIT_SECONDS = {"h": 3600, "m": 60, "s": 1}

class RateLimit(BaseModel):
    """A number of calls allowed per period, e.g. '10/60s'."""

    requests: int
    period_seconds: int

    @classmethod
    def from_string(cls, rate_string: str) -> "RateLimit":
        match = _RATE_PATTERN.match(rate_string.strip())
        if not match:
            raise ValueError(
                f"Invalid rate limit format: {rate_string}. Expected format: '10/60s', '10/5m' or '4000/3h'"
            )

        requests, period_value, unit = int(match[1]), int(match[2]), match[3]
        if requests <= 0:
            raise ValueError(f"Requests must be positive, got: {requests}")
        if period_value <= 0:
            raise ValueError(f"Period must be positive, got: {period_value}")

        return cls(requests=requests, period_seconds=period_value * _UNIT_SECONDS[unit])

    @property
    def calls_per_second(self) -> float:
        return self.requests / self.period_seconds

    def __str__(self) -> str:
        unit, seconds = next(
            (unit, seconds)
            for unit, seconds in _UNIT_SECONDS.items()
            if self.period_seconds % seconds == 0
        )
        return f"{self.requests}/{self.period_seconds // seconds}{unit}"

def validate_calls_per_second(max_calls_per_second) -> float:
    """Return the rate as a float, or raise ValueError if it cannot drive a queue."""
    if isinstance(max_calls_per_second, bool) or not isinstance(max_calls_per_second, Real):
        raise ValueError(
            f"max_calls_per_second must be a number, got: {max_calls_per_second!r}"
        )
    if not math.isfinite(max_calls_per_second) or max_calls_per_second <= 0:
        raise ValueError(
            f"max_calls_per_second must be positive and finite, got: {max_calls_per_second}"
        )
    return float(max_calls_per_second)

def time_until_next_slot(
    last_execution_at: Optional[float], now: float, interval: float
) -> Optional[float]:
    """
    Seconds to wait before the next task may start.

    None means run now: nothing has run yet, or more than one interval has
    passed since the last start (catch-up). Otherwise the rest of the current
    window is returned, which is 0.0 at exactly one interval.
    """
    if last_execution_at is None:
        return None

    elapsed = now - last_execution_at
    if elapsed > interval:
        return None
    return interval - elapsed
