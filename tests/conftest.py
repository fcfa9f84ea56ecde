import pytest

from rate_limited_queue.config import QueueConfig
from rate_limited_queue.core.rate_limiter import RateLimit
from rate_limited_queue.queue.rate_limited import RateLimitedQueue


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeTimer:
    def __init__(self, delay, function):
        self.delay = delay
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True


class ManualTimerFactory:
    """Stands in for threading.Timer; timers only fire through fire_next()."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.timers = []

    def __call__(self, delay, function):
        timer = FakeTimer(delay, function)
        self.timers.append(timer)
        return timer

    @property
    def outstanding(self):
        return [t for t in self.timers if t.started and not t.cancelled and not t.fired]

    def fire_next(self):
        timer = self.outstanding[0]
        self.clock.advance(timer.delay)
        timer.fired = True
        timer.function()
        return timer

    def run_until_idle(self, max_fires: int = 1000) -> int:
        fired = 0
        while self.outstanding and fired < max_fires:
            self.fire_next()
            fired += 1
        return fired


@pytest.fixture
def clock():
    """Provide a fake monotonic clock."""
    return FakeClock()


@pytest.fixture
def timers(clock):
    """Provide a manual timer factory bound to the fake clock."""
    return ManualTimerFactory(clock)


@pytest.fixture
def make_queue(clock, timers):
    """Build RateLimitedQueue instances driven by the fake clock and timers."""

    def _make(max_calls_per_second=1, **kwargs):
        return RateLimitedQueue(
            max_calls_per_second, clock=clock, timer_factory=timers, **kwargs
        )

    return _make


@pytest.fixture
def queue(make_queue):
    """Provide a stopped queue at the default rate of one call per second."""
    return make_queue()


@pytest.fixture
def rate_limit():
    """Provide a standard rate limit for testing."""
    return RateLimit.from_string("10/60s")


@pytest.fixture
def queue_config():
    """Provide a QueueConfig instance for testing."""
    return QueueConfig(max_calls_per_second=5, name="test-queue")
