#!/usr/bin/env python3
"""
Example showing different ways to configure a rate limited queue.

This example demonstrates configuration via:
1. A plain rate
2. Rate limit strings
3. Configuration objects and dictionaries
4. Environment variables
"""

import os

from rate_limited_queue import QueueConfig, RateLimit, RateLimitedQueue


def main():
    queue = RateLimitedQueue(0.2)
    print(f"Plain rate: {queue.get_max_calls_per_second()}/s, interval {queue.interval_millis:.0f}ms")

    rate_limit = RateLimit.from_string("100/1h")
    queue = RateLimitedQueue.from_rate_limit(rate_limit)
    print(f"From '{rate_limit}': interval {queue.interval:.0f}s")

    config = QueueConfig.from_dict({"rate_limit": "10/60s", "name": "search-api"})
    queue = RateLimitedQueue.from_config(config)
    print(f"From config: {queue.name} at {queue.get_max_calls_per_second():.3f}/s")

    os.environ["RATE_LIMITED_QUEUE_MAX_CALLS_PER_SECOND"] = "4"
    os.environ["RATE_LIMITED_QUEUE_NAME"] = "env-queue"
    queue = RateLimitedQueue.from_config()
    print(f"From environment: {queue.name} at {queue.get_max_calls_per_second()}/s")


if __name__ == "__main__":
    main()
