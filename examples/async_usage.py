#!/usr/bin/env python3
"""
Example using AsyncRateLimitedQueue with coroutine tasks.

Each coroutine is awaited before the next one starts, and starts are spaced
by at least 1/max_calls_per_second.
"""

import asyncio

from rate_limited_queue import AsyncRateLimitedQueue


async def fetch(item_id: int) -> str:
    await asyncio.sleep(0.1)  # stand-in for a network call
    return f"item-{item_id}"


async def main():
    queue = AsyncRateLimitedQueue.from_rate_limit("3/1s", name="async-demo")
    finished = asyncio.Event()
    results = []

    def on_success(result):
        print(f"  fetched {result}")
        results.append(result)
        if len(results) == 6:
            finished.set()

    for i in range(6):
        queue.append(lambda i=i: fetch(i), on_success)

    queue.start()
    await asyncio.wait_for(finished.wait(), timeout=10)
    queue.stop()

    print(f"Fetched {len(results)} items at {queue.get_max_calls_per_second():.0f}/s")


if __name__ == "__main__":
    asyncio.run(main())
