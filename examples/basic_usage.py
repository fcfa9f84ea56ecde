#!/usr/bin/env python3
"""
Basic usage example of the rate-limited-queue library.

Queues 8 tasks against a queue limited to 2 calls per second and waits for
them to drain.
"""

import logging
import threading
import time
from datetime import datetime

from rate_limited_queue import RateLimitedQueue


def main():
    logging.basicConfig(level=logging.INFO)

    queue = RateLimitedQueue(2, name="demo")
    done = threading.Event()

    print("RateLimitedQueue Basic Usage Example")
    print("=" * 40)

    def make_task(task_id):
        def task():
            if task_id == 5:
                raise RuntimeError(f"Task {task_id} hit a simulated API error")
            return {"task_id": task_id, "at": datetime.now().isoformat()}

        return task

    def on_success(result):
        print(f"  ✓ Task {result['task_id']} ran at {result['at']}")
        if result["task_id"] == 8:
            done.set()

    def on_error(error):
        print(f"  ✗ {error}")

    print("\nQueueing 8 tasks...")
    for i in range(1, 9):
        queue.append(make_task(i), on_success, on_error)

    # Jumps ahead of every queued task
    queue.prepend(make_task(0), on_success, on_error)
    print(f"Queue size before start: {queue.get_queue_size()}")

    started = time.monotonic()
    queue.start()
    done.wait(timeout=30)
    queue.stop()

    stats = queue.get_stats()
    print(f"\nDrained in {time.monotonic() - started:.1f}s")
    print(f"  Executed: {stats.tasks_executed}")
    print(f"  Succeeded: {stats.tasks_succeeded}")
    print(f"  Failed: {stats.tasks_failed}")


if __name__ == "__main__":
    main()
