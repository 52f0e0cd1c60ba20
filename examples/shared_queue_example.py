"""
Example: Throttling several clients through one call queue.

Two anonymous clients share a CallQueue, so together they never exceed the
unauthenticated budget. Requests beyond the budget wait in the queue's
stack; once the stack is full, calls fail fast with RateLimitExceededError.

Run with:
    python examples/shared_queue_example.py
"""

import asyncio
import time

from spinshelf import CallQueue, DiscogsClient, RateLimitExceededError
from spinshelf.common.config import LoggingConfig
from spinshelf.common.logging_config import setup_logging

RELEASE_IDS = [249504, 1, 2, 3, 4, 5, 6, 7]


async def fetch(client: DiscogsClient, name: str, release_id: int, started: float) -> None:
    try:
        response = await client.database().get_release(release_id)
        elapsed = time.monotonic() - started
        print(f"[{elapsed:6.2f}s] {name}: {release_id} -> {response.data.get('title')}")
    except RateLimitExceededError:
        print(f"{name}: {release_id} rejected, queue is full")


async def main():
    setup_logging(LoggingConfig(level="WARNING", format="text"))

    queue = CallQueue(max_stack=4)
    first = DiscogsClient(queue=queue)
    second = DiscogsClient(queue=queue)

    # Small budget so the throttling is visible
    first.set_config(request_limit=3, request_limit_interval=5000)
    second.set_config(request_limit=3, request_limit_interval=5000)

    started = time.monotonic()
    async with first, second:
        await asyncio.gather(
            *(
                fetch(first if i % 2 else second, "first" if i % 2 else "second", release_id, started)
                for i, release_id in enumerate(RELEASE_IDS)
            )
        )

    print(f"\nQueue state after run: {queue.state.value}")


if __name__ == "__main__":
    asyncio.run(main())
