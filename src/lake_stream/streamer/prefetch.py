"""
Prefetch scheduler: a bounded window of in-flight heights, drained in order.

Heights are started in ascending order and results come out in that same
order, whatever order the fetches finish in::

    started:   100   101   102
    finished:  102   100   101
    yielded:   100   101   102

An ordered join, not a first-ready join. A fast height waits in its slot
until every height before it has been yielded.

Refill Policy
-------------
`fill` tops the window up to its size with heights the cursor already has.
It waits for the cursor only when the window is empty, so a cold start
blocks on the first listing instead of spinning.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable

from lake_stream import metrics
from lake_stream.types import BlockHeight
from lake_stream.views import StreamerMessage

from .heights import HeightCursor

logger = logging.getLogger(__name__)

FetchHeight = Callable[[BlockHeight], Awaitable[StreamerMessage | None]]
"""Fetches one height. None means the height holds no block."""


class PrefetchScheduler:
    """Up to `window_size` fetch tasks, yielded in the order they were started."""

    def __init__(self, cursor: HeightCursor, fetch: FetchHeight, window_size: int) -> None:
        if window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {window_size}")
        self._cursor = cursor
        self._fetch = fetch
        self._window_size = window_size
        self._window: deque[tuple[BlockHeight, asyncio.Task[StreamerMessage | None]]] = deque()

    def __len__(self) -> int:
        return len(self._window)

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def heights(self) -> list[BlockHeight]:
        """Heights in flight, in yield order."""
        return [height for height, _ in self._window]

    async def fill(self) -> int:
        """
        Top the window up with ready heights.

        Waits for the cursor only while the window is empty.

        Returns:
            Number of fetches started.
        """
        room = self._window_size - len(self._window)
        if room <= 0:
            return 0

        heights = self._cursor.take_ready(room)
        if not heights and not self._window:
            logger.debug("Prefetch window is empty, waiting for the next height")
            heights = await self._cursor.wait_ready(room)

        for height in heights:
            task = asyncio.create_task(self._fetch(height), name=f"fetch-{height}")
            self._window.append((height, task))

        metrics.prefetch_in_flight.set(len(self._window))
        if heights:
            logger.debug("Started %d fetches, %d in flight", len(heights), len(self._window))
        return len(heights)

    async def next(self) -> tuple[BlockHeight, StreamerMessage | None]:
        """
        Wait for the oldest fetch in the window and remove it.

        Raises:
            RuntimeError: If the window is empty.
            DecodeError: If the fetch hit undecodable data.
        """
        if not self._window:
            raise RuntimeError("Prefetch window is empty")

        height, task = self._window[0]
        message = await task
        self._window.popleft()
        metrics.prefetch_in_flight.set(len(self._window))
        return height, message

    async def discard(self) -> None:
        """Cancel every fetch in flight and wait for them to wind down."""
        tasks = [task for _, task in self._window]
        self._window.clear()
        metrics.prefetch_in_flight.set(0)

        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug("Discarded %d in-flight fetches", len(tasks))
