"""
Delivery sink: the bounded hand-off between the streamer and its consumer.

Two ends, two ways to stop:

- the producer calls `finish` when it stops producing; the consumer drains
  what is queued and then sees the end of the stream
- the consumer calls `close` when it no longer wants messages; queued
  messages are dropped and every later `send` returns False

A full queue blocks `send`. That is the only backpressure in the system:
a slow consumer stalls delivery, which stalls the prefetch window, which
stalls listing.
"""

from __future__ import annotations

import asyncio
from collections import deque

from lake_stream.views import StreamerMessage


class MessageSink:
    """Bounded single-producer, single-consumer message queue with close semantics."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._items: deque[StreamerMessage] = deque()
        self._waiters: deque[asyncio.Future[None]] = deque()
        self._closed = False
        self._finished = False

    def __len__(self) -> int:
        return len(self._items)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        """Whether the consumer went away."""
        return self._closed

    @property
    def finished(self) -> bool:
        """Whether the producer stopped."""
        return self._finished

    # -------------------------------------------------------------------------
    # Producer side
    # -------------------------------------------------------------------------

    async def send(self, message: StreamerMessage) -> bool:
        """
        Queue a message, waiting while the queue is full.

        Returns:
            True once queued, False if the consumer closed the sink.
        """
        while not self._closed and len(self._items) >= self._capacity:
            await self._wait()
        if self._closed:
            return False

        self._items.append(message)
        self._wake_all()
        return True

    def finish(self) -> None:
        """Signal that no more messages will be sent."""
        self._finished = True
        self._wake_all()

    # -------------------------------------------------------------------------
    # Consumer side
    # -------------------------------------------------------------------------

    async def recv(self) -> StreamerMessage | None:
        """
        Take the next message, waiting while the queue is empty.

        Returns:
            The next message, or None once the stream ended or was closed.
        """
        while not self._items and not self._finished and not self._closed:
            await self._wait()
        if self._closed or not self._items:
            return None

        message = self._items.popleft()
        self._wake_all()
        return message

    def close(self) -> None:
        """Stop receiving. Queued messages are dropped."""
        self._closed = True
        self._items.clear()
        self._wake_all()

    def __aiter__(self) -> MessageSink:
        return self

    async def __anext__(self) -> StreamerMessage:
        message = await self.recv()
        if message is None:
            raise StopAsyncIteration
        return message

    # -------------------------------------------------------------------------
    # Waiting
    # -------------------------------------------------------------------------

    async def _wait(self) -> None:
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        finally:
            if not waiter.done():
                waiter.cancel()
            try:
                self._waiters.remove(waiter)
            except ValueError:
                pass

    def _wake_all(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
