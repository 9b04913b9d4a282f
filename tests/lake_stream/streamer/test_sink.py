"""Tests for the bounded delivery sink."""

from __future__ import annotations

import asyncio

import pytest

from lake_stream.streamer import MessageSink
from tests.lake_stream.helpers import make_streamer_message


class TestMessageSinkBasics:
    """Tests for construction and FIFO order."""

    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            MessageSink(0)

    async def test_fifo_order(self) -> None:
        sink = MessageSink(3)
        for height in (1, 2, 3):
            assert await sink.send(make_streamer_message(height))

        received = [await sink.recv() for _ in range(3)]

        assert [message.height for message in received if message] == [1, 2, 3]
        assert len(sink) == 0


class TestBackpressure:
    """Tests for a full queue blocking the producer."""

    async def test_send_blocks_when_full(self) -> None:
        sink = MessageSink(1)
        await sink.send(make_streamer_message(1))

        blocked = asyncio.create_task(sink.send(make_streamer_message(2)))
        await asyncio.sleep(0.01)
        assert not blocked.done()

        first = await sink.recv()
        assert await asyncio.wait_for(blocked, 1.0) is True
        assert first is not None and first.height == 1
        assert len(sink) == 1

    async def test_recv_waits_for_a_message(self) -> None:
        sink = MessageSink(2)
        waiting = asyncio.create_task(sink.recv())
        await asyncio.sleep(0.01)
        assert not waiting.done()

        await sink.send(make_streamer_message(9))

        message = await asyncio.wait_for(waiting, 1.0)
        assert message is not None and message.height == 9


class TestTermination:
    """Tests for finish and close."""

    async def test_finish_drains_then_ends(self) -> None:
        """The consumer still gets queued messages after the producer finished."""
        sink = MessageSink(2)
        await sink.send(make_streamer_message(1))
        sink.finish()

        first = await sink.recv()

        assert first is not None
        assert await sink.recv() is None
        assert sink.finished

    async def test_finish_wakes_a_waiting_consumer(self) -> None:
        sink = MessageSink(2)
        waiting = asyncio.create_task(sink.recv())
        await asyncio.sleep(0.01)

        sink.finish()

        assert await asyncio.wait_for(waiting, 1.0) is None

    async def test_close_drops_queue_and_rejects_sends(self) -> None:
        sink = MessageSink(2)
        await sink.send(make_streamer_message(1))

        sink.close()

        assert sink.closed
        assert len(sink) == 0
        assert await sink.recv() is None
        assert await sink.send(make_streamer_message(2)) is False

    async def test_close_wakes_a_blocked_producer(self) -> None:
        sink = MessageSink(1)
        await sink.send(make_streamer_message(1))
        blocked = asyncio.create_task(sink.send(make_streamer_message(2)))
        await asyncio.sleep(0.01)

        sink.close()

        assert await asyncio.wait_for(blocked, 1.0) is False

    async def test_async_iteration(self) -> None:
        sink = MessageSink(3)
        for height in (4, 5):
            await sink.send(make_streamer_message(height))
        sink.finish()

        heights = [message.height async for message in sink]

        assert heights == [4, 5]

    async def test_cancelled_waiter_is_forgotten(self) -> None:
        """A consumer cancelled while waiting leaves no stale waiter behind."""
        sink = MessageSink(1)
        waiting = asyncio.create_task(sink.recv())
        await asyncio.sleep(0.01)
        waiting.cancel()
        await asyncio.gather(waiting, return_exceptions=True)

        assert await sink.send(make_streamer_message(1))
        message = await sink.recv()
        assert message is not None and message.height == 1
