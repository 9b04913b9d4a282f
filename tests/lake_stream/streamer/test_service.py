"""Tests for the streamer driving loop."""

from __future__ import annotations

import asyncio

import pytest

from lake_stream.config import LakeConfig
from lake_stream.streamer import MessageSink, Streamer, StreamerState, streamer
from lake_stream.types import DecodeError
from tests.lake_stream.helpers import (
    BLOCK_PART,
    MockFetcher,
    block_hash_for,
    collect,
    encode,
    make_block_json,
    stop,
)


def _config(start: int = 100, window: int = 2) -> LakeConfig:
    return LakeConfig(start_block_height=start, blocks_preload_pool_size=window)


class TestOrdering:
    """Tests for strict height order."""

    async def test_delivers_in_height_order(self, mock_fetcher: MockFetcher) -> None:
        task, sink = streamer(_config(window=3), mock_fetcher)

        messages = await collect(sink, 10)
        await stop(task)

        assert [message.height for message in messages] == list(range(100, 110))

    async def test_fast_later_height_waits_for_slower_earlier_one(self) -> None:
        """With a window of 2, height 102 finishing before 101 is still delivered after it."""
        fetcher = MockFetcher(range(100, 103))
        fetcher.delays = {100: 0.02, 101: 0.1}
        task, sink = streamer(_config(window=2), fetcher)

        messages = await collect(sink, 3)
        await stop(task)

        assert [message.height for message in messages] == [100, 101, 102]

    async def test_every_delivered_block_links_to_the_previous(
        self, mock_fetcher: MockFetcher
    ) -> None:
        task, sink = streamer(_config(window=4), mock_fetcher)

        messages = await collect(sink, 10)
        await stop(task)

        for previous, current in zip(messages, messages[1:]):
            assert current.prev_hash == previous.hash

    async def test_starts_at_configured_height(self, mock_fetcher: MockFetcher) -> None:
        task, sink = streamer(_config(start=105), mock_fetcher)

        (first,) = await collect(sink, 1)
        await stop(task)

        assert first.height == 105


class TestChainBreak:
    """Tests for recovery from a stale block."""

    async def test_stale_block_is_refetched(self) -> None:
        """A block with the wrong prev_hash is dropped and fetched again."""
        fetcher = MockFetcher(range(100, 103))
        fetcher.stale[101].append(encode(make_block_json(101, prev_hash="stale-hash")))
        sink = MessageSink(2)
        engine = Streamer(config=_config(window=2), fetcher=fetcher, sink=sink)
        task = asyncio.create_task(engine.run())

        messages = await collect(sink, 3)
        progress = engine.get_progress()
        await stop(task)

        assert [message.height for message in messages] == [100, 101, 102]
        assert messages[1].prev_hash == block_hash_for(100)
        assert fetcher.fetch_counts[(101, BLOCK_PART)] == 2
        assert progress.chain_resets == 1
        assert progress.blocks_delivered == 3

    async def test_restart_resumes_after_last_accepted(self) -> None:
        fetcher = MockFetcher(range(100, 104))
        fetcher.stale[102].append(encode(make_block_json(102, prev_hash="stale-hash")))
        task, sink = streamer(_config(window=3), fetcher)

        messages = await collect(sink, 4)
        await stop(task)

        assert [message.height for message in messages] == [100, 101, 102, 103]
        assert fetcher.fetch_counts[(100, BLOCK_PART)] == 1
        assert fetcher.list_calls.count(101) >= 1


class TestBackpressure:
    """Tests for bounded fetching ahead of a stalled consumer."""

    async def test_stalled_consumer_bounds_started_fetches(self) -> None:
        """Never more than twice the window plus the block being delivered."""
        window = 2
        fetcher = MockFetcher(range(100, 200))
        task, sink = streamer(_config(window=window), fetcher)

        for _ in range(10):
            await asyncio.sleep(0.01)

        assert len(sink) == window
        assert len(fetcher.started) <= 2 * window + 1
        await stop(task)

    async def test_reading_resumes_fetching(self) -> None:
        fetcher = MockFetcher(range(100, 200))
        task, sink = streamer(_config(window=2), fetcher)
        await asyncio.sleep(0.05)
        before = len(fetcher.started)

        await collect(sink, 20)
        await stop(task)

        assert len(fetcher.started) > before


class TestRetriesAndSkips:
    """Tests for retried and missing heights."""

    async def test_retries_deliver_each_height_once(self) -> None:
        fetcher = MockFetcher(range(100, 105), num_shards=2)
        fetcher.fail_not_found[(100, BLOCK_PART)] = 3
        fetcher.fail_transient[(101, 1)] = 2
        fetcher.fail_not_found[(103, 0)] = 1
        task, sink = streamer(_config(window=3), fetcher)

        messages = await collect(sink, 5)
        await stop(task)

        assert [message.height for message in messages] == [100, 101, 102, 103, 104]
        assert all(message.is_complete for message in messages)

    async def test_skipped_height_is_passed_over(self) -> None:
        fetcher = MockFetcher(range(100, 104))
        fetcher.skipped.add(101)
        fetcher.set_block(102, make_block_json(102, prev_hash=block_hash_for(100)))
        task, sink = streamer(_config(window=2), fetcher)

        messages = await collect(sink, 3)
        await stop(task)

        assert [message.height for message in messages] == [100, 102, 103]


class TestTermination:
    """Tests for how a run ends."""

    async def test_decode_error_stops_the_streamer(self) -> None:
        fetcher = MockFetcher(range(100, 105))
        fetcher.blocks[101] = b"not json"
        sink = MessageSink(2)
        engine = Streamer(config=_config(window=2), fetcher=fetcher, sink=sink)

        with pytest.raises(DecodeError):
            await asyncio.wait_for(engine.run(), 5.0)

        assert engine.state == StreamerState.STOPPED
        assert sink.finished
        assert fetcher.fetch_counts[(101, BLOCK_PART)] == 1

    async def test_consumer_close_stops_the_streamer(self, mock_fetcher: MockFetcher) -> None:
        task, sink = streamer(_config(window=2), mock_fetcher)
        await collect(sink, 1)

        sink.close()

        await asyncio.wait_for(task, 5.0)
        assert task.exception() is None

    async def test_cancel_discards_window(self, mock_fetcher: MockFetcher) -> None:
        sink = MessageSink(2)
        engine = Streamer(config=_config(window=2), fetcher=mock_fetcher, sink=sink)
        task = asyncio.create_task(engine.run())
        await collect(sink, 1)

        await stop(task)

        assert engine.state == StreamerState.STOPPED
        assert engine.get_progress().in_flight == 0
        assert sink.finished

    async def test_progress_before_start(self, mock_fetcher: MockFetcher) -> None:
        engine = Streamer(config=_config(), fetcher=mock_fetcher, sink=MessageSink(1))

        progress = engine.get_progress()

        assert progress.state == StreamerState.IDLE
        assert progress.last_accepted_height is None
        assert progress.blocks_delivered == 0
