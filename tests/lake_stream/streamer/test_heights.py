"""Tests for the height cursor."""

from __future__ import annotations

import asyncio

from lake_stream.streamer import HeightCursor
from tests.lake_stream.helpers import MockFetcher


class TestTakeReady:
    """Tests for handing out buffered heights."""

    async def test_empty_buffer_starts_a_listing(self, mock_fetcher: MockFetcher) -> None:
        cursor = HeightCursor(mock_fetcher, 100)

        assert cursor.take_ready(5) == []
        await asyncio.sleep(0.01)

        assert cursor.buffered == 10
        assert cursor.take_ready(3) == [100, 101, 102]
        await cursor.close()

    async def test_listing_starts_after_previous_height(self, mock_fetcher: MockFetcher) -> None:
        """The cursor lists strictly after `start - 1`."""
        cursor = HeightCursor(mock_fetcher, 105)

        heights = await cursor.wait_ready(10)

        assert mock_fetcher.list_calls[0] == 104
        assert heights == [105, 106, 107, 108, 109]
        assert cursor.next_height == 110
        await cursor.close()

    async def test_start_at_zero_lists_after_minus_one(self) -> None:
        fetcher = MockFetcher(range(0, 3))
        cursor = HeightCursor(fetcher, 0)

        assert await cursor.wait_ready(10) == [0, 1, 2]
        assert fetcher.list_calls[0] == -1
        await cursor.close()


class TestWaitReady:
    """Tests for waiting on new heights."""

    async def test_empty_listing_is_retried(self) -> None:
        """No data yet means waiting, never the end of the sequence."""
        fetcher = MockFetcher([])
        cursor = HeightCursor(fetcher, 100)
        waiting = asyncio.create_task(cursor.wait_ready(5))
        await asyncio.sleep(0.05)
        assert not waiting.done()

        fetcher.heights.extend([100, 101])

        assert await asyncio.wait_for(waiting, 1.0) == [100, 101]
        assert len(fetcher.list_calls) >= 2
        await cursor.close()

    async def test_listing_errors_are_retried(self) -> None:
        fetcher = MockFetcher([100])
        fetcher.list_errors = 2
        cursor = HeightCursor(fetcher, 100)

        assert await asyncio.wait_for(cursor.wait_ready(5), 1.0) == [100]
        assert len(fetcher.list_calls) == 3
        await cursor.close()

    async def test_heights_below_the_bound_are_dropped(self) -> None:
        """Stale or repeated heights from the provider are never handed out twice."""
        fetcher = MockFetcher([100, 101])
        cursor = HeightCursor(fetcher, 100)
        assert await cursor.wait_ready(5) == [100, 101]

        fetcher.heights = [99, 100, 101, 102, 102]

        assert await asyncio.wait_for(cursor.wait_ready(5), 1.0) == [102]
        await cursor.close()

    async def test_gaps_are_passed_through(self) -> None:
        """Missing heights are not an error: the next existing ones are handed out."""
        fetcher = MockFetcher([100, 103, 107])
        cursor = HeightCursor(fetcher, 100)

        assert await cursor.wait_ready(5) == [100, 103, 107]
        assert cursor.next_height == 108
        await cursor.close()

    async def test_page_size_limits_one_listing(self) -> None:
        fetcher = MockFetcher(range(100, 120), page_size=4)
        cursor = HeightCursor(fetcher, 100)

        assert await cursor.wait_ready(10) == [100, 101, 102, 103]
        assert await cursor.wait_ready(10) == [104, 105, 106, 107]
        await cursor.close()


class TestClose:
    """Tests for cancelling a pending listing."""

    async def test_close_cancels_listing(self) -> None:
        fetcher = MockFetcher([])
        cursor = HeightCursor(fetcher, 100)
        cursor.take_ready(1)
        await asyncio.sleep(0.01)

        await cursor.close()
        calls = len(fetcher.list_calls)
        await asyncio.sleep(0.05)

        assert len(fetcher.list_calls) == calls
