"""
Height cursor: an endless, ascending supply of heights to fetch.

How It Works
------------
The cursor keeps a lower bound, the next height it has not handed out yet.
A listing asks the provider for heights strictly above ``bound - 1``:

- **Heights returned**: buffer them in ascending order and move the bound
  past the last one.
- **Nothing returned**: the chain has not moved. Wait and list again.
- **Listing failed**: log it, wait a little less, and list again.

The sequence never ends. "No data yet" is an empty listing followed by a
retry, never an end of stream.

Listings run in a background task so the driving loop can take whatever is
already buffered without waiting on the network.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque

from lake_stream.providers import Fetcher
from lake_stream.types import BlockHeight

from .config import EMPTY_LISTING_BACKOFF, LISTING_ERROR_BACKOFF

logger = logging.getLogger(__name__)


class HeightCursor:
    """Restartable, non-terminating sequence of heights starting at a given one."""

    def __init__(self, fetcher: Fetcher, start_height: BlockHeight) -> None:
        self._fetcher = fetcher
        self._next_height = start_height
        self._buffer: deque[BlockHeight] = deque()
        self._listing: asyncio.Task[None] | None = None

    @property
    def next_height(self) -> BlockHeight:
        """Lower bound of the next listing."""
        return self._next_height

    @property
    def buffered(self) -> int:
        """Heights listed but not handed out yet."""
        return len(self._buffer)

    def take_ready(self, limit: int) -> list[BlockHeight]:
        """
        Hand out up to `limit` buffered heights without waiting.

        When the buffer runs dry a background listing starts, so the next
        call has a chance to find heights ready.
        """
        heights = []
        while self._buffer and len(heights) < limit:
            heights.append(self._buffer.popleft())

        if not self._buffer:
            self._ensure_listing()
        return heights

    async def wait_ready(self, limit: int) -> list[BlockHeight]:
        """Hand out up to `limit` heights, waiting until at least one exists."""
        while not self._buffer:
            listing = self._ensure_listing()
            # The listing outlives this call if the caller is cancelled.
            await asyncio.shield(listing)
        return self.take_ready(limit)

    async def close(self) -> None:
        """Cancel any background listing."""
        if self._listing is not None and not self._listing.done():
            self._listing.cancel()
            try:
                await self._listing
            except asyncio.CancelledError:
                pass
        self._listing = None

    def _ensure_listing(self) -> asyncio.Task[None]:
        if self._listing is None or self._listing.done():
            self._listing = asyncio.create_task(self._list_until_found())
        return self._listing

    async def _list_until_found(self) -> None:
        """List until at least one new height is buffered."""
        while True:
            after = self._next_height - 1
            try:
                heights = await self._fetcher.list_new_heights(after)
            except Exception as exc:
                logger.warning(
                    "Failed to list heights after %d: %s. Retrying in %.1fs",
                    after,
                    exc,
                    LISTING_ERROR_BACKOFF,
                )
                await asyncio.sleep(LISTING_ERROR_BACKOFF)
                continue

            fresh = sorted({height for height in heights if height >= self._next_height})
            if not fresh:
                logger.debug(
                    "No heights newer than %d yet. Listing again in %.1fs",
                    after,
                    EMPTY_LISTING_BACKOFF,
                )
                await asyncio.sleep(EMPTY_LISTING_BACKOFF)
                continue

            logger.debug("Listed %d heights from %d to %d", len(fresh), fresh[0], fresh[-1])
            self._buffer.extend(fresh)
            self._next_height = fresh[-1] + 1
            return
