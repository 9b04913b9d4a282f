"""
The FastNear data API as a streamer `Fetcher`.

Height Discovery
----------------
The API has no listing endpoint. Every height up to the latest final one
is addressable, so listing asks for the final head and returns the range
between the cursor and that head, capped to one batch::

    after = 99, final head = 150, batch = 20  ->  [100, 101, ..., 119]

Heights where no block was produced are still listed. Fetching their block
part returns ``null`` and the streamer passes over them.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Final

import httpx

from lake_stream.config import FastNearConfig
from lake_stream.types import (
    BlockHeight,
    HeightSkippedError,
    ObjectNotFoundError,
    TransientFetchError,
)
from lake_stream.views import StreamerMessage, decode_block, decode_streamer_message

from ..base import RetryPolicy
from .client import FastNearClient

logger = logging.getLogger(__name__)

FASTNEAR_RETRY_POLICY: Final = RetryPolicy(not_found_delay=1.0, transient_delay=1.0)
"""Both a missing height and a failed request back off for a second."""

NULL_BODY: Final = b"null"
"""Body returned for a height where no block was produced."""


class Finality(Enum):
    """Which head to ask for."""

    FINAL = "final"
    """The latest block with doomslug finality."""

    OPTIMISTIC = "optimistic"
    """The latest block produced, which may still be reorganized away."""


def _is_null(raw: bytes) -> bool:
    return raw.strip() == NULL_BODY


class FastNearFetcher:
    """Fetches heights from one FastNear endpoint."""

    def __init__(self, client: FastNearClient, max_height_batch: int = 100) -> None:
        self._client = client
        self._max_height_batch = max_height_batch

    @classmethod
    def from_config(
        cls,
        config: FastNearConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> FastNearFetcher:
        return cls(FastNearClient.from_config(config, transport), config.max_height_batch)

    @property
    def client(self) -> FastNearClient:
        return self._client

    @property
    def retry_policy(self) -> RetryPolicy:
        return FASTNEAR_RETRY_POLICY

    async def aclose(self) -> None:
        await self._client.aclose()

    # -------------------------------------------------------------------------
    # Fetcher
    # -------------------------------------------------------------------------

    async def list_new_heights(self, after: BlockHeight) -> list[BlockHeight]:
        """List the next batch of heights up to the final head."""
        final_height = await self.fetch_last_block_height(Finality.FINAL)
        upper = min(final_height, after + self._max_height_batch)
        if upper <= after:
            return []
        return list(range(after + 1, upper + 1))

    async def fetch_block(self, height: BlockHeight) -> bytes:
        """
        Raw JSON of the block part of a height.

        Raises:
            HeightSkippedError: If no block was produced at this height.
        """
        path = f"/v0/block/{height}/headers"
        raw = await self._client.fetch(path)
        if _is_null(raw):
            raise HeightSkippedError(path)
        return raw

    async def fetch_shard(self, height: BlockHeight, shard_id: int) -> bytes:
        path = f"/v0/block/{height}/shard/{shard_id}"
        raw = await self._client.fetch(path)
        if _is_null(raw):
            raise ObjectNotFoundError(path, "empty shard body")
        return raw

    # -------------------------------------------------------------------------
    # Bootstrap helpers
    # -------------------------------------------------------------------------

    async def fetch_first_block_height(self) -> BlockHeight:
        """Earliest height the service holds. Useful as a start height."""
        path = "/v0/first_block"
        raw = await self._client.fetch(path)
        if _is_null(raw):
            raise TransientFetchError(path, "no first block")
        return int(decode_streamer_message(raw).height)

    async def fetch_last_block_height(self, finality: Finality = Finality.FINAL) -> BlockHeight:
        """Height of the latest block with the given finality."""
        path = f"/v0/last_block/{finality.value}/headers"
        raw = await self._client.fetch(path)
        if _is_null(raw):
            raise TransientFetchError(path, "no last block")
        height = int(decode_block(raw).header.height)
        logger.debug("Latest %s height is %d", finality.value, height)
        return height

    async def fetch_streamer_message(self, height: BlockHeight) -> StreamerMessage | None:
        """One whole height in a single request. None if the height was skipped."""
        raw = await self._client.fetch(f"/v0/block/{height}")
        return None if _is_null(raw) else decode_streamer_message(raw)

    async def fetch_optimistic_streamer_message(
        self, height: BlockHeight
    ) -> StreamerMessage | None:
        """Like `fetch_streamer_message`, at optimistic finality."""
        raw = await self._client.fetch(f"/v0/block_opt/{height}")
        return None if _is_null(raw) else decode_streamer_message(raw)
