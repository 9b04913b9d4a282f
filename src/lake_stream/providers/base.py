"""
The contract between the streamer and a storage provider.

A provider answers three questions about the remote store:

1. Which heights exist past a given one?
2. What are the raw bytes of a height's block part?
3. What are the raw bytes of one shard of a height?

Providers return raw bytes and classify failures. They never decode, never
sleep and never retry: the streamer owns the retry loop and asks the
provider only how long to wait between attempts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from lake_stream.types import BlockHeight


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """How long to wait before fetching an object again."""

    not_found_delay: float
    """Seconds to wait after the object was reported missing."""

    transient_delay: float
    """Seconds to wait after a network, throttling or body-read failure."""


class Fetcher(Protocol):
    """
    Protocol for storage providers.

    Implementers should:
    - Raise `ObjectNotFoundError` when an object is not written yet
    - Raise `TransientFetchError` for anything worth retrying
    - Raise `HeightSkippedError` from `fetch_block` only, and only when the
      store positively reports that no block exists at the height
    """

    @property
    def retry_policy(self) -> RetryPolicy:
        """Delays the streamer applies between attempts."""
        ...

    async def list_new_heights(self, after: BlockHeight) -> list[BlockHeight]:
        """
        List heights strictly greater than `after`.

        Args:
            after: Exclusive lower bound. May be -1 to list from genesis.

        Returns:
            Ascending heights, possibly empty when nothing new exists yet.
        """
        ...

    async def fetch_block(self, height: BlockHeight) -> bytes:
        """Raw JSON of the block part of a height."""
        ...

    async def fetch_shard(self, height: BlockHeight, shard_id: int) -> bytes:
        """Raw JSON of one shard of a height."""
        ...
