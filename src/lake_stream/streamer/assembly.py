"""
Assembly of one height: block part first, then every shard.

Retry Policy
------------
Each object is fetched until it arrives. Failures are classified by the
provider and the wait between attempts comes from its `RetryPolicy`:

- `ObjectNotFoundError`: the object is not written yet
- `TransientFetchError`: the network or the store hiccuped

A height where the provider reports no block resolves to None. Anything
else escapes, in particular a `DecodeError` on bytes that did arrive:
refetching the same bytes would fail the same way.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from lake_stream import metrics
from lake_stream.providers import Fetcher, RetryPolicy
from lake_stream.types import (
    BlockHeight,
    HeightSkippedError,
    ObjectNotFoundError,
    TransientFetchError,
)
from lake_stream.views import StreamerMessage, decode_block, decode_shard

logger = logging.getLogger(__name__)


async def fetch_with_retry(fetch: Callable[[], Awaitable[bytes]], policy: RetryPolicy) -> bytes:
    """Call `fetch` until it returns, sleeping between retryable failures."""
    while True:
        try:
            return await fetch()
        except ObjectNotFoundError as exc:
            reason, delay = "not_found", policy.not_found_delay
            logger.debug("Object %s not found yet, retrying in %.1fs", exc.key, delay)
        except TransientFetchError as exc:
            reason, delay = "transient", policy.transient_delay
            logger.debug("Transient failure on %s, retrying in %.1fs: %s", exc.key, delay, exc)

        metrics.fetch_retries.labels(reason=reason).inc()
        await asyncio.sleep(delay)


async def fetch_streamer_message(fetcher: Fetcher, height: BlockHeight) -> StreamerMessage | None:
    """
    Fetch and decode everything stored for one height.

    Shards are fetched concurrently once the block part declares how many
    there are. The height resolves only when all of them arrived.

    Returns:
        The assembled message, or None if no block exists at this height.

    Raises:
        DecodeError: If any payload fails validation.
    """
    policy = fetcher.retry_policy
    started = time.perf_counter()

    try:
        block_raw = await fetch_with_retry(lambda: fetcher.fetch_block(height), policy)
    except HeightSkippedError:
        logger.debug("Height %d was skipped by the chain", height)
        metrics.skipped_heights.inc()
        return None

    block = decode_block(block_raw)
    shard_raws = await asyncio.gather(
        *(
            fetch_with_retry(
                lambda shard_id=shard_id: fetcher.fetch_shard(height, shard_id), policy
            )
            for shard_id in range(block.declared_chunk_count)
        )
    )
    message = StreamerMessage(block=block, shards=tuple(decode_shard(raw) for raw in shard_raws))

    metrics.fetch_time.observe(time.perf_counter() - started)
    return message
