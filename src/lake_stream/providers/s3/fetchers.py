"""The lake bucket as a streamer `Fetcher`."""

from __future__ import annotations

import logging
from typing import Final

from lake_stream.config import S3Config
from lake_stream.types import BlockHeight

from ..base import RetryPolicy
from .client import LakeS3Client

logger = logging.getLogger(__name__)

HEIGHT_DIGITS: Final = 12
"""Zero-padding of heights in object keys."""

S3_RETRY_POLICY: Final = RetryPolicy(not_found_delay=0.0, transient_delay=1.0)
"""
Missing objects are retried at once.

A height listed by the bucket is being written right now, so its parts
show up within milliseconds. Transient failures back off for a second.
"""


def block_key(height: BlockHeight) -> str:
    """Key of the block part of a height."""
    return f"{height:0{HEIGHT_DIGITS}d}/block.json"


def shard_key(height: BlockHeight, shard_id: int) -> str:
    """Key of one shard of a height."""
    return f"{height:0{HEIGHT_DIGITS}d}/shard_{shard_id}.json"


class S3Fetcher:
    """Fetches heights from one lake bucket."""

    def __init__(self, client: LakeS3Client, bucket: str) -> None:
        self._client = client
        self._bucket = bucket

    @classmethod
    def from_config(cls, config: S3Config) -> S3Fetcher:
        return cls(LakeS3Client.from_config(config), config.bucket)

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def retry_policy(self) -> RetryPolicy:
        return S3_RETRY_POLICY

    async def list_new_heights(self, after: BlockHeight) -> list[BlockHeight]:
        """
        List heights strictly greater than `after`, one page at a time.

        Directory names that are not heights are ignored.
        """
        start_after = f"{after + 1:0{HEIGHT_DIGITS}d}"
        prefixes = await self._client.list_common_prefixes(self._bucket, start_after)

        heights = []
        for prefix in prefixes:
            try:
                height = int(prefix)
            except ValueError:
                logger.debug("Ignoring non-height prefix %r in %s", prefix, self._bucket)
                continue
            if height > after:
                heights.append(height)
        return sorted(heights)

    async def fetch_block(self, height: BlockHeight) -> bytes:
        return await self._client.get_object_bytes(self._bucket, block_key(height))

    async def fetch_shard(self, height: BlockHeight, shard_id: int) -> bytes:
        return await self._client.get_object_bytes(self._bucket, shard_key(height, shard_id))
