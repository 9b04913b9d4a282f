"""
Requester-pays S3 access for the lake bucket.

The bucket layout written by the lake indexer is one directory per height::

    000000000100/block.json
    000000000100/shard_0.json
    000000000100/shard_1.json
    000000000101/block.json
    ...

Heights are zero-padded to 12 digits so lexicographic order of the keys is
numeric order of the heights. Listing with a `/` delimiter therefore yields
one common prefix per height, in ascending order.

boto3 is blocking. Every call runs in a worker thread so the event loop
keeps serving the prefetch window while a request is in flight.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Final

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from lake_stream.config import S3Config
from lake_stream.types import ObjectNotFoundError, TransientFetchError

logger = logging.getLogger(__name__)

REQUEST_PAYER: Final = "requester"
"""The lake buckets are requester-pays. Every request must acknowledge it."""

MAX_KEYS: Final = 1000
"""Largest page S3 returns for one listing."""

NOT_FOUND_CODES: Final = frozenset({"NoSuchKey", "404", "NotFound"})
"""Error codes meaning the object does not exist (yet)."""


class LakeS3Client:
    """
    Thin async wrapper over a boto3 S3 client.

    Translates botocore failures into the fetch error hierarchy:

    - a missing key becomes `ObjectNotFoundError`
    - any other client error, transport error or body read failure becomes
      `TransientFetchError`
    """

    def __init__(self, s3: Any) -> None:
        """
        Wrap an existing boto3 S3 client.

        Args:
            s3: A client created with `boto3.client("s3", ...)`.
        """
        self._s3 = s3

    @classmethod
    def from_config(cls, config: S3Config) -> LakeS3Client:
        """Create a client for the bucket's region, using default credentials."""
        s3 = boto3.client(
            "s3",
            region_name=config.region,
            endpoint_url=config.endpoint_url,
            config=BotoConfig(retries={"max_attempts": 3, "mode": "standard"}),
        )
        return cls(s3)

    async def get_object_bytes(self, bucket: str, key: str) -> bytes:
        """
        Download one object in full.

        Raises:
            ObjectNotFoundError: If the key does not exist.
            TransientFetchError: On any other failure.
        """
        return await asyncio.to_thread(self._get_object_bytes, bucket, key)

    async def list_common_prefixes(self, bucket: str, start_after: str) -> list[str]:
        """
        List top-level directory names sorting after `start_after`.

        Returns:
            Directory names without the trailing delimiter, in key order.

        Raises:
            TransientFetchError: If the listing fails.
        """
        return await asyncio.to_thread(self._list_common_prefixes, bucket, start_after)

    def _get_object_bytes(self, bucket: str, key: str) -> bytes:
        try:
            response = self._s3.get_object(Bucket=bucket, Key=key, RequestPayer=REQUEST_PAYER)
            return response["Body"].read()
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from exc
            raise TransientFetchError(key, f"S3 error {code}") from exc
        except BotoCoreError as exc:
            raise TransientFetchError(key, str(exc)) from exc

    def _list_common_prefixes(self, bucket: str, start_after: str) -> list[str]:
        try:
            response = self._s3.list_objects_v2(
                Bucket=bucket,
                Delimiter="/",
                MaxKeys=MAX_KEYS,
                StartAfter=start_after,
                RequestPayer=REQUEST_PAYER,
            )
        except (ClientError, BotoCoreError) as exc:
            raise TransientFetchError(f"{bucket}/?start-after={start_after}", str(exc)) from exc

        prefixes = [
            entry["Prefix"].split("/", 1)[0]
            for entry in response.get("CommonPrefixes", [])
            if entry.get("Prefix")
        ]
        logger.debug("Listed %d prefixes after %s in %s", len(prefixes), start_after, bucket)
        return prefixes
