"""
Configuration for the lake streamer and its providers.

Every object here is an immutable dataclass with documented defaults.
Invalid values are rejected at construction with a `ValueError`, so a
streamer never starts from a configuration it cannot honor.

Credentials are not configured here. The S3 provider relies on the boto3
default credential chain; the FastNear provider takes an optional token.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from lake_stream.types import BlockHeight

DEFAULT_PRELOAD_POOL_SIZE: Final[int] = 100
"""Default prefetch window: heights fetched ahead of the consumer."""

DEFAULT_CONCURRENCY: Final[int] = 1
"""Default number of blocks handed to the consumer callback at once."""

FASTNEAR_MAINNET_ENDPOINT: Final = "https://mainnet.neardata.xyz"
"""Public FastNear data endpoint for mainnet."""

FASTNEAR_TESTNET_ENDPOINT: Final = "https://testnet.neardata.xyz"
"""Public FastNear data endpoint for testnet."""


@dataclass(frozen=True, slots=True)
class LakeConfig:
    """Streamer settings shared by every provider."""

    start_block_height: BlockHeight
    """First height to deliver. Nothing is persisted between runs."""

    blocks_preload_pool_size: int = DEFAULT_PRELOAD_POOL_SIZE
    """
    Prefetch window size.

    Bounds the number of heights fetched concurrently and the capacity of
    the delivery queue.
    """

    concurrency: int = DEFAULT_CONCURRENCY
    """Number of consumer callbacks allowed to run at once."""

    def __post_init__(self) -> None:
        """Reject values the streamer cannot honor."""
        if self.start_block_height < 0:
            raise ValueError(
                f"start_block_height must be non-negative, got {self.start_block_height}"
            )
        if self.blocks_preload_pool_size < 1:
            raise ValueError(
                f"blocks_preload_pool_size must be at least 1, got {self.blocks_preload_pool_size}"
            )
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {self.concurrency}")


@dataclass(frozen=True, slots=True)
class S3Config:
    """Where the lake bucket lives."""

    bucket: str
    """Bucket name, e.g. `near-lake-data-mainnet`."""

    region: str
    """AWS region of the bucket."""

    endpoint_url: str | None = None
    """Custom endpoint for S3-compatible stores. None for AWS."""

    def __post_init__(self) -> None:
        """Reject an empty bucket or region."""
        if not self.bucket:
            raise ValueError("bucket must not be empty")
        if not self.region:
            raise ValueError("region must not be empty")

    @classmethod
    def mainnet(cls) -> S3Config:
        return cls(bucket="near-lake-data-mainnet", region="eu-central-1")

    @classmethod
    def testnet(cls) -> S3Config:
        return cls(bucket="near-lake-data-testnet", region="eu-central-1")

    @classmethod
    def betanet(cls) -> S3Config:
        return cls(bucket="near-lake-data-betanet", region="us-east-1")


@dataclass(frozen=True, slots=True)
class FastNearConfig:
    """How to reach a FastNear data endpoint."""

    endpoint: str
    """Base URL, without the `/v0` prefix."""

    authorization_token: str | None = None
    """Bearer token. Public endpoints work without one, with stricter limits."""

    timeout: float = 30.0
    """Per-request timeout in seconds."""

    max_height_batch: int = 100
    """Maximum number of heights returned by one listing."""

    def __post_init__(self) -> None:
        """Reject an empty endpoint and non-positive limits."""
        if not self.endpoint:
            raise ValueError("endpoint must not be empty")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.max_height_batch < 1:
            raise ValueError(f"max_height_batch must be at least 1, got {self.max_height_batch}")

    @classmethod
    def mainnet(cls, authorization_token: str | None = None) -> FastNearConfig:
        return cls(endpoint=FASTNEAR_MAINNET_ENDPOINT, authorization_token=authorization_token)

    @classmethod
    def testnet(cls, authorization_token: str | None = None) -> FastNearConfig:
        return cls(endpoint=FASTNEAR_TESTNET_ENDPOINT, authorization_token=authorization_token)
