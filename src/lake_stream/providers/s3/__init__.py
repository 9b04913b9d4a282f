"""Lake bucket provider backed by boto3."""

from .client import LakeS3Client
from .fetchers import S3_RETRY_POLICY, S3Fetcher, block_key, shard_key

__all__ = [
    "LakeS3Client",
    "S3Fetcher",
    "S3_RETRY_POLICY",
    "block_key",
    "shard_key",
]
