"""
Storage providers feeding the streamer.

Two bindings ship with the package:

- `s3`: the bucket layout written by the lake indexer, read with boto3
- `fastnear`: the FastNear data HTTP API, read with httpx
"""

from .base import Fetcher, RetryPolicy
from .fastnear import FastNearClient, FastNearFetcher
from .s3 import LakeS3Client, S3Fetcher

__all__ = [
    "Fetcher",
    "RetryPolicy",
    "FastNearClient",
    "FastNearFetcher",
    "LakeS3Client",
    "S3Fetcher",
]
