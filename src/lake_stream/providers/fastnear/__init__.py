"""FastNear data API provider backed by httpx."""

from .client import MAX_REDIRECTS, FastNearClient
from .fetchers import FASTNEAR_RETRY_POLICY, FastNearFetcher, Finality

__all__ = [
    "FastNearClient",
    "FastNearFetcher",
    "FASTNEAR_RETRY_POLICY",
    "Finality",
    "MAX_REDIRECTS",
]
