"""Hooks run around the consumer callback, and the hooks that ship with the package."""

from .base import CompositeContext, LakeContext
from .parent_transaction_cache import DEFAULT_CACHE_SIZE, ParentTransactionCache

__all__ = [
    "LakeContext",
    "CompositeContext",
    "ParentTransactionCache",
    "DEFAULT_CACHE_SIZE",
]
