"""Reusable type definitions for the lake streamer."""

from .base import LakeModel, StrictBaseModel, WireModel
from .exceptions import (
    DecodeError,
    FastNearError,
    FetchError,
    HeightSkippedError,
    LakeError,
    NestedDelegateError,
    ObjectNotFoundError,
    TransientFetchError,
    UnknownVariantError,
)
from .identifiers import AccountId, BlockHeight, CryptoHash, PublicKey, Signature
from .uint import BaseUint, Uint32, Uint64, Uint128

__all__ = [
    # Core types
    "BaseUint",
    "Uint32",
    "Uint64",
    "Uint128",
    "LakeModel",
    "StrictBaseModel",
    "WireModel",
    # Identifiers
    "AccountId",
    "BlockHeight",
    "CryptoHash",
    "PublicKey",
    "Signature",
    # Exceptions
    "LakeError",
    "DecodeError",
    "UnknownVariantError",
    "NestedDelegateError",
    "FetchError",
    "ObjectNotFoundError",
    "TransientFetchError",
    "HeightSkippedError",
    "FastNearError",
]
