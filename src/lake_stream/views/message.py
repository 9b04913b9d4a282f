"""The assembled per-height message and payload decoding."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NoReturn, TypeVar

from pydantic import ValidationError

from lake_stream.types import (
    CryptoHash,
    DecodeError,
    NestedDelegateError,
    Uint64,
    UnknownVariantError,
    WireModel,
)

from .actions import NESTED_DELEGATE_ERROR
from .block import BlockView
from .shard import ShardView, TransactionWithOutcomeView

M = TypeVar("M", bound=WireModel)

UNKNOWN_TAG_ERROR = "union_tag_invalid"
"""Validation error type pydantic reports for a tag no variant claims."""


class StreamerMessage(WireModel):
    """
    Everything stored for one height: the block and all of its shards.

    This is the unit the streamer commits to delivering. Once assembled,
    ``len(shards) == block.declared_chunk_count``.
    """

    block: BlockView
    shards: tuple[ShardView, ...] = ()

    @property
    def height(self) -> Uint64:
        """Height of the block."""
        return self.block.header.height

    @property
    def hash(self) -> CryptoHash:
        """Hash of the block."""
        return self.block.header.hash

    @property
    def prev_hash(self) -> CryptoHash:
        """Hash the block declares as its predecessor."""
        return self.block.header.prev_hash

    @property
    def is_complete(self) -> bool:
        """Whether every declared shard is present."""
        return len(self.shards) == self.block.declared_chunk_count


def decode_payload(model: type[M], raw: bytes | str) -> M:
    """
    Parse a JSON payload into a wire view.

    Raises:
        NestedDelegateError: If a delegate action wraps another delegate action.
        UnknownVariantError: If a tagged value names no known variant.
        DecodeError: If the payload is not valid JSON or does not match the view.
    """
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise_decode_error(model.__name__, exc)


def raise_decode_error(type_name: str, exc: ValidationError) -> NoReturn:
    """Translate a pydantic validation failure into the decode error hierarchy."""
    errors = exc.errors()
    if any(error["type"] == NESTED_DELEGATE_ERROR for error in errors):
        raise NestedDelegateError() from exc
    for error in errors:
        if error["type"] == UNKNOWN_TAG_ERROR:
            raise UnknownVariantError(type_name, error.get("ctx", {}).get("tag")) from exc
    raise DecodeError(type_name, str(exc)) from exc


def decode_block(raw: bytes | str) -> BlockView:
    """Parse a `block.json` payload."""
    return decode_payload(BlockView, raw)


def decode_shard(raw: bytes | str) -> ShardView:
    """Parse a `shard_{n}.json` payload."""
    return decode_payload(ShardView, raw)


def decode_streamer_message(raw: bytes | str) -> StreamerMessage:
    """Parse a whole-height payload (block and shards in one document)."""
    return decode_payload(StreamerMessage, raw)


def decode_transaction(raw: Mapping[str, Any]) -> TransactionWithOutcomeView:
    """
    Validate one raw chunk transaction.

    Raises:
        DecodeError: If the transaction or one of its actions does not match the view.
    """
    try:
        return TransactionWithOutcomeView.model_validate(raw)
    except ValidationError as exc:
        raise_decode_error(TransactionWithOutcomeView.__name__, exc)
