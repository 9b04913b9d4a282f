"""Tests for decoding stored payloads into wire views."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from lake_stream.types import DecodeError, Uint64, Uint128
from lake_stream.views import (
    StreamerMessage,
    decode_block,
    decode_shard,
    decode_streamer_message,
)
from tests.lake_stream.helpers import (
    block_hash_for,
    encode,
    make_action_receipt,
    make_block_json,
    make_receipt_outcome,
    make_shard_json,
    make_transaction,
)


class TestDecodeBlock:
    """Tests for the block part of a height."""

    def test_header_fields(self) -> None:
        """Header fields are parsed into their bounded types."""
        block = decode_block(encode(make_block_json(100, num_shards=4)))

        assert block.author == "validator.near"
        assert block.header.height == Uint64(100)
        assert block.header.hash == block_hash_for(100)
        assert block.header.prev_hash == block_hash_for(99)
        assert isinstance(block.header.total_supply, Uint128)
        assert block.header.total_supply == 1152921504606846976000000000000000
        assert block.header.timestamp_nanosec == 1_700_000_000_000_000_100

    def test_declared_chunk_count(self) -> None:
        """One chunk header per shard to fetch."""
        block = decode_block(encode(make_block_json(100, num_shards=4)))

        assert block.declared_chunk_count == 4
        assert [int(chunk.shard_id) for chunk in block.chunks] == [0, 1, 2, 3]

    def test_unknown_fields_are_ignored(self) -> None:
        """Additive format changes keep decoding."""
        payload = make_block_json(100)
        payload["header"]["brand_new_field"] = {"nested": True}
        payload["something_else"] = 1

        block = decode_block(encode(payload))

        assert block.header.height == 100

    def test_summary(self) -> None:
        """The log summary carries height, hashes and chunk count."""
        block = decode_block(encode(make_block_json(7, num_shards=2)))

        assert block.summary() == {
            "height": 7,
            "hash": block_hash_for(7),
            "prev_hash": block_hash_for(6),
            "chunks": 2,
        }

    def test_invalid_json_is_a_decode_error(self) -> None:
        """Bytes that are not JSON fail with the view name."""
        with pytest.raises(DecodeError) as exc_info:
            decode_block(b"{not json")

        assert exc_info.value.type_name == "BlockView"

    def test_missing_header_is_a_decode_error(self) -> None:
        """A required field that is absent fails validation."""
        payload = make_block_json(100)
        del payload["header"]

        with pytest.raises(DecodeError):
            decode_block(encode(payload))

    def test_negative_height_is_a_decode_error(self) -> None:
        """Heights are unsigned."""
        payload = make_block_json(100)
        payload["header"]["height"] = -5

        with pytest.raises(DecodeError):
            decode_block(encode(payload))


class TestDecodeShard:
    """Tests for one shard of a height."""

    def test_shard_without_chunk(self) -> None:
        """A shard that produced no chunk decodes with chunk None."""
        shard = decode_shard(encode(make_shard_json(3, with_chunk=False)))

        assert shard.shard_id == 3
        assert shard.chunk is None
        assert shard.receipt_execution_outcomes == ()

    def test_outcomes_and_receipts(self) -> None:
        """Executed receipts pair an outcome with its receipt."""
        receipt = make_action_receipt("r-1")
        outcome = make_receipt_outcome(receipt)
        payload = make_shard_json(0, chunk_receipts=[receipt], outcomes=[outcome])
        shard = decode_shard(encode(payload))

        assert shard.chunk is not None
        assert shard.chunk.receipts[0].receipt_id == "r-1"
        outcome = shard.receipt_execution_outcomes[0]
        assert outcome.execution_outcome.id == "r-1"
        assert outcome.receipt.receiver_id == "contract.near"

    def test_tokens_burnt_is_a_decimal_string(self) -> None:
        """Balances stored as strings parse to integers."""
        receipt = make_action_receipt("r-1")
        shard = decode_shard(encode(make_shard_json(0, outcomes=[make_receipt_outcome(receipt)])))

        outcome = shard.receipt_execution_outcomes[0].execution_outcome.outcome
        assert outcome.tokens_burnt == 242800000000000000000

    def test_transactions_stay_raw(self) -> None:
        """An unknown action inside a chunk transaction does not fail the shard."""
        transaction = make_transaction("tx-1", make_action_receipt("r-1"))
        transaction["transaction"]["actions"] = [{"FutureAction": {}}]

        shard = decode_shard(encode(make_shard_json(0, transactions=[transaction])))

        assert shard.chunk is not None
        assert shard.chunk.transactions[0]["transaction"]["hash"] == "tx-1"


class TestStreamerMessage:
    """Tests for the assembled per-height message."""

    def test_whole_height_document(self) -> None:
        """A single document holding block and shards decodes at once."""
        raw = json.dumps(
            {
                "block": make_block_json(42, num_shards=2),
                "shards": [make_shard_json(0, 42), make_shard_json(1, 42)],
            }
        )

        message = decode_streamer_message(raw)

        assert message.height == 42
        assert message.hash == block_hash_for(42)
        assert message.prev_hash == block_hash_for(41)
        assert message.is_complete

    def test_incomplete_message(self) -> None:
        """A message missing a declared shard is not complete."""
        message = StreamerMessage(
            block=decode_block(encode(make_block_json(42, num_shards=2))),
            shards=(decode_shard(encode(make_shard_json(0, 42))),),
        )

        assert not message.is_complete

    def test_messages_are_immutable(self) -> None:
        """Views are frozen."""
        message = decode_streamer_message(
            json.dumps({"block": make_block_json(1), "shards": [make_shard_json(0, 1)]})
        )

        with pytest.raises(ValidationError):
            message.shards = ()  # type: ignore[misc]
