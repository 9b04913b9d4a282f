"""
Shared pytest fixtures for all lake_stream tests.

Provides core fixtures used across multiple test modules.
"""

from __future__ import annotations

import pytest

from lake_stream.primitives import Block
from tests.lake_stream.helpers import (
    MockFetcher,
    encode,
    make_account_update,
    make_action_receipt,
    make_block_json,
    make_data_receipt,
    make_event_log,
    make_function_call,
    make_receipt_outcome,
    make_shard_json,
    make_transaction,
    make_transfer,
)


@pytest.fixture(autouse=True)
def no_streamer_delays(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the driving loop and the height cursor without sleeping."""
    monkeypatch.setattr("lake_stream.streamer.service.CHAIN_RESET_DELAY", 0.0)
    monkeypatch.setattr("lake_stream.streamer.heights.EMPTY_LISTING_BACKOFF", 0.01)
    monkeypatch.setattr("lake_stream.streamer.heights.LISTING_ERROR_BACKOFF", 0.0)


@pytest.fixture
def mock_fetcher() -> MockFetcher:
    """A chain of ten linked heights starting at 100, one shard each."""
    return MockFetcher(range(100, 110))


@pytest.fixture
def sample_block() -> Block:
    """
    One height with two shards.

    Shard 0 includes a transaction converted into receipt `r-tx`, executes
    an action receipt emitting two events, and executes a data receipt.
    Shard 1 executes a function call and includes one postponed receipt.
    """
    tx_receipt = make_action_receipt("r-tx", receiver_id="token.near", actions=[make_transfer(5)])
    events_receipt = make_action_receipt(
        "r-events",
        receiver_id="nft.near",
        actions=[make_function_call("nft_mint"), make_transfer(1)],
    )
    data_receipt = make_data_receipt("r-data")
    call_receipt = make_action_receipt(
        "r-call",
        receiver_id="token.near",
        predecessor_id="bob.near",
        signer_id="bob.near",
        actions=[make_function_call("ft_transfer", deposit=1)],
    )
    postponed = make_action_receipt("r-postponed", receiver_id="slow.near")

    shard_0 = make_shard_json(
        0,
        height=100,
        transactions=[make_transaction("tx-1", tx_receipt, receiver_id="token.near")],
        chunk_receipts=[events_receipt],
        outcomes=[
            make_receipt_outcome(
                events_receipt,
                logs=[
                    "plain debug line",
                    make_event_log("nft_mint", data=[{"owner_id": "alice.near"}]),
                    "EVENT_JSON:{not json",
                    make_event_log("nft_transfer"),
                ],
            ),
            make_receipt_outcome(data_receipt),
        ],
        state_changes=[make_account_update("nft.near", "r-events")],
    )
    shard_1 = make_shard_json(
        1,
        height=100,
        chunk_receipts=[call_receipt, postponed],
        outcomes=[
            make_receipt_outcome(
                call_receipt,
                logs=[make_event_log("ft_transfer", standard="nep141")],
                status={"Failure": {"ActionError": {"index": 0, "kind": "AccountDoesNotExist"}}},
            )
        ],
    )
    return Block.from_json(
        encode(make_block_json(100, num_shards=2)),
        [encode(shard_0), encode(shard_1)],
    )
