"""Tests for the parent transaction cache."""

from __future__ import annotations

import pytest

from lake_stream.context import LakeContext, ParentTransactionCache
from lake_stream.primitives import Block
from tests.lake_stream.helpers import (
    encode,
    make_action_receipt,
    make_block_json,
    make_receipt_outcome,
    make_shard_json,
    make_transaction,
)


def _block(height: int, transactions: list | None = None, executed: list | None = None) -> Block:
    shard = make_shard_json(
        0,
        height,
        transactions=transactions,
        outcomes=[make_receipt_outcome(receipt) for receipt in executed or []],
    )
    return Block.from_json(encode(make_block_json(height)), [encode(shard)])


def _tx(index: int, signer: str = "alice.near", receiver: str = "token.near") -> dict:
    receipt = make_action_receipt(f"r-{index}", receiver_id=receiver, signer_id=signer)
    return make_transaction(f"tx-{index}", receipt, signer_id=signer, receiver_id=receiver)


class TestParentTransactionCache:
    """Tests for recording and resolving receipt origins."""

    def test_is_a_lake_context(self) -> None:
        assert isinstance(ParentTransactionCache(), LakeContext)

    def test_cache_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            ParentTransactionCache(cache_size=0)

    def test_records_first_receipt_of_each_transaction(self) -> None:
        cache = ParentTransactionCache()

        cache.execute_before_run(_block(1, transactions=[_tx(1), _tx(2)]))

        assert len(cache) == 2
        assert "r-1" in cache
        assert cache.get_parent_transaction_hash("r-2") == "tx-2"
        assert cache.get_parent_transaction_hash("r-3") is None

    def test_account_filter(self) -> None:
        """Only transactions touching a watched account are cached."""
        cache = ParentTransactionCache(for_accounts=["token.near"])

        cache.execute_before_run(
            _block(
                1,
                transactions=[
                    _tx(1, signer="alice.near", receiver="token.near"),
                    _tx(2, signer="token.near", receiver="other.near"),
                    _tx(3, signer="alice.near", receiver="other.near"),
                ],
            )
        )

        assert cache.accounts == frozenset({"token.near"})
        assert "r-1" in cache and "r-2" in cache
        assert "r-3" not in cache

    def test_least_recently_used_is_evicted(self) -> None:
        cache = ParentTransactionCache(cache_size=2)
        cache.execute_before_run(_block(1, transactions=[_tx(1), _tx(2)]))

        cache.execute_before_run(_block(2, transactions=[_tx(3)]))

        assert len(cache) == 2
        assert "r-1" not in cache
        assert "r-3" in cache

    def test_executed_receipts_are_refreshed(self) -> None:
        """A receipt executed in a block moves to the fresh end."""
        cache = ParentTransactionCache(cache_size=2)
        first = make_action_receipt("r-1")
        cache.execute_before_run(_block(1, transactions=[_tx(1), _tx(2)]))

        cache.execute_before_run(_block(2, executed=[first]))
        cache.execute_before_run(_block(3, transactions=[_tx(3)]))

        assert "r-1" in cache
        assert "r-2" not in cache

    def test_lookup_refreshes_entry(self) -> None:
        cache = ParentTransactionCache(cache_size=2)
        cache.execute_before_run(_block(1, transactions=[_tx(1), _tx(2)]))

        cache.get_parent_transaction_hash("r-1")
        cache.execute_before_run(_block(2, transactions=[_tx(3)]))

        assert "r-1" in cache
        assert "r-2" not in cache
