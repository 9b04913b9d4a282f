"""Wire views of one shard of a height (`shard_{n}.json`)."""

from __future__ import annotations

from typing import Any

from lake_stream.types import AccountId, CryptoHash, PublicKey, Signature, Uint64, WireModel

from .actions import ActionView
from .block import ChunkHeaderView
from .receipts import (
    ExecutionOutcomeWithOptionalReceiptView,
    ExecutionOutcomeWithReceiptView,
    ReceiptView,
)
from .state_changes import StateChangeWithCauseView


class SignedTransactionView(WireModel):
    """A transaction as signed by its sender."""

    signer_id: AccountId
    public_key: PublicKey
    nonce: Uint64
    receiver_id: AccountId
    actions: tuple[ActionView, ...] = ()
    signature: Signature
    hash: CryptoHash
    priority_fee: Uint64 | None = None


class TransactionWithOutcomeView(WireModel):
    """A transaction included in a chunk, with its execution outcome."""

    transaction: SignedTransactionView
    outcome: ExecutionOutcomeWithOptionalReceiptView


class ChunkView(WireModel):
    """The body of a chunk produced for this height."""

    author: AccountId
    header: ChunkHeaderView
    transactions: tuple[dict[str, Any], ...] = ()
    """
    Transactions included in the chunk, as raw JSON.

    Each one is decoded on its own with `decode_transaction`, so a transaction
    with an action shape this package does not know is dropped alone.
    """

    receipts: tuple[ReceiptView, ...] = ()
    """Receipts included in the chunk, executed or not."""


class ShardView(WireModel):
    """Everything that happened on one shard at one height."""

    shard_id: Uint64

    chunk: ChunkView | None = None
    """None when the shard produced no chunk at this height."""

    receipt_execution_outcomes: tuple[ExecutionOutcomeWithReceiptView, ...] = ()
    """Receipts executed on this shard at this height."""

    state_changes: tuple[StateChangeWithCauseView, ...] = ()
