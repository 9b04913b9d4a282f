"""Transactions included in a block's chunks."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lake_stream.types import (
    AccountId,
    CryptoHash,
    DecodeError,
    PublicKey,
    Signature,
    StrictBaseModel,
)
from lake_stream.views import TransactionWithOutcomeView, decode_transaction

from .actions import Action, actions_from_receipt_view
from .receipts import ExecutionStatus, execution_status_from_view


class Transaction(StrictBaseModel):
    """
    A signed transaction joined with the receipt it was converted into.

    Receipts, not transactions, are the authoritative record of what
    happened on chain. A transaction only tells where a chain of receipts
    began and who signed it.
    """

    transaction_hash: CryptoHash
    signer_id: AccountId
    signer_public_key: PublicKey
    signature: Signature
    receiver_id: AccountId

    status: ExecutionStatus
    """Status of the conversion into a receipt, not of the whole chain."""

    execution_outcome_id: CryptoHash

    actions_included: tuple[Action, ...]
    """Actions of the first receipt, carrying that receipt's id as metadata."""

    @classmethod
    def from_view(cls, view: TransactionWithOutcomeView | Mapping[str, Any]) -> Transaction:
        """
        Build a transaction from its wire view or its raw chunk JSON.

        Raises:
            DecodeError: If the raw JSON does not decode, or if the outcome
                does not carry the converted receipt.
        """
        if not isinstance(view, TransactionWithOutcomeView):
            view = decode_transaction(view)

        receipt = view.outcome.receipt
        if receipt is None:
            raise DecodeError("Transaction", "Transaction outcome is missing receipt")

        transaction = view.transaction
        outcome = view.outcome.execution_outcome
        return cls(
            transaction_hash=transaction.hash,
            signer_id=transaction.signer_id,
            signer_public_key=transaction.public_key,
            signature=transaction.signature,
            receiver_id=transaction.receiver_id,
            status=execution_status_from_view(outcome.outcome.status),
            execution_outcome_id=outcome.id,
            actions_included=tuple(actions_from_receipt_view(receipt)),
        )
