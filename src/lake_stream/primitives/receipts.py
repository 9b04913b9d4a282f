"""Receipts and their execution status."""

from __future__ import annotations

import json
from enum import Enum
from typing import Union

from lake_stream.types import AccountId, CryptoHash, StrictBaseModel
from lake_stream.views import (
    ActionReceiptView,
    DataReceiptView,
    ExecutionOutcomeWithReceiptView,
    ExecutionStatusView,
    FailureView,
    ReceiptView,
    SuccessReceiptIdView,
    SuccessValueView,
    UnknownStatusView,
)

from .events import Event, events_from_receipt


class ReceiptKind(Enum):
    """What a receipt carries."""

    ACTION = "Action"
    """Actions to execute on the receiver."""

    DATA = "Data"
    """The result of another receipt."""


# -----------------------------------------------------------------------------
# Execution status
# -----------------------------------------------------------------------------


class SuccessValue(StrictBaseModel):
    """Execution finished and returned a value (possibly empty)."""

    value: bytes


class SuccessReceiptId(StrictBaseModel):
    """Execution finished and its result will come from another receipt."""

    receipt_id: CryptoHash


class Failure(StrictBaseModel):
    """Execution failed. The error is kept as its JSON text."""

    message: str


class Postponed(StrictBaseModel):
    """The receipt is included in the chain but has not been executed yet."""


ExecutionStatus = Union[SuccessValue, SuccessReceiptId, Failure, Postponed]
"""Outcome of executing a receipt or a transaction."""


def execution_status_from_view(view: ExecutionStatusView) -> ExecutionStatus:
    """Map a wire status onto the domain status."""
    match view:
        case UnknownStatusView():
            return Postponed()
        case SuccessValueView(value=value):
            return SuccessValue(value=value)
        case SuccessReceiptIdView(receipt_id=receipt_id):
            return SuccessReceiptId(receipt_id=receipt_id)
        case FailureView(error=error):
            message = error if isinstance(error, str) else json.dumps(error, separators=(",", ":"))
            return Failure(message=message)
    raise TypeError(f"Unexpected execution status view: {type(view).__name__}")


# -----------------------------------------------------------------------------
# Receipts
# -----------------------------------------------------------------------------


def receipt_kind_of(view: ReceiptView) -> ReceiptKind:
    """Whether a wire receipt carries actions or data."""
    match view.receipt:
        case ActionReceiptView():
            return ReceiptKind.ACTION
        case DataReceiptView():
            return ReceiptKind.DATA
    raise TypeError(f"Unexpected receipt view: {type(view.receipt).__name__}")


class Receipt(StrictBaseModel):
    """
    A unit of work targeting one account.

    Executed receipts carry the id of their execution outcome and its logs.
    Postponed receipts (included in a chunk but not executed at this height)
    have neither.
    """

    receipt_kind: ReceiptKind
    receipt_id: CryptoHash
    receiver_id: AccountId
    predecessor_id: AccountId
    status: ExecutionStatus

    execution_outcome_id: CryptoHash | None = None
    """Id of the execution outcome. None for postponed receipts."""

    logs: tuple[str, ...] = ()
    """Log lines emitted while executing the receipt."""

    @classmethod
    def from_outcome(cls, view: ExecutionOutcomeWithReceiptView) -> Receipt:
        """Build an executed receipt from a receipt execution outcome."""
        outcome = view.execution_outcome
        return cls(
            receipt_kind=receipt_kind_of(view.receipt),
            receipt_id=view.receipt.receipt_id,
            receiver_id=view.receipt.receiver_id,
            predecessor_id=view.receipt.predecessor_id,
            status=execution_status_from_view(outcome.outcome.status),
            execution_outcome_id=outcome.id,
            logs=tuple(outcome.outcome.logs),
        )

    @classmethod
    def postponed(cls, view: ReceiptView) -> Receipt:
        """Build a receipt that is included but not yet executed."""
        return cls(
            receipt_kind=receipt_kind_of(view),
            receipt_id=view.receipt_id,
            receiver_id=view.receiver_id,
            predecessor_id=view.predecessor_id,
            status=Postponed(),
        )

    def events(self) -> list[Event]:
        """Events emitted while executing this receipt, in log order."""
        return events_from_receipt(self)
