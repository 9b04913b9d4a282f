"""Wire views of receipts and execution outcomes."""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import Base64Bytes, Discriminator, Tag

from lake_stream.types import AccountId, CryptoHash, PublicKey, Uint64, Uint128, WireModel

from .actions import ActionView
from .tagged import TaggedView, external_tag

# -----------------------------------------------------------------------------
# Receipts
# -----------------------------------------------------------------------------


class DataReceiverView(WireModel):
    """Where the result of an action receipt is sent."""

    data_id: CryptoHash
    receiver_id: AccountId


class ActionReceiptView(TaggedView):
    """A receipt carrying actions to execute on the receiver."""

    TAG = "Action"

    signer_id: AccountId
    """Account that signed the originating transaction."""

    signer_public_key: PublicKey
    """Key that signed the originating transaction."""

    gas_price: Uint128
    output_data_receivers: tuple[DataReceiverView, ...] = ()
    input_data_ids: tuple[CryptoHash, ...] = ()
    actions: tuple[ActionView, ...] = ()


class DataReceiptView(TaggedView):
    """A receipt carrying the result of a previous receipt."""

    TAG = "Data"

    data_id: CryptoHash
    data: Base64Bytes | None = None


ReceiptEnumView = Annotated[
    Union[
        Annotated[ActionReceiptView, Tag("Action")],
        Annotated[DataReceiptView, Tag("Data")],
    ],
    Discriminator(external_tag),
]


class ReceiptView(WireModel):
    """A receipt as included in a chunk or attached to an outcome."""

    predecessor_id: AccountId
    """Account that created the receipt."""

    receiver_id: AccountId
    """Account the receipt is executed on."""

    receipt_id: CryptoHash
    """Unique id of the receipt."""

    receipt: ReceiptEnumView
    """Action or data payload."""


# -----------------------------------------------------------------------------
# Execution outcomes
# -----------------------------------------------------------------------------


class UnknownStatusView(TaggedView):
    """The outcome is not known yet."""

    TAG = "Unknown"


class SuccessValueView(TaggedView):
    """Execution finished and returned a value."""

    TAG = "SuccessValue"
    NEWTYPE_FIELD = "value"

    value: Base64Bytes


class SuccessReceiptIdView(TaggedView):
    """Execution finished and handed its result to another receipt."""

    TAG = "SuccessReceiptId"
    NEWTYPE_FIELD = "receipt_id"

    receipt_id: CryptoHash


class FailureView(TaggedView):
    """
    Execution failed.

    The error is a deeply nested enum. It is kept as raw JSON.
    """

    TAG = "Failure"
    NEWTYPE_FIELD = "error"

    error: Any


ExecutionStatusView = Annotated[
    Union[
        Annotated[UnknownStatusView, Tag("Unknown")],
        Annotated[SuccessValueView, Tag("SuccessValue")],
        Annotated[SuccessReceiptIdView, Tag("SuccessReceiptId")],
        Annotated[FailureView, Tag("Failure")],
    ],
    Discriminator(external_tag),
]


class ExecutionOutcomeView(WireModel):
    """The result of executing a transaction or a receipt."""

    logs: tuple[str, ...] = ()
    """Log lines emitted during execution, in emission order."""

    receipt_ids: tuple[CryptoHash, ...] = ()
    """Receipts created by this execution."""

    gas_burnt: Uint64
    tokens_burnt: Uint128
    executor_id: AccountId
    status: ExecutionStatusView


class ExecutionOutcomeWithIdView(WireModel):
    """An execution outcome together with the id of what was executed."""

    id: CryptoHash
    """Id of the executed transaction or receipt."""

    block_hash: CryptoHash
    """Block in which the execution happened."""

    outcome: ExecutionOutcomeView


class ExecutionOutcomeWithReceiptView(WireModel):
    """An executed receipt paired with its outcome."""

    execution_outcome: ExecutionOutcomeWithIdView
    receipt: ReceiptView


class ExecutionOutcomeWithOptionalReceiptView(WireModel):
    """A transaction outcome, with the receipt it was converted into."""

    execution_outcome: ExecutionOutcomeWithIdView
    receipt: ReceiptView | None = None
