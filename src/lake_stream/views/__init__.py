"""
Wire views: storage payloads as validated, immutable pydantic models.

Parsing a payload into these views is the only decoding the streamer does
itself. A payload that fails validation raises DecodeError, which stops the
streamer. The ergonomic domain model lives in `lake_stream.primitives`.
"""

from .actions import (
    AccessKeyPermissionView,
    AccessKeyView,
    ActionView,
    AddKeyView,
    CreateAccountView,
    DelegateActionBodyView,
    DelegateView,
    DeleteAccountView,
    DeleteKeyView,
    DeployContractView,
    FullAccessPermissionView,
    FunctionCallPermissionView,
    FunctionCallView,
    StakeView,
    TransferView,
)
from .block import BlockHeaderView, BlockView, ChunkHeaderView, ValidatorStakeView
from .message import (
    StreamerMessage,
    decode_block,
    decode_payload,
    decode_shard,
    decode_streamer_message,
    decode_transaction,
    raise_decode_error,
)
from .receipts import (
    ActionReceiptView,
    DataReceiptView,
    ExecutionOutcomeView,
    ExecutionOutcomeWithIdView,
    ExecutionOutcomeWithOptionalReceiptView,
    ExecutionOutcomeWithReceiptView,
    ExecutionStatusView,
    FailureView,
    ReceiptView,
    SuccessReceiptIdView,
    SuccessValueView,
    UnknownStatusView,
)
from .shard import ChunkView, ShardView, SignedTransactionView, TransactionWithOutcomeView
from .state_changes import AccountView, StateChangeWithCauseView

__all__ = [
    # Message
    "StreamerMessage",
    "decode_block",
    "decode_payload",
    "decode_shard",
    "decode_streamer_message",
    "decode_transaction",
    "raise_decode_error",
    # Block
    "BlockView",
    "BlockHeaderView",
    "ChunkHeaderView",
    "ValidatorStakeView",
    # Shard
    "ShardView",
    "ChunkView",
    "SignedTransactionView",
    "TransactionWithOutcomeView",
    # Receipts and outcomes
    "ReceiptView",
    "ActionReceiptView",
    "DataReceiptView",
    "ExecutionOutcomeView",
    "ExecutionOutcomeWithIdView",
    "ExecutionOutcomeWithReceiptView",
    "ExecutionOutcomeWithOptionalReceiptView",
    "ExecutionStatusView",
    "UnknownStatusView",
    "SuccessValueView",
    "SuccessReceiptIdView",
    "FailureView",
    # Actions
    "ActionView",
    "CreateAccountView",
    "DeployContractView",
    "FunctionCallView",
    "TransferView",
    "StakeView",
    "AddKeyView",
    "DeleteKeyView",
    "DeleteAccountView",
    "DelegateView",
    "DelegateActionBodyView",
    "AccessKeyView",
    "AccessKeyPermissionView",
    "FullAccessPermissionView",
    "FunctionCallPermissionView",
    # State changes
    "StateChangeWithCauseView",
    "AccountView",
]
