"""
Domain model decoded from wire views.

Every object here is an immutable value built from one height's message.
Variant families (actions, delegate actions, execution statuses, state
change causes and values) are closed unions of small models, meant to be
consumed with pattern matching.
"""

from .actions import (
    Action,
    ActionMetadata,
    AddKey,
    CreateAccount,
    Delegate,
    DeleteAccount,
    DeleteKey,
    DeployContract,
    FunctionCall,
    Stake,
    Transfer,
    action_from_view,
    actions_from_receipt_view,
    decode_actions,
)
from .block import Block, BlockHeader
from .delegate_actions import (
    DelegateAction,
    DelegateAddKey,
    DelegateCreateAccount,
    DelegateDeleteAccount,
    DelegateDeleteKey,
    DelegateDeployContract,
    DelegateFunctionCall,
    DelegateStake,
    DelegateTransfer,
    delegate_actions_from_view,
)
from .events import EVENT_LOG_PREFIX, Event, RawEvent, events_from_receipt
from .receipts import (
    ExecutionStatus,
    Failure,
    Postponed,
    Receipt,
    ReceiptKind,
    SuccessReceiptId,
    SuccessValue,
    execution_status_from_view,
)
from .state_changes import (
    AccessKeyDeletion,
    AccessKeyUpdate,
    AccountDeletion,
    AccountUpdate,
    ContractCodeDeletion,
    ContractCodeUpdate,
    DataDeletion,
    DataUpdate,
    StateChange,
    StateChangeCause,
    StateChangeValue,
)
from .transactions import Transaction

__all__ = [
    # Block
    "Block",
    "BlockHeader",
    # Receipts
    "Receipt",
    "ReceiptKind",
    "ExecutionStatus",
    "SuccessValue",
    "SuccessReceiptId",
    "Failure",
    "Postponed",
    "execution_status_from_view",
    # Actions
    "Action",
    "ActionMetadata",
    "CreateAccount",
    "DeployContract",
    "FunctionCall",
    "Transfer",
    "Stake",
    "AddKey",
    "DeleteKey",
    "DeleteAccount",
    "Delegate",
    "action_from_view",
    "actions_from_receipt_view",
    "decode_actions",
    # Delegate actions
    "DelegateAction",
    "DelegateCreateAccount",
    "DelegateDeployContract",
    "DelegateFunctionCall",
    "DelegateTransfer",
    "DelegateStake",
    "DelegateAddKey",
    "DelegateDeleteKey",
    "DelegateDeleteAccount",
    "delegate_actions_from_view",
    # Transactions
    "Transaction",
    # Events
    "EVENT_LOG_PREFIX",
    "Event",
    "RawEvent",
    "events_from_receipt",
    # State changes
    "StateChange",
    "StateChangeCause",
    "StateChangeValue",
    "AccountUpdate",
    "AccountDeletion",
    "AccessKeyUpdate",
    "AccessKeyDeletion",
    "DataUpdate",
    "DataDeletion",
    "ContractCodeUpdate",
    "ContractCodeDeletion",
]
