"""
State changes: what changed in which account, and why.

Both the cause and the value are closed unions. The affected account is
derived from the value, so consumers filtering by account never need to
look inside the variant.
"""

from __future__ import annotations

from typing import Union

from lake_stream.types import AccountId, CryptoHash, PublicKey, StrictBaseModel
from lake_stream.views import AccessKeyView, AccountView, StateChangeWithCauseView
from lake_stream.views.state_changes import (
    AccessKeyDeletionView,
    AccessKeyUpdateView,
    AccountDeletionView,
    AccountUpdateView,
    ActionReceiptGasRewardCauseView,
    ActionReceiptProcessingStartedCauseView,
    ContractCodeDeletionView,
    ContractCodeUpdateView,
    DataDeletionView,
    DataUpdateView,
    InitialStateCauseView,
    MigrationCauseView,
    NotWritableToDiskCauseView,
    PostponedReceiptCauseView,
    ReceiptProcessingCauseView,
    ReshardingCauseView,
    StateChangeCauseView,
    StateChangeValueView,
    TransactionProcessingCauseView,
    UpdatedDelayedReceiptsCauseView,
    ValidatorAccountsUpdateCauseView,
)

# -----------------------------------------------------------------------------
# Causes
# -----------------------------------------------------------------------------


class NotWritableToDisk(StrictBaseModel):
    pass


class InitialState(StrictBaseModel):
    pass


class TransactionProcessing(StrictBaseModel):
    tx_hash: CryptoHash


class ActionReceiptProcessingStarted(StrictBaseModel):
    receipt_hash: CryptoHash


class ActionReceiptGasReward(StrictBaseModel):
    receipt_hash: CryptoHash


class ReceiptProcessing(StrictBaseModel):
    receipt_hash: CryptoHash


class PostponedReceipt(StrictBaseModel):
    receipt_hash: CryptoHash


class UpdatedDelayedReceipts(StrictBaseModel):
    pass


class ValidatorAccountsUpdate(StrictBaseModel):
    pass


class Migration(StrictBaseModel):
    pass


class Resharding(StrictBaseModel):
    pass


StateChangeCause = Union[
    NotWritableToDisk,
    InitialState,
    TransactionProcessing,
    ActionReceiptProcessingStarted,
    ActionReceiptGasReward,
    ReceiptProcessing,
    PostponedReceipt,
    UpdatedDelayedReceipts,
    ValidatorAccountsUpdate,
    Migration,
    Resharding,
]
"""Why a state change happened."""


def state_change_cause_from_view(view: StateChangeCauseView) -> StateChangeCause:
    """Map a wire cause onto its domain variant."""
    match view:
        case NotWritableToDiskCauseView():
            return NotWritableToDisk()
        case InitialStateCauseView():
            return InitialState()
        case TransactionProcessingCauseView(tx_hash=tx_hash):
            return TransactionProcessing(tx_hash=tx_hash)
        case ActionReceiptProcessingStartedCauseView(receipt_hash=receipt_hash):
            return ActionReceiptProcessingStarted(receipt_hash=receipt_hash)
        case ActionReceiptGasRewardCauseView(receipt_hash=receipt_hash):
            return ActionReceiptGasReward(receipt_hash=receipt_hash)
        case ReceiptProcessingCauseView(receipt_hash=receipt_hash):
            return ReceiptProcessing(receipt_hash=receipt_hash)
        case PostponedReceiptCauseView(receipt_hash=receipt_hash):
            return PostponedReceipt(receipt_hash=receipt_hash)
        case UpdatedDelayedReceiptsCauseView():
            return UpdatedDelayedReceipts()
        case ValidatorAccountsUpdateCauseView():
            return ValidatorAccountsUpdate()
        case MigrationCauseView():
            return Migration()
        case ReshardingCauseView():
            return Resharding()
    raise TypeError(f"Unexpected state change cause view: {type(view).__name__}")


# -----------------------------------------------------------------------------
# Values
# -----------------------------------------------------------------------------


class AccountUpdate(StrictBaseModel):
    account_id: AccountId
    account: AccountView


class AccountDeletion(StrictBaseModel):
    account_id: AccountId


class AccessKeyUpdate(StrictBaseModel):
    account_id: AccountId
    public_key: PublicKey
    access_key: AccessKeyView


class AccessKeyDeletion(StrictBaseModel):
    account_id: AccountId
    public_key: PublicKey


class DataUpdate(StrictBaseModel):
    account_id: AccountId
    key: bytes
    value: bytes


class DataDeletion(StrictBaseModel):
    account_id: AccountId
    key: bytes


class ContractCodeUpdate(StrictBaseModel):
    account_id: AccountId
    code: bytes


class ContractCodeDeletion(StrictBaseModel):
    account_id: AccountId


StateChangeValue = Union[
    AccountUpdate,
    AccountDeletion,
    AccessKeyUpdate,
    AccessKeyDeletion,
    DataUpdate,
    DataDeletion,
    ContractCodeUpdate,
    ContractCodeDeletion,
]
"""What changed. Every variant names the account it touched."""


def state_change_value_from_view(view: StateChangeValueView) -> StateChangeValue:
    """Map a wire value onto its domain variant."""
    match view:
        case AccountUpdateView(account_id=account_id):
            return AccountUpdate(account_id=account_id, account=view.account)
        case AccountDeletionView(account_id=account_id):
            return AccountDeletion(account_id=account_id)
        case AccessKeyUpdateView(account_id=account_id, public_key=public_key, access_key=key):
            return AccessKeyUpdate(account_id=account_id, public_key=public_key, access_key=key)
        case AccessKeyDeletionView(account_id=account_id, public_key=public_key):
            return AccessKeyDeletion(account_id=account_id, public_key=public_key)
        case DataUpdateView(account_id=account_id, key=key, value=value):
            return DataUpdate(account_id=account_id, key=key, value=value)
        case DataDeletionView(account_id=account_id, key=key):
            return DataDeletion(account_id=account_id, key=key)
        case ContractCodeUpdateView(account_id=account_id, code=code):
            return ContractCodeUpdate(account_id=account_id, code=code)
        case ContractCodeDeletionView(account_id=account_id):
            return ContractCodeDeletion(account_id=account_id)
    raise TypeError(f"Unexpected state change value view: {type(view).__name__}")


class StateChange(StrictBaseModel):
    """One change to one account's state."""

    affected_account_id: AccountId
    """Always equal to `value.account_id`."""

    cause: StateChangeCause
    value: StateChangeValue

    @classmethod
    def from_view(cls, view: StateChangeWithCauseView) -> StateChange:
        """Build a state change from its wire view."""
        value = state_change_value_from_view(view.value)
        return cls(
            affected_account_id=value.account_id,
            cause=state_change_cause_from_view(view.cause),
            value=value,
        )
