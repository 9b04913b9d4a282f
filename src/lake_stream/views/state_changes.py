"""
Wire views of state changes.

A state change is stored as ``{"cause": {...}, "type": ..., "change": {...}}``.
The cause is internally tagged by its ``type`` key. The value is adjacently
tagged: its name sits beside the body, not inside it. The view folds the two
into a single internally tagged ``value`` so both can be validated as
discriminated unions.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import Base64Bytes, Field, model_validator

from lake_stream.types import AccountId, CryptoHash, PublicKey, Uint64, Uint128, WireModel

from .actions import AccessKeyView

# -----------------------------------------------------------------------------
# Causes
# -----------------------------------------------------------------------------


class NotWritableToDiskCauseView(WireModel):
    type: Literal["not_writable_to_disk"]


class InitialStateCauseView(WireModel):
    type: Literal["initial_state"]


class TransactionProcessingCauseView(WireModel):
    type: Literal["transaction_processing"]
    tx_hash: CryptoHash


class ActionReceiptProcessingStartedCauseView(WireModel):
    type: Literal["action_receipt_processing_started"]
    receipt_hash: CryptoHash


class ActionReceiptGasRewardCauseView(WireModel):
    type: Literal["action_receipt_gas_reward"]
    receipt_hash: CryptoHash


class ReceiptProcessingCauseView(WireModel):
    type: Literal["receipt_processing"]
    receipt_hash: CryptoHash


class PostponedReceiptCauseView(WireModel):
    type: Literal["postponed_receipt"]
    receipt_hash: CryptoHash


class UpdatedDelayedReceiptsCauseView(WireModel):
    type: Literal["updated_delayed_receipts"]


class ValidatorAccountsUpdateCauseView(WireModel):
    type: Literal["validator_accounts_update"]


class MigrationCauseView(WireModel):
    type: Literal["migration"]


class ReshardingCauseView(WireModel):
    type: Literal["resharding"]


StateChangeCauseView = Annotated[
    Union[
        NotWritableToDiskCauseView,
        InitialStateCauseView,
        TransactionProcessingCauseView,
        ActionReceiptProcessingStartedCauseView,
        ActionReceiptGasRewardCauseView,
        ReceiptProcessingCauseView,
        PostponedReceiptCauseView,
        UpdatedDelayedReceiptsCauseView,
        ValidatorAccountsUpdateCauseView,
        MigrationCauseView,
        ReshardingCauseView,
    ],
    Field(discriminator="type"),
]

# -----------------------------------------------------------------------------
# Values
# -----------------------------------------------------------------------------


class AccountView(WireModel):
    """Account state after an update."""

    amount: Uint128
    """Liquid balance in yoctoNEAR."""

    locked: Uint128
    """Staked balance in yoctoNEAR."""

    code_hash: CryptoHash
    """Hash of the deployed contract, or the zero hash."""

    storage_usage: Uint64
    """Bytes of state used by the account."""

    storage_paid_at: Uint64 = Uint64(0)
    """Deprecated, always zero on current networks."""


class AccountUpdateView(WireModel):
    type: Literal["account_update"]
    account_id: AccountId
    amount: Uint128
    locked: Uint128
    code_hash: CryptoHash
    storage_usage: Uint64
    storage_paid_at: Uint64 = Uint64(0)

    @property
    def account(self) -> AccountView:
        """The account fields without the tag and id."""
        return AccountView(
            amount=self.amount,
            locked=self.locked,
            code_hash=self.code_hash,
            storage_usage=self.storage_usage,
            storage_paid_at=self.storage_paid_at,
        )


class AccountDeletionView(WireModel):
    type: Literal["account_deletion"]
    account_id: AccountId


class AccessKeyUpdateView(WireModel):
    type: Literal["access_key_update"]
    account_id: AccountId
    public_key: PublicKey
    access_key: AccessKeyView


class AccessKeyDeletionView(WireModel):
    type: Literal["access_key_deletion"]
    account_id: AccountId
    public_key: PublicKey


class DataUpdateView(WireModel):
    type: Literal["data_update"]
    account_id: AccountId
    key: Base64Bytes = Field(alias="key_base64")
    value: Base64Bytes = Field(alias="value_base64")


class DataDeletionView(WireModel):
    type: Literal["data_deletion"]
    account_id: AccountId
    key: Base64Bytes = Field(alias="key_base64")


class ContractCodeUpdateView(WireModel):
    type: Literal["contract_code_update"]
    account_id: AccountId
    code: Base64Bytes = Field(alias="code_base64")


class ContractCodeDeletionView(WireModel):
    type: Literal["contract_code_deletion"]
    account_id: AccountId


StateChangeValueView = Annotated[
    Union[
        AccountUpdateView,
        AccountDeletionView,
        AccessKeyUpdateView,
        AccessKeyDeletionView,
        DataUpdateView,
        DataDeletionView,
        ContractCodeUpdateView,
        ContractCodeDeletionView,
    ],
    Field(discriminator="type"),
]


class StateChangeWithCauseView(WireModel):
    """One change to the state of one account, with what caused it."""

    cause: StateChangeCauseView
    value: StateChangeValueView

    @model_validator(mode="before")
    @classmethod
    def fold_adjacent_tag(cls, data: Any) -> Any:
        """Merge ``type`` and ``change`` into one tagged ``value``."""
        if isinstance(data, dict) and "change" in data and "value" not in data:
            change = data["change"]
            if isinstance(change, dict):
                return {"cause": data.get("cause"), "value": {"type": data.get("type"), **change}}
        return data
