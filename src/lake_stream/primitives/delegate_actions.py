"""
Actions carried inside a delegate action (meta-transaction).

They mirror the regular action variants, minus the receipt metadata (a
delegate action is signed before any receipt exists) and minus the
delegate variant itself: meta-transactions cannot be nested.
"""

from __future__ import annotations

from typing import Union

from lake_stream.types import (
    AccountId,
    NestedDelegateError,
    PublicKey,
    StrictBaseModel,
    Uint64,
    Uint128,
)
from lake_stream.views import (
    AccessKeyView,
    AddKeyView,
    CreateAccountView,
    DelegateActionBodyView,
    DelegateView,
    DeleteAccountView,
    DeleteKeyView,
    DeployContractView,
    FunctionCallView,
    StakeView,
    TransferView,
)
from lake_stream.views.actions import ActionView


class DelegateCreateAccount(StrictBaseModel):
    """Create the receiver account."""


class DelegateDeployContract(StrictBaseModel):
    """Deploy contract code to the receiver account."""

    code: bytes


class DelegateFunctionCall(StrictBaseModel):
    """Call a method of the receiver contract."""

    method_name: str
    args: bytes
    gas: Uint64
    deposit: Uint128


class DelegateTransfer(StrictBaseModel):
    """Move tokens to the receiver."""

    deposit: Uint128


class DelegateStake(StrictBaseModel):
    """Lock tokens for validation."""

    stake: Uint128
    public_key: PublicKey


class DelegateAddKey(StrictBaseModel):
    """Attach an access key to the receiver account."""

    public_key: PublicKey
    access_key: AccessKeyView


class DelegateDeleteKey(StrictBaseModel):
    """Remove an access key from the receiver account."""

    public_key: PublicKey


class DelegateDeleteAccount(StrictBaseModel):
    """Delete the receiver account."""

    beneficiary_id: AccountId


DelegateAction = Union[
    DelegateCreateAccount,
    DelegateDeployContract,
    DelegateFunctionCall,
    DelegateTransfer,
    DelegateStake,
    DelegateAddKey,
    DelegateDeleteKey,
    DelegateDeleteAccount,
]
"""Any action that may be delegated."""


def delegate_action_from_view(view: ActionView) -> DelegateAction:
    """
    Map one wire action found inside a delegate action.

    Raises:
        NestedDelegateError: If the action is itself a delegate action.
    """
    match view:
        case CreateAccountView():
            return DelegateCreateAccount()
        case DeployContractView(code=code):
            return DelegateDeployContract(code=code)
        case FunctionCallView(method_name=method_name, args=args, gas=gas, deposit=deposit):
            return DelegateFunctionCall(
                method_name=method_name, args=args, gas=gas, deposit=deposit
            )
        case TransferView(deposit=deposit):
            return DelegateTransfer(deposit=deposit)
        case StakeView(stake=stake, public_key=public_key):
            return DelegateStake(stake=stake, public_key=public_key)
        case AddKeyView(public_key=public_key, access_key=access_key):
            return DelegateAddKey(public_key=public_key, access_key=access_key)
        case DeleteKeyView(public_key=public_key):
            return DelegateDeleteKey(public_key=public_key)
        case DeleteAccountView(beneficiary_id=beneficiary_id):
            return DelegateDeleteAccount(beneficiary_id=beneficiary_id)
        case DelegateView():
            raise NestedDelegateError()
    raise TypeError(f"Unexpected action view: {type(view).__name__}")


def delegate_actions_from_view(view: DelegateActionBodyView) -> tuple[DelegateAction, ...]:
    """Map every action of a delegate action, keeping their order."""
    return tuple(delegate_action_from_view(action) for action in view.actions)
