"""
Actions executed by action receipts.

Each variant is its own immutable model, and `Action` is their closed union.
Consumers narrow with pattern matching::

    match action:
        case FunctionCall(method_name="nft_mint"):
            ...
        case Transfer(deposit=deposit):
            ...

Every variant carries the same metadata: which receipt it belongs to and
who signed the transaction the receipt descends from.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import TypeAdapter, ValidationError

from lake_stream.types import (
    AccountId,
    CryptoHash,
    DecodeError,
    PublicKey,
    Signature,
    StrictBaseModel,
    Uint64,
    Uint128,
)
from lake_stream.views import (
    AccessKeyView,
    ActionReceiptView,
    AddKeyView,
    CreateAccountView,
    DelegateView,
    DeleteAccountView,
    DeleteKeyView,
    DeployContractView,
    FunctionCallView,
    ReceiptView,
    StakeView,
    TransferView,
    raise_decode_error,
)
from lake_stream.views.actions import ActionView

from .delegate_actions import DelegateAction, delegate_actions_from_view


class ActionMetadata(StrictBaseModel):
    """Context shared by all actions of one receipt."""

    receipt_id: CryptoHash
    """Receipt the action belongs to."""

    predecessor_id: AccountId
    """Account that created the receipt."""

    receiver_id: AccountId
    """Account the action is executed on."""

    signer_id: AccountId
    """Account that signed the originating transaction."""

    signer_public_key: PublicKey
    """Key that signed the originating transaction."""


class ActionBase(StrictBaseModel):
    """Fields and shortcuts common to every action variant."""

    metadata: ActionMetadata

    @property
    def receipt_id(self) -> CryptoHash:
        return self.metadata.receipt_id

    @property
    def predecessor_id(self) -> AccountId:
        return self.metadata.predecessor_id

    @property
    def receiver_id(self) -> AccountId:
        return self.metadata.receiver_id

    @property
    def signer_id(self) -> AccountId:
        return self.metadata.signer_id

    @property
    def signer_public_key(self) -> PublicKey:
        return self.metadata.signer_public_key


class CreateAccount(ActionBase):
    """Create the receiver account."""


class DeployContract(ActionBase):
    """Deploy contract code to the receiver account."""

    code: bytes


class FunctionCall(ActionBase):
    """Call a method of the receiver contract."""

    method_name: str
    args: bytes
    gas: Uint64
    deposit: Uint128


class Transfer(ActionBase):
    """Move tokens to the receiver."""

    deposit: Uint128


class Stake(ActionBase):
    """Lock tokens for validation."""

    stake: Uint128
    public_key: PublicKey


class AddKey(ActionBase):
    """Attach an access key to the receiver account."""

    public_key: PublicKey
    access_key: AccessKeyView


class DeleteKey(ActionBase):
    """Remove an access key from the receiver account."""

    public_key: PublicKey


class DeleteAccount(ActionBase):
    """Delete the receiver account."""

    beneficiary_id: AccountId


class Delegate(ActionBase):
    """
    A meta-transaction: actions signed by one account, relayed by another.

    The envelope fields are prefixed with `delegate_` where they would clash
    with the receipt metadata shortcuts.
    """

    delegate_actions: tuple[DelegateAction, ...]
    """The delegated actions, in execution order."""

    signature: Signature
    """The sender's signature over the delegate action."""

    delegate_sender_id: AccountId
    """Account that signed the delegated actions."""

    delegate_receiver_id: AccountId
    """Account the delegated actions are addressed to."""

    delegate_public_key: PublicKey
    """Key the sender signed with."""

    nonce: Uint64
    max_block_height: Uint64


Action = Union[
    CreateAccount,
    DeployContract,
    FunctionCall,
    Transfer,
    Stake,
    AddKey,
    DeleteKey,
    DeleteAccount,
    Delegate,
]
"""Any action executed by a receipt."""


def action_from_view(view: ActionView, metadata: ActionMetadata) -> Action:
    """Map one wire action onto its domain variant."""
    match view:
        case CreateAccountView():
            return CreateAccount(metadata=metadata)
        case DeployContractView(code=code):
            return DeployContract(metadata=metadata, code=code)
        case FunctionCallView(method_name=method_name, args=args, gas=gas, deposit=deposit):
            return FunctionCall(
                metadata=metadata,
                method_name=method_name,
                args=args,
                gas=gas,
                deposit=deposit,
            )
        case TransferView(deposit=deposit):
            return Transfer(metadata=metadata, deposit=deposit)
        case StakeView(stake=stake, public_key=public_key):
            return Stake(metadata=metadata, stake=stake, public_key=public_key)
        case AddKeyView(public_key=public_key, access_key=access_key):
            return AddKey(metadata=metadata, public_key=public_key, access_key=access_key)
        case DeleteKeyView(public_key=public_key):
            return DeleteKey(metadata=metadata, public_key=public_key)
        case DeleteAccountView(beneficiary_id=beneficiary_id):
            return DeleteAccount(metadata=metadata, beneficiary_id=beneficiary_id)
        case DelegateView(delegate_action=body, signature=signature):
            return Delegate(
                metadata=metadata,
                delegate_actions=delegate_actions_from_view(body),
                signature=signature,
                delegate_sender_id=body.sender_id,
                delegate_receiver_id=body.receiver_id,
                delegate_public_key=body.public_key,
                nonce=body.nonce,
                max_block_height=body.max_block_height,
            )
    raise TypeError(f"Unexpected action view: {type(view).__name__}")


def actions_from_receipt_view(view: ReceiptView) -> list[Action]:
    """
    Map the actions of an action receipt.

    Raises:
        DecodeError: If the receipt is a data receipt.
    """
    receipt = view.receipt
    if not isinstance(receipt, ActionReceiptView):
        raise DecodeError("Action", f"receipt {view.receipt_id} is not an action receipt")

    metadata = ActionMetadata(
        receipt_id=view.receipt_id,
        predecessor_id=view.predecessor_id,
        receiver_id=view.receiver_id,
        signer_id=receipt.signer_id,
        signer_public_key=receipt.signer_public_key,
    )
    return [action_from_view(action, metadata) for action in receipt.actions]


_ACTION_LIST: TypeAdapter[tuple[ActionView, ...]] = TypeAdapter(tuple[ActionView, ...])


def decode_actions(raw: Any, metadata: ActionMetadata) -> list[Action]:
    """
    Decode a raw JSON action list (as loaded by `json.loads`).

    Raises:
        NestedDelegateError: If a delegate action wraps another delegate action.
        DecodeError: If an action matches no known variant.
    """
    try:
        views = _ACTION_LIST.validate_python(raw)
    except ValidationError as exc:
        raise_decode_error("Action", exc)
    return [action_from_view(view, metadata) for view in views]
