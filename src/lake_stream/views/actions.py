"""
Wire views of actions and access keys.

An action list appears in three places: action receipts, signed
transactions and delegate actions. All three share the same externally
tagged encoding, so a single union validates them.

A delegate action may carry any action except another delegate action.
Nesting is rejected at validation time, so a payload that violates it
never makes it past the wire layer.
"""

from __future__ import annotations

from typing import Annotated, Union

from pydantic import Base64Bytes, Discriminator, Tag, field_validator
from pydantic_core import PydanticCustomError

from lake_stream.types import AccountId, PublicKey, Signature, Uint64, Uint128, WireModel

from .tagged import TaggedView, external_tag

NESTED_DELEGATE_ERROR = "nested_delegate"
"""Validation error type reported for a delegate action inside a delegate action."""

# -----------------------------------------------------------------------------
# Access keys
# -----------------------------------------------------------------------------


class FullAccessPermissionView(TaggedView):
    """The key may sign any transaction for its account."""

    TAG = "FullAccess"


class FunctionCallPermissionView(TaggedView):
    """The key may only call the listed methods of one contract."""

    TAG = "FunctionCall"

    allowance: Uint128 | None = None
    """Remaining gas allowance in yoctoNEAR. None means unlimited."""

    receiver_id: AccountId
    """The only contract this key can call."""

    method_names: tuple[str, ...] = ()
    """Callable methods. Empty means any method of the receiver."""


AccessKeyPermissionView = Annotated[
    Union[
        Annotated[FullAccessPermissionView, Tag("FullAccess")],
        Annotated[FunctionCallPermissionView, Tag("FunctionCall")],
    ],
    Discriminator(external_tag),
]


class AccessKeyView(WireModel):
    """An access key and what it is allowed to do."""

    nonce: Uint64
    """Monotonic nonce of the key."""

    permission: AccessKeyPermissionView
    """Full access or function call access."""


# -----------------------------------------------------------------------------
# Action variants
# -----------------------------------------------------------------------------


class CreateAccountView(TaggedView):
    """Create the receiver account."""

    TAG = "CreateAccount"


class DeployContractView(TaggedView):
    """Deploy contract code to the receiver account."""

    TAG = "DeployContract"

    code: Base64Bytes
    """Compiled contract code."""


class FunctionCallView(TaggedView):
    """Call a method of the receiver contract."""

    TAG = "FunctionCall"

    method_name: str
    args: Base64Bytes
    gas: Uint64
    deposit: Uint128


class TransferView(TaggedView):
    """Move tokens to the receiver."""

    TAG = "Transfer"

    deposit: Uint128


class StakeView(TaggedView):
    """Lock tokens for validation."""

    TAG = "Stake"

    stake: Uint128
    public_key: PublicKey


class AddKeyView(TaggedView):
    """Attach an access key to the receiver account."""

    TAG = "AddKey"

    public_key: PublicKey
    access_key: AccessKeyView


class DeleteKeyView(TaggedView):
    """Remove an access key from the receiver account."""

    TAG = "DeleteKey"

    public_key: PublicKey


class DeleteAccountView(TaggedView):
    """Delete the receiver account, sending its balance to the beneficiary."""

    TAG = "DeleteAccount"

    beneficiary_id: AccountId


class DelegateView(TaggedView):
    """A signed meta-transaction relayed on behalf of its sender."""

    TAG = "Delegate"

    delegate_action: DelegateActionBodyView
    """The actions signed by the sender together with replay protection."""

    signature: Signature
    """The sender's signature over the delegate action."""


ActionView = Annotated[
    Union[
        Annotated[CreateAccountView, Tag("CreateAccount")],
        Annotated[DeployContractView, Tag("DeployContract")],
        Annotated[FunctionCallView, Tag("FunctionCall")],
        Annotated[TransferView, Tag("Transfer")],
        Annotated[StakeView, Tag("Stake")],
        Annotated[AddKeyView, Tag("AddKey")],
        Annotated[DeleteKeyView, Tag("DeleteKey")],
        Annotated[DeleteAccountView, Tag("DeleteAccount")],
        Annotated[DelegateView, Tag("Delegate")],
    ],
    Discriminator(external_tag),
]
"""Any action as it appears on the wire."""


class DelegateActionBodyView(WireModel):
    """The part of a meta-transaction that the sender signs."""

    sender_id: AccountId
    """Account that signed the actions."""

    receiver_id: AccountId
    """Account the actions are addressed to."""

    actions: tuple[ActionView, ...]
    """The delegated actions, in execution order."""

    nonce: Uint64
    """Nonce of the sender's access key."""

    max_block_height: Uint64
    """The delegate action expires after this height."""

    public_key: PublicKey
    """Key the sender signed with."""

    @field_validator("actions")
    @classmethod
    def reject_nested_delegate(cls, actions: tuple[ActionView, ...]) -> tuple[ActionView, ...]:
        """Meta-transactions cannot wrap another meta-transaction."""
        if any(isinstance(action, DelegateView) for action in actions):
            raise PydanticCustomError(NESTED_DELEGATE_ERROR, "Cannot delegate DelegateAction")
        return actions


DelegateView.model_rebuild()
DelegateActionBodyView.model_rebuild()
