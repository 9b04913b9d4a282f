"""Tests for domain actions and delegate actions."""

from __future__ import annotations

import pytest

from lake_stream.primitives import (
    ActionMetadata,
    AddKey,
    CreateAccount,
    Delegate,
    DelegateCreateAccount,
    DelegateFunctionCall,
    DelegateTransfer,
    DeleteAccount,
    DeleteKey,
    DeployContract,
    FunctionCall,
    Stake,
    Transfer,
    actions_from_receipt_view,
    decode_actions,
)
from lake_stream.types import DecodeError, NestedDelegateError, UnknownVariantError
from lake_stream.views import ReceiptView
from tests.lake_stream.helpers import (
    SIGNER_KEY,
    b64,
    make_action_receipt,
    make_data_receipt,
    make_delegate,
    make_function_call,
    make_transfer,
)

METADATA = ActionMetadata(
    receipt_id="r-1",
    predecessor_id="relayer.near",
    receiver_id="alice.near",
    signer_id="relayer.near",
    signer_public_key=SIGNER_KEY,
)


class TestDecodeActions:
    """Tests for mapping every wire action onto its domain variant."""

    def test_every_variant(self) -> None:
        raw = [
            "CreateAccount",
            {"DeployContract": {"code": b64(b"\x00asm")}},
            make_function_call("go", args=b"[]", gas=10, deposit=2),
            make_transfer(9),
            {"Stake": {"stake": "100", "public_key": SIGNER_KEY}},
            {
                "AddKey": {
                    "public_key": SIGNER_KEY,
                    "access_key": {"nonce": 1, "permission": "FullAccess"},
                }
            },
            {"DeleteKey": {"public_key": SIGNER_KEY}},
            {"DeleteAccount": {"beneficiary_id": "heir.near"}},
        ]

        actions = decode_actions(raw, METADATA)

        assert [type(action) for action in actions] == [
            CreateAccount,
            DeployContract,
            FunctionCall,
            Transfer,
            Stake,
            AddKey,
            DeleteKey,
            DeleteAccount,
        ]
        assert all(action.metadata == METADATA for action in actions)

    def test_variant_fields(self) -> None:
        deploy, call, transfer = decode_actions(
            [
                {"DeployContract": {"code": b64(b"\x00asm")}},
                make_function_call("go", b"[]", 10, 2),
                make_transfer(9),
            ],
            METADATA,
        )

        assert isinstance(deploy, DeployContract) and deploy.code == b"\x00asm"
        assert isinstance(call, FunctionCall)
        assert (call.method_name, call.args, call.gas, call.deposit) == ("go", b"[]", 10, 2)
        assert isinstance(transfer, Transfer) and transfer.deposit == 9

    def test_pattern_matching(self) -> None:
        """Variants narrow with structural pattern matching."""
        (action,) = decode_actions([make_function_call("nft_mint")], METADATA)

        match action:
            case FunctionCall(method_name="nft_mint"):
                matched = True
            case _:
                matched = False

        assert matched

    def test_metadata_shortcuts(self) -> None:
        (action,) = decode_actions(["CreateAccount"], METADATA)

        assert action.receipt_id == "r-1"
        assert action.predecessor_id == "relayer.near"
        assert action.receiver_id == "alice.near"
        assert action.signer_id == "relayer.near"
        assert action.signer_public_key == SIGNER_KEY

    def test_unknown_variant(self) -> None:
        with pytest.raises(UnknownVariantError):
            decode_actions([{"Teleport": {}}], METADATA)


class TestDelegate:
    """Tests for meta-transactions."""

    def test_delegate_envelope_and_inner_actions(self) -> None:
        raw = make_delegate(
            ["CreateAccount", make_transfer(3), make_function_call("claim")],
            sender_id="alice.near",
            receiver_id="app.near",
        )

        (action,) = decode_actions([raw], METADATA)

        assert isinstance(action, Delegate)
        assert action.delegate_sender_id == "alice.near"
        assert action.delegate_receiver_id == "app.near"
        assert action.delegate_public_key == SIGNER_KEY
        assert action.nonce == 7
        assert action.max_block_height == 1_000
        assert [type(inner) for inner in action.delegate_actions] == [
            DelegateCreateAccount,
            DelegateTransfer,
            DelegateFunctionCall,
        ]

    def test_nested_delegate(self) -> None:
        """A delegate inside a delegate is refused with a dedicated error."""
        raw = make_delegate([make_delegate([make_transfer()])])

        with pytest.raises(NestedDelegateError) as exc_info:
            decode_actions([raw], METADATA)

        assert str(exc_info.value).endswith("Cannot delegate DelegateAction")


class TestActionsFromReceipt:
    """Tests for pulling actions out of a receipt view."""

    def test_metadata_comes_from_the_receipt(self) -> None:
        view = ReceiptView.model_validate(
            make_action_receipt("r-9", receiver_id="x.near", signer_id="s.near")
        )

        (action,) = actions_from_receipt_view(view)

        assert action.receipt_id == "r-9"
        assert action.receiver_id == "x.near"
        assert action.signer_id == "s.near"

    def test_data_receipt_has_no_actions(self) -> None:
        view = ReceiptView.model_validate(make_data_receipt("r-data"))

        with pytest.raises(DecodeError):
            actions_from_receipt_view(view)
