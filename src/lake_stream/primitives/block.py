"""
The domain block: one height's data as an ergonomic object model.

How It Works
------------
A `Block` wraps the assembled `StreamerMessage` for one height. The
message is already validated, so every collection below is a pure mapping
over it. Collections are derived on first access and memoized for the
lifetime of the block:

- **receipts**: executed receipts, from every shard's execution outcomes
- **postponed_receipts**: receipts included in a chunk but not executed
- **transactions**: transactions of every chunk, joined with their receipt
- **actions**: actions of every executed action receipt
- **events**: `EVENT_JSON:` log lines of executed receipts
- **state_changes**: state changes of every shard

Lookups by receipt id go through indices built the same way, once.

Asymmetry
---------
Receipts are the authoritative record and any failure to map one is an
error. Transactions are informational: one that cannot be decoded, or
joined with its receipt, is dropped from `transactions`, not fatal to the
block.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from functools import cached_property
from typing import Any

from lake_stream.types import (
    AccountId,
    CryptoHash,
    DecodeError,
    StrictBaseModel,
    Uint32,
    Uint64,
    Uint128,
)
from lake_stream.views import (
    ActionReceiptView,
    StreamerMessage,
    ValidatorStakeView,
    decode_block,
    decode_shard,
)

from .actions import Action, actions_from_receipt_view
from .events import Event
from .receipts import Receipt
from .state_changes import StateChange
from .transactions import Transaction

logger = logging.getLogger(__name__)


def _raw_transaction_hash(raw: Mapping[str, Any]) -> Any:
    """Hash of a raw chunk transaction, for logs. None when absent."""
    transaction = raw.get("transaction")
    return transaction.get("hash") if isinstance(transaction, Mapping) else None


class BlockHeader(StrictBaseModel):
    """
    The header fields indexers usually care about.

    The full wire header stays reachable through `Block.streamer_message`.
    """

    height: Uint64
    hash: CryptoHash
    prev_hash: CryptoHash

    author: AccountId
    """Block producer."""

    timestamp_nanosec: Uint64
    epoch_id: CryptoHash
    next_epoch_id: CryptoHash
    gas_price: Uint128
    total_supply: Uint128
    latest_protocol_version: Uint32
    random_value: CryptoHash
    chunks_included: Uint64
    validator_proposals: tuple[ValidatorStakeView, ...]

    @classmethod
    def from_streamer_message(cls, message: StreamerMessage) -> BlockHeader:
        """Extract the header of an assembled message."""
        header = message.block.header
        return cls(
            height=header.height,
            hash=header.hash,
            prev_hash=header.prev_hash,
            author=message.block.author,
            timestamp_nanosec=header.timestamp_nanosec,
            epoch_id=header.epoch_id,
            next_epoch_id=header.next_epoch_id,
            gas_price=header.gas_price,
            total_supply=header.total_supply,
            latest_protocol_version=header.latest_protocol_version,
            random_value=header.random_value,
            chunks_included=header.chunks_included,
            validator_proposals=tuple(header.validator_proposals),
        )


class Block:
    """
    One height, decoded.

    The underlying message is never mutated. Derived collections are
    computed on first access and cached, so repeated access is free and
    always returns the same objects.
    """

    def __init__(self, streamer_message: StreamerMessage) -> None:
        """Wrap an assembled message."""
        self._streamer_message = streamer_message

    @classmethod
    def from_json(cls, block_raw: bytes | str, shard_raws: Iterable[bytes | str]) -> Block:
        """
        Build a block straight from stored payloads.

        Raises:
            DecodeError: If any payload fails validation.
        """
        message = StreamerMessage(
            block=decode_block(block_raw),
            shards=tuple(decode_shard(raw) for raw in shard_raws),
        )
        return cls(message)

    def __repr__(self) -> str:
        return f"Block(height={self.block_height}, hash={self.block_hash!r})"

    @property
    def streamer_message(self) -> StreamerMessage:
        """The raw wire message this block was built from."""
        return self._streamer_message

    @cached_property
    def header(self) -> BlockHeader:
        """Selected header fields."""
        return BlockHeader.from_streamer_message(self._streamer_message)

    @property
    def block_height(self) -> Uint64:
        return self._streamer_message.height

    @property
    def block_hash(self) -> CryptoHash:
        return self._streamer_message.hash

    @property
    def prev_block_hash(self) -> CryptoHash:
        return self._streamer_message.prev_hash

    # -------------------------------------------------------------------------
    # Derived collections
    # -------------------------------------------------------------------------

    @cached_property
    def receipts(self) -> tuple[Receipt, ...]:
        """Receipts executed at this height, across all shards."""
        return tuple(
            Receipt.from_outcome(outcome)
            for shard in self._streamer_message.shards
            for outcome in shard.receipt_execution_outcomes
        )

    @cached_property
    def postponed_receipts(self) -> tuple[Receipt, ...]:
        """Receipts included in a chunk at this height but not executed yet."""
        executed = self._receipts_by_id.keys()
        return tuple(
            Receipt.postponed(receipt)
            for shard in self._streamer_message.shards
            if shard.chunk is not None
            for receipt in shard.chunk.receipts
            if receipt.receipt_id not in executed
        )

    @cached_property
    def transactions(self) -> tuple[Transaction, ...]:
        """Transactions included at this height. Ones that fail to map are dropped."""
        transactions = []
        for shard in self._streamer_message.shards:
            if shard.chunk is None:
                continue
            for raw in shard.chunk.transactions:
                try:
                    transactions.append(Transaction.from_view(raw))
                except DecodeError as exc:
                    logger.debug(
                        "Dropping transaction %s at height %d: %s",
                        _raw_transaction_hash(raw),
                        self.block_height,
                        exc,
                    )
        return tuple(transactions)

    @cached_property
    def actions(self) -> tuple[Action, ...]:
        """Actions of every executed action receipt. Data receipts carry none."""
        return tuple(
            action
            for shard in self._streamer_message.shards
            for outcome in shard.receipt_execution_outcomes
            if isinstance(outcome.receipt.receipt, ActionReceiptView)
            for action in actions_from_receipt_view(outcome.receipt)
        )

    @cached_property
    def events(self) -> tuple[Event, ...]:
        """Events emitted at this height, in receipt then log order."""
        return tuple(event for events in self._events_by_receipt_id.values() for event in events)

    @cached_property
    def state_changes(self) -> tuple[StateChange, ...]:
        """State changes across all shards."""
        return tuple(
            StateChange.from_view(view)
            for shard in self._streamer_message.shards
            for view in shard.state_changes
        )

    # -------------------------------------------------------------------------
    # Indices
    # -------------------------------------------------------------------------

    @cached_property
    def _receipts_by_id(self) -> dict[CryptoHash, Receipt]:
        return {receipt.receipt_id: receipt for receipt in self.receipts}

    @cached_property
    def _actions_by_receipt_id(self) -> dict[CryptoHash, tuple[Action, ...]]:
        index: dict[CryptoHash, list[Action]] = {}
        for action in self.actions:
            index.setdefault(action.receipt_id, []).append(action)
        return {receipt_id: tuple(actions) for receipt_id, actions in index.items()}

    @cached_property
    def _events_by_receipt_id(self) -> dict[CryptoHash, tuple[Event, ...]]:
        # Receipts without events are left out of the index.
        index: dict[CryptoHash, tuple[Event, ...]] = {}
        for receipt in self.receipts:
            events = receipt.events()
            if events:
                index[receipt.receipt_id] = tuple(events)
        return index

    def actions_by_receipt_id(self, receipt_id: CryptoHash) -> tuple[Action, ...]:
        """Actions of one receipt executed in this block."""
        return self._actions_by_receipt_id.get(receipt_id, ())

    def events_by_receipt_id(self, receipt_id: CryptoHash) -> tuple[Event, ...]:
        """Events emitted by one receipt executed in this block."""
        return self._events_by_receipt_id.get(receipt_id, ())

    def events_by_contract_id(self, account_id: AccountId) -> list[Event]:
        """Events emitted by one contract in this block."""
        return [event for event in self.events if event.is_emitted_by_contract(account_id)]

    def receipt_by_id(self, receipt_id: CryptoHash) -> Receipt | None:
        """An executed receipt of this block, by id."""
        return self._receipts_by_id.get(receipt_id)
