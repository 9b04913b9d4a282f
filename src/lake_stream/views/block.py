"""Wire views of the per-height block object (`block.json`)."""

from __future__ import annotations

from typing import Any

from lake_stream.types import AccountId, CryptoHash, PublicKey, Uint32, Uint64, Uint128, WireModel


class ValidatorStakeView(WireModel):
    """A validator proposal included in a block header."""

    account_id: AccountId
    public_key: PublicKey
    stake: Uint128


class BlockHeaderView(WireModel):
    """
    The block header.

    Only the fields the decoder exposes are modeled. The header on the wire
    carries many more (roots, approvals, signatures), which are ignored.
    """

    height: Uint64
    """Height of this block."""

    prev_height: Uint64 | None = None
    """Height of the previous block. Absent on very old blocks."""

    epoch_id: CryptoHash
    next_epoch_id: CryptoHash

    hash: CryptoHash
    """Hash of this block."""

    prev_hash: CryptoHash
    """Hash of the block this one builds on."""

    timestamp_nanosec: Uint64
    """Block timestamp in nanoseconds. A decimal string on the wire."""

    random_value: CryptoHash

    gas_price: Uint128
    """Gas price in yoctoNEAR. A decimal string on the wire."""

    total_supply: Uint128
    """Total token supply. A decimal string on the wire."""

    latest_protocol_version: Uint32

    chunks_included: Uint64
    """Number of chunks produced for this height."""

    validator_proposals: tuple[ValidatorStakeView, ...] = ()


class ChunkHeaderView(WireModel):
    """Summary of one chunk as listed in its block."""

    chunk_hash: CryptoHash
    shard_id: Uint64
    height_created: Uint64 | None = None
    height_included: Uint64 | None = None
    gas_used: Uint64 | None = None
    gas_limit: Uint64 | None = None
    balance_burnt: Uint128 | None = None


class BlockView(WireModel):
    """
    One height's block object.

    The number of chunk headers is the number of shard objects that must be
    fetched before the height is complete.
    """

    author: AccountId
    """Block producer."""

    header: BlockHeaderView

    chunks: tuple[ChunkHeaderView, ...] = ()
    """One entry per shard of the network at this height."""

    @property
    def declared_chunk_count(self) -> int:
        """How many shard objects belong to this height."""
        return len(self.chunks)

    def summary(self) -> dict[str, Any]:
        """Compact description for log lines."""
        return {
            "height": int(self.header.height),
            "hash": self.header.hash,
            "prev_hash": self.header.prev_hash,
            "chunks": self.declared_chunk_count,
        }
