"""
Opaque identifiers carried through the decoder untouched.

Hashes, keys and signatures are kept in their wire spelling (base58 hashes,
`ed25519:`-prefixed keys). Nothing in the package inspects their bytes.
"""

from typing import TypeAlias

AccountId: TypeAlias = str
"""A human-readable account name such as `alice.near`."""

CryptoHash: TypeAlias = str
"""A base58-encoded 32-byte hash (block, chunk, receipt, transaction)."""

PublicKey: TypeAlias = str
"""A curve-prefixed public key such as `ed25519:...`."""

Signature: TypeAlias = str
"""A curve-prefixed signature such as `ed25519:...`."""

BlockHeight: TypeAlias = int
"""The unit of addressing for both storage lookup and ordering."""
