"""
Parent transaction cache: which transaction a receipt descends from.

Receipts do not name the transaction that started their chain. A
transaction is converted into its first receipt in the block that includes
it, and that receipt's descendants execute in later blocks. The cache
records, for each first receipt, the hash of its transaction, so a
consumer can resolve an executed receipt to its origin.

Eviction
--------
The cache is a bounded LRU. A receipt executed in a block refreshes its
entry, so chains that are still producing receipts stay cached while
finished ones age out.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Iterable
from typing import Final

from lake_stream.primitives import Block
from lake_stream.types import AccountId, CryptoHash

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE: Final[int] = 100_000
"""Receipt ids kept before the least recently used one is evicted."""


class ParentTransactionCache:
    """Maps receipt ids to the hash of their parent transaction."""

    def __init__(
        self,
        cache_size: int = DEFAULT_CACHE_SIZE,
        for_accounts: Iterable[AccountId] | None = None,
    ) -> None:
        """
        Create an empty cache.

        Args:
            cache_size: Maximum number of receipt ids kept.
            for_accounts: Only cache transactions signed by or sent to one of
                these accounts. None or empty caches every transaction.
        """
        if cache_size < 1:
            raise ValueError(f"cache_size must be at least 1, got {cache_size}")
        self._cache_size = cache_size
        self._accounts: frozenset[AccountId] = frozenset(for_accounts or ())
        self._cache: OrderedDict[CryptoHash, CryptoHash] = OrderedDict()

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, receipt_id: object) -> bool:
        return receipt_id in self._cache

    @property
    def cache_size(self) -> int:
        return self._cache_size

    @property
    def accounts(self) -> frozenset[AccountId]:
        """Watched accounts. Empty means all."""
        return self._accounts

    def execute_before_run(self, block: Block) -> None:
        """Record this block's transactions and refresh receipts executed in it."""
        for transaction in block.transactions:
            if not self._is_watched(transaction.signer_id, transaction.receiver_id):
                continue
            for action in transaction.actions_included:
                self._put(action.receipt_id, transaction.transaction_hash)

        for receipt in block.receipts:
            if receipt.receipt_id in self._cache:
                self._cache.move_to_end(receipt.receipt_id)

    def execute_after_run(self) -> None:
        pass

    def get_parent_transaction_hash(self, receipt_id: CryptoHash) -> CryptoHash | None:
        """Hash of the transaction the receipt descends from, if cached."""
        transaction_hash = self._cache.get(receipt_id)
        if transaction_hash is not None:
            self._cache.move_to_end(receipt_id)
        return transaction_hash

    def _is_watched(self, signer_id: AccountId, receiver_id: AccountId) -> bool:
        return not self._accounts or signer_id in self._accounts or receiver_id in self._accounts

    def _put(self, receipt_id: CryptoHash, transaction_hash: CryptoHash) -> None:
        self._cache[receipt_id] = transaction_hash
        self._cache.move_to_end(receipt_id)
        while len(self._cache) > self._cache_size:
            evicted, _ = self._cache.popitem(last=False)
            logger.debug("Evicted receipt %s from parent transaction cache", evicted)
