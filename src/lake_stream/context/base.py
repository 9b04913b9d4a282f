"""
Hooks run around every consumer callback.

A context sees each block just before the callback is scheduled, in
delivery order, and is told when the callback finished. It is the place
for state that spans blocks, such as a map from receipts back to the
transactions that started them.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lake_stream.primitives import Block


@runtime_checkable
class LakeContext(Protocol):
    """
    Protocol for per-block hooks.

    Implementers should:
    - Keep `execute_before_run` fast: it runs on the dispatch path, one block at a time
    - Not raise for ordinary data; an exception stops the whole run
    """

    def execute_before_run(self, block: Block) -> None:
        """Called in delivery order, before the callback for `block` is scheduled."""
        ...

    def execute_after_run(self) -> None:
        """Called after a callback completed successfully."""
        ...


class CompositeContext:
    """
    Several contexts run as one.

    Before-hooks run in the given order and after-hooks in reverse, so the
    first context wraps all the others.
    """

    def __init__(self, *contexts: LakeContext) -> None:
        self._contexts = contexts

    def __len__(self) -> int:
        return len(self._contexts)

    def __getitem__(self, index: int) -> LakeContext:
        return self._contexts[index]

    def execute_before_run(self, block: Block) -> None:
        for context in self._contexts:
            context.execute_before_run(block)

    def execute_after_run(self) -> None:
        for context in reversed(self._contexts):
            context.execute_after_run()
