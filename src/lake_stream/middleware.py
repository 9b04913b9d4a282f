"""
Middleware: transforms applied to every block before its callback.

A middleware receives the block built from a delivered message and returns
the block the next middleware, and finally the callback, will see. A chain
runs in the order it was given, once per block, inside that block's
callback task.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lake_stream.primitives import Block


@runtime_checkable
class LakeMiddleware(Protocol):
    """
    Protocol for block transforms.

    Implementers should:
    - Return a block, either the one received or a replacement
    - Raise only to stop the whole run; the error propagates like a callback error
    """

    async def process(self, block: Block) -> Block:
        """Transform `block` before the callback sees it."""
        ...
