"""
Chain consistency check between consecutive delivered blocks.

The store is eventually consistent: a newer height can become visible
before an older one is fully written, and a stale object can be served
after it was replaced. Every delivered block must therefore declare the
previously delivered block as its predecessor. A block that does not is
never delivered; the streamer refetches from the height after the last
accepted one instead.
"""

from __future__ import annotations

from dataclasses import dataclass

from lake_stream.types import BlockHeight, CryptoHash
from lake_stream.views import StreamerMessage


@dataclass(slots=True)
class ChainValidator:
    """Tracks the last accepted block and checks that the next one links to it."""

    last_accepted_hash: CryptoHash | None = None
    """Hash of the last accepted block. None until the first acceptance."""

    last_accepted_height: BlockHeight | None = None
    """Height of the last accepted block. None until the first acceptance."""

    def links(self, message: StreamerMessage) -> bool:
        """Whether the message may follow the last accepted block."""
        return self.last_accepted_hash is None or message.prev_hash == self.last_accepted_hash

    def accept(self, message: StreamerMessage) -> None:
        """Record the message as the last accepted block."""
        self.last_accepted_hash = message.hash
        self.last_accepted_height = int(message.height)

    def validate(self, message: StreamerMessage) -> bool:
        """
        Accept the message if it links to the last accepted block.

        The first message is accepted unconditionally.

        Returns:
            True if accepted, False if the chain is broken.
        """
        if not self.links(message):
            return False
        self.accept(message)
        return True

    def restart_height(self, start_height: BlockHeight) -> BlockHeight:
        """Where to resume fetching: after the last accepted block, or at the start."""
        if self.last_accepted_height is None:
            return start_height
        return self.last_accepted_height + 1
