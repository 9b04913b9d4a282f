"""
Streaming ingestion engine.

What Is Streaming?
------------------
Blocks are written to the store one height at a time by an indexer that
follows the chain. The streamer follows that store: it discovers new
heights, fetches several of them at once, and delivers them one by one in
strict height order, each linked by hash to the one before.

The Challenge
-------------
1. **Latency**: one request per height is too slow to catch up
2. **Ordering**: concurrent fetches finish in any order
3. **Consistency**: the store may show a height before it is fully written

How It Works
------------
- The height cursor lists new heights and never runs dry
- The prefetch scheduler fetches a bounded window and yields it in order
- The chain validator refuses any block not linked to the previous one
- The sink hands accepted blocks to the consumer with backpressure
"""

from __future__ import annotations

__all__ = [
    # Entry point
    "streamer",
    "Streamer",
    "StreamerProgress",
    # States
    "StreamerState",
    # Components
    "HeightCursor",
    "PrefetchScheduler",
    "ChainValidator",
    "MessageSink",
    # Assembly
    "fetch_streamer_message",
    "fetch_with_retry",
    # Configuration constants
    "EMPTY_LISTING_BACKOFF",
    "LISTING_ERROR_BACKOFF",
    "CHAIN_RESET_DELAY",
]

from .assembly import fetch_streamer_message, fetch_with_retry
from .config import CHAIN_RESET_DELAY, EMPTY_LISTING_BACKOFF, LISTING_ERROR_BACKOFF
from .heights import HeightCursor
from .prefetch import PrefetchScheduler
from .service import Streamer, StreamerProgress, streamer
from .sink import MessageSink
from .states import StreamerState
from .validator import ChainValidator
