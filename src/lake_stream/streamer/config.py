"""
Streamer timing constants.

Delays applied by the driving loop and the height cursor, in seconds.
"""

from __future__ import annotations

from typing import Final

EMPTY_LISTING_BACKOFF: Final[float] = 2.0
"""Wait before listing again when no new height exists."""

LISTING_ERROR_BACKOFF: Final[float] = 1.0
"""Wait before listing again after a failed listing."""

CHAIN_RESET_DELAY: Final[float] = 0.2
"""Wait before refetching after a prev_hash mismatch."""
