"""
Metrics module for observability.

Provides counters, gauges, and histograms for tracking streamer behavior.
Exposes metrics in Prometheus text format.
"""

from .registry import (
    REGISTRY,
    blocks_delivered,
    chain_resets,
    fetch_retries,
    fetch_time,
    generate_metrics,
    handler_time,
    latest_block_height,
    prefetch_in_flight,
    skipped_heights,
)

__all__ = [
    "REGISTRY",
    "blocks_delivered",
    "chain_resets",
    "fetch_retries",
    "fetch_time",
    "generate_metrics",
    "handler_time",
    "latest_block_height",
    "prefetch_in_flight",
    "skipped_heights",
]
