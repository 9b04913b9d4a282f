"""
Metric registry using prometheus_client.

Provides pre-defined metrics for the lake streamer.
Exposes metrics in Prometheus text format via the /metrics endpoint.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Create a dedicated registry for lake-stream metrics.
#
# Using a dedicated registry avoids pollution from default Python process metrics.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Chain Progress
# -----------------------------------------------------------------------------

latest_block_height = Gauge(
    "lake_latest_block_height",
    "Height of the latest accepted block",
    registry=REGISTRY,
)

blocks_delivered = Counter(
    "lake_blocks_delivered_total",
    "Blocks handed to the consumer",
    registry=REGISTRY,
)

chain_resets = Counter(
    "lake_chain_resets_total",
    "Prefetch windows discarded after a prev_hash mismatch",
    registry=REGISTRY,
)

skipped_heights = Counter(
    "lake_skipped_heights_total",
    "Heights reported as skipped by the provider",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Fetching
# -----------------------------------------------------------------------------

prefetch_in_flight = Gauge(
    "lake_prefetch_in_flight",
    "Heights currently in the prefetch window",
    registry=REGISTRY,
)

fetch_retries = Counter(
    "lake_fetch_retries_total",
    "Object fetches retried, by failure reason",
    ["reason"],
    registry=REGISTRY,
)

fetch_time = Histogram(
    "lake_fetch_seconds",
    "Time to fetch and assemble one height",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Consumer
# -----------------------------------------------------------------------------

handler_time = Histogram(
    "lake_handler_seconds",
    "Consumer callback duration",
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus text format output as bytes.
    """
    return generate_latest(REGISTRY)
