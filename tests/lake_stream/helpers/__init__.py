"""Test helpers for lake_stream unit tests."""

from __future__ import annotations

import asyncio

from lake_stream.streamer import MessageSink
from lake_stream.views import StreamerMessage

from .builders import (
    SIGNER_KEY,
    ZERO_HASH,
    b64,
    block_hash_for,
    encode,
    make_account_update,
    make_action_receipt,
    make_block_json,
    make_data_receipt,
    make_data_update,
    make_delegate,
    make_event_log,
    make_execution_outcome,
    make_function_call,
    make_receipt_outcome,
    make_shard_json,
    make_streamer_message,
    make_transaction,
    make_transfer,
)
from .mocks import BLOCK_PART, MockFetcher


async def collect(sink: MessageSink, count: int, timeout: float = 5.0) -> list[StreamerMessage]:
    """Receive `count` messages, failing the test if they do not arrive in time."""
    messages = []
    async with asyncio.timeout(timeout):
        while len(messages) < count:
            message = await sink.recv()
            assert message is not None, f"stream ended after {len(messages)} messages"
            messages.append(message)
    return messages


async def stop(task: asyncio.Task[None]) -> None:
    """Cancel a background task and wait for it to wind down."""
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)


__all__ = [
    # Runners
    "collect",
    "stop",
    # Mocks
    "BLOCK_PART",
    "MockFetcher",
    # Builders
    "SIGNER_KEY",
    "ZERO_HASH",
    "b64",
    "block_hash_for",
    "encode",
    "make_account_update",
    "make_action_receipt",
    "make_block_json",
    "make_data_receipt",
    "make_data_update",
    "make_delegate",
    "make_event_log",
    "make_execution_outcome",
    "make_function_call",
    "make_receipt_outcome",
    "make_shard_json",
    "make_streamer_message",
    "make_transaction",
    "make_transfer",
]
