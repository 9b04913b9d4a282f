"""
Streamer: the driving loop from height listing to delivery.

The Core Problem
----------------
The store is written height by height by another process, and reads are
only eventually consistent. A naive reader either fetches one height at a
time (slow) or fetches many at once and delivers whatever arrives first
(out of order, and sometimes stale).

How It Works
------------
One coroutine owns all state and repeats:

1. Take heights from the cursor into the prefetch window
2. Wait for the oldest height in the window
3. Check it links to the last accepted block
4. Hand it to the sink, topping the window up while the sink has room

A broken link discards the whole window. The loop waits a moment and
reopens the cursor after the last accepted height, keeping the accepted
hash so the replacement block is checked against it.

Termination
-----------
Exactly one outcome per run:

- the consumer closed the sink: clean return
- a payload failed to decode: the `DecodeError` propagates
- the task was cancelled: `CancelledError` propagates

In every case the window is discarded and the sink is finished.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from functools import partial

from lake_stream import metrics
from lake_stream.config import LakeConfig
from lake_stream.providers import Fetcher
from lake_stream.types import BlockHeight, CryptoHash
from lake_stream.views import StreamerMessage

from .assembly import fetch_streamer_message
from .config import CHAIN_RESET_DELAY
from .heights import HeightCursor
from .prefetch import PrefetchScheduler
from .sink import MessageSink
from .states import StreamerState
from .validator import ChainValidator

logger = logging.getLogger(__name__)


class _WindowOutcome(Enum):
    """Why a window stopped streaming."""

    CHAIN_BROKEN = auto()
    SINK_CLOSED = auto()


@dataclass(slots=True)
class StreamerProgress:
    """
    Snapshot of a streamer run.

    Provides a view of streamer state for monitoring and the status API.
    """

    state: StreamerState
    """Current state machine state."""

    last_accepted_height: BlockHeight | None = None
    """Height of the last block delivered to the sink."""

    last_accepted_hash: CryptoHash | None = None
    """Hash of the last block delivered to the sink."""

    blocks_delivered: int = 0
    """Blocks handed to the sink this run."""

    chain_resets: int = 0
    """Windows discarded after a broken hash chain this run."""

    in_flight: int = 0
    """Heights currently being fetched."""


@dataclass(slots=True)
class Streamer:
    """
    Feeds one sink from one provider, starting at a configured height.

    The streamer does not own its consumer. It stops when the consumer
    closes the sink and never restarts once stopped.
    """

    config: LakeConfig
    """Start height and window size."""

    fetcher: Fetcher
    """Provider the heights are read from."""

    sink: MessageSink
    """Where accepted messages go."""

    validator: ChainValidator = field(default_factory=ChainValidator)
    """Hash chain bookkeeping. Survives window resets."""

    _state: StreamerState = field(default=StreamerState.IDLE)
    """Current state."""

    _scheduler: PrefetchScheduler | None = field(default=None)
    """Window of the current pass, if any."""

    _blocks_delivered: int = field(default=0)
    """Counter for delivered blocks."""

    _chain_resets: int = field(default=0)
    """Counter for discarded windows."""

    @property
    def state(self) -> StreamerState:
        return self._state

    def get_progress(self) -> StreamerProgress:
        """Snapshot of the run for monitoring."""
        return StreamerProgress(
            state=self._state,
            last_accepted_height=self.validator.last_accepted_height,
            last_accepted_hash=self.validator.last_accepted_hash,
            blocks_delivered=self._blocks_delivered,
            chain_resets=self._chain_resets,
            in_flight=len(self._scheduler) if self._scheduler is not None else 0,
        )

    async def run(self) -> None:
        """
        Stream until the sink closes.

        Raises:
            DecodeError: If a payload cannot be decoded. Never retried.
        """
        self._transition_to(StreamerState.STREAMING)
        logger.info(
            "Starting streamer at height %d with a window of %d",
            self.config.start_block_height,
            self.config.blocks_preload_pool_size,
        )
        try:
            while True:
                outcome = await self._run_window()
                if outcome is _WindowOutcome.SINK_CLOSED:
                    logger.info("Sink closed, stopping streamer")
                    return

                self._transition_to(StreamerState.RESETTING)
                self._chain_resets += 1
                metrics.chain_resets.inc()
                await asyncio.sleep(CHAIN_RESET_DELAY)
                self._transition_to(StreamerState.STREAMING)
        finally:
            self._state = StreamerState.STOPPED
            self.sink.finish()

    async def _run_window(self) -> _WindowOutcome:
        """One pass: a fresh cursor and window, streamed until a break or the end."""
        start = self.validator.restart_height(self.config.start_block_height)
        if self.validator.last_accepted_height is not None:
            logger.info("Refetching from height %d", start)

        cursor = HeightCursor(self.fetcher, start)
        scheduler = PrefetchScheduler(
            cursor,
            partial(fetch_streamer_message, self.fetcher),
            self.config.blocks_preload_pool_size,
        )
        self._scheduler = scheduler
        try:
            return await self._stream(scheduler)
        finally:
            self._scheduler = None
            await scheduler.discard()
            await cursor.close()

    async def _stream(self, scheduler: PrefetchScheduler) -> _WindowOutcome:
        await scheduler.fill()
        while True:
            height, message = await scheduler.next()

            # Skipped heights hold no block and leave the hash chain untouched.
            if message is None:
                await scheduler.fill()
                continue

            if not self.validator.validate(message):
                logger.warning(
                    "Block %d declares prev_hash %s but the last accepted block %s is %s. "
                    "Refetching in %dms",
                    height,
                    message.prev_hash,
                    self.validator.last_accepted_height,
                    self.validator.last_accepted_hash,
                    int(CHAIN_RESET_DELAY * 1000),
                )
                return _WindowOutcome.CHAIN_BROKEN

            metrics.latest_block_height.set(float(height))
            if not await self._deliver(scheduler, message):
                return _WindowOutcome.SINK_CLOSED

    async def _deliver(self, scheduler: PrefetchScheduler, message: StreamerMessage) -> bool:
        """
        Send one message while topping the window up.

        Returns:
            False if the sink was closed.
        """
        logger.debug("Streaming block %d (%s)", message.height, message.hash)
        refill = asyncio.create_task(scheduler.fill())
        try:
            delivered = await self.sink.send(message)
        except BaseException:
            refill.cancel()
            raise

        if not delivered:
            refill.cancel()
            await asyncio.gather(refill, return_exceptions=True)
            return False

        self._blocks_delivered += 1
        metrics.blocks_delivered.inc()
        await refill
        return True

    def _transition_to(self, new_state: StreamerState) -> None:
        """
        Transition to a new state.

        Raises:
            RuntimeError: If the transition is not allowed.
        """
        if not self._state.can_transition_to(new_state):
            raise RuntimeError(
                f"Invalid streamer transition: {self._state.name} -> {new_state.name}"
            )
        logger.debug("Streamer state: %s -> %s", self._state.name, new_state.name)
        self._state = new_state


def streamer(config: LakeConfig, fetcher: Fetcher) -> tuple[asyncio.Task[None], MessageSink]:
    """
    Start streaming in the background.

    Must be called with an event loop running.

    Returns:
        The streamer task and the sink to read from. The task finishes with
        None after the sink is closed, or raises the error that stopped it.
    """
    sink = MessageSink(config.blocks_preload_pool_size)
    engine = Streamer(config=config, fetcher=fetcher, sink=sink)
    task = asyncio.get_running_loop().create_task(engine.run(), name="lake-streamer")
    return task, sink
