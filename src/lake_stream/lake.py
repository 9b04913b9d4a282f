"""
Lake: run a consumer callback over the stream of blocks.

The runner owns a streamer and its sink. It turns every delivered message
into a `Block` and schedules the callback with at most `concurrency`
callbacks in flight. With the default concurrency of 1 a callback starts
only after the previous one finished.

Per block, in order:

1. wait for a free callback slot
2. the context's before-hook, in delivery order
3. the middlewares, in the order given, inside the callback task
4. the callback
5. the context's after-hook, only if the callback succeeded

Termination
-----------
`run` returns or raises exactly once:

- a callback raised: the sink is closed, the streamer stops, the error propagates
- the streamer failed: callbacks already scheduled finish, then its error propagates
- the caller cancelled: callbacks and streamer are cancelled

Usage::

    lake = Lake(LakeConfig(start_block_height=100), S3Fetcher.from_config(S3Config.mainnet()))

    async def handle(block: Block) -> None:
        for event in block.events:
            ...

    await lake.run(handle)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from lake_stream import metrics
from lake_stream.config import LakeConfig
from lake_stream.context import LakeContext
from lake_stream.middleware import LakeMiddleware
from lake_stream.primitives import Block
from lake_stream.providers import Fetcher
from lake_stream.streamer import MessageSink, Streamer, StreamerProgress

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=LakeContext)

BlockHandler = Callable[[Block], Awaitable[None]]
"""Consumer callback taking the block alone."""

ContextBlockHandler = Callable[[Block, C], Awaitable[None]]
"""Consumer callback taking the block and the run's context."""


@dataclass(slots=True)
class Lake:
    """Runs one callback over every block from a start height onward."""

    config: LakeConfig
    """Start height, window size and callback concurrency."""

    fetcher: Fetcher
    """Provider blocks are read from."""

    middlewares: Sequence[LakeMiddleware] = ()
    """Transforms applied to each block, in order, before its callback."""

    _streamer: Streamer | None = field(default=None, init=False)
    """Streamer of the current or last run."""

    def get_progress(self) -> StreamerProgress | None:
        """Progress of the current run. None before the first run starts."""
        return self._streamer.get_progress() if self._streamer is not None else None

    async def run(self, handler: BlockHandler) -> None:
        """
        Call `handler` for every block.

        Raises:
            DecodeError: If the streamer hit undecodable data.
            Exception: Whatever the handler raised first.
        """

        async def invoke(block: Block) -> None:
            await handler(block)

        await self._run(invoke, None)

    async def run_with_context(self, handler: ContextBlockHandler[C], context: C) -> None:
        """
        Call `handler` for every block, passing `context` along.

        The context's before-hook sees each block in delivery order, right
        before its callback is scheduled; its after-hook runs after each
        successful callback.
        """

        async def invoke(block: Block) -> None:
            await handler(block, context)

        await self._run(invoke, context)

    async def _run(self, invoke: BlockHandler, context: LakeContext | None) -> None:
        sink = MessageSink(self.config.blocks_preload_pool_size)
        self._streamer = Streamer(config=self.config, fetcher=self.fetcher, sink=sink)
        engine = asyncio.create_task(self._streamer.run(), name="lake-streamer")

        try:
            await self._dispatch(sink, invoke, context)
        except BaseException:
            sink.close()
            engine.cancel()
            await asyncio.gather(engine, return_exceptions=True)
            raise

        # The sink only ends once the streamer stopped. Surface its outcome.
        await engine

    async def _dispatch(
        self,
        sink: MessageSink,
        invoke: BlockHandler,
        context: LakeContext | None,
    ) -> None:
        """Schedule one callback per delivered block, `concurrency` at a time."""
        pending: set[asyncio.Task[None]] = set()
        failures: list[BaseException] = []

        def on_done(task: asyncio.Task[None]) -> None:
            pending.discard(task)
            if task.cancelled():
                return
            exc = task.exception()
            if exc is not None:
                failures.append(exc)
                # Unblocks the loop below and stops the streamer at its next send.
                sink.close()

        try:
            async for message in sink:
                if failures:
                    break

                block = Block(message)

                while len(pending) >= self.config.concurrency and not failures:
                    await asyncio.wait(set(pending), return_when=asyncio.FIRST_COMPLETED)
                if failures:
                    break

                # Runs once a slot is free, right before the callback is scheduled.
                if context is not None:
                    context.execute_before_run(block)

                task = asyncio.create_task(
                    self._invoke(invoke, block, context),
                    name=f"handler-{block.block_height}",
                )
                pending.add(task)
                task.add_done_callback(on_done)

            if pending:
                await asyncio.wait(set(pending))
        finally:
            leftover = list(pending)
            for task in leftover:
                task.cancel()
            await asyncio.gather(*leftover, return_exceptions=True)

        if failures:
            raise failures[0]

    async def _invoke(
        self, invoke: BlockHandler, block: Block, context: LakeContext | None
    ) -> None:
        for middleware in self.middlewares:
            block = await middleware.process(block)

        started = time.perf_counter()
        await invoke(block)
        metrics.handler_time.observe(time.perf_counter() - started)

        if context is not None:
            context.execute_after_run()
