"""
Lake streamer CLI entry point.

Stream blocks from a lake bucket or a FastNear endpoint and print one line
per block.

Usage::

    python -m lake_stream --start-height 120000000
    python -m lake_stream --network testnet --start-height 180000000 --window 20
    python -m lake_stream --provider fastnear --start-height 120000000 --token $TOKEN
    python -m lake_stream --start-height 120000000 --api-port 5052

Options:
    --provider      Storage provider: s3 or fastnear (default: s3)
    --network       Network preset: mainnet, testnet or betanet (default: mainnet)
    --start-height  First height to stream (required)
    --window        Prefetch window size (default: 100)
    --concurrency   Blocks handled at once (default: 1)
    --endpoint      Custom S3 endpoint URL or FastNear base URL
    --token         FastNear bearer token
    --api-port      Serve health, progress and metrics on this port
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Sequence
from dataclasses import replace

from lake_stream.api import ApiServer, ApiServerConfig
from lake_stream.config import DEFAULT_PRELOAD_POOL_SIZE, FastNearConfig, LakeConfig, S3Config
from lake_stream.lake import Lake
from lake_stream.primitives import Block
from lake_stream.providers import FastNearFetcher, Fetcher, S3Fetcher

logger = logging.getLogger(__name__)

NETWORKS = ("mainnet", "testnet", "betanet")
"""Network presets known to the CLI."""

FASTNEAR_NETWORKS = ("mainnet", "testnet")
"""Networks with a public FastNear endpoint."""


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)

        timestamp = self.formatTime(record, self.datefmt)
        colored_time = f"{self.CYAN}{timestamp}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"

        return f"{colored_time} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging for the streamer with optional colors."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    # Configure root logger
    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    # botocore logs every request at DEBUG.
    logging.getLogger("botocore").setLevel(logging.WARNING)


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="lake_stream",
        description="Stream blocks in height order",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--provider",
        choices=("s3", "fastnear"),
        default="s3",
        help="Storage provider (default: s3)",
    )
    parser.add_argument(
        "--network",
        choices=NETWORKS,
        default="mainnet",
        help="Network preset (default: mainnet)",
    )
    parser.add_argument(
        "--start-height",
        required=True,
        type=int,
        help="First height to stream",
    )
    parser.add_argument(
        "--window",
        type=int,
        default=DEFAULT_PRELOAD_POOL_SIZE,
        help=f"Prefetch window size (default: {DEFAULT_PRELOAD_POOL_SIZE})",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=1,
        help="Blocks handled at once (default: 1)",
    )
    parser.add_argument(
        "--endpoint",
        default=None,
        help="Custom S3 endpoint URL, or FastNear base URL",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="FastNear bearer token",
    )
    parser.add_argument(
        "--api-port",
        type=int,
        default=None,
        help="Serve health, progress and metrics on this port",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )
    return parser


def build_fetcher(args: argparse.Namespace) -> Fetcher:
    """
    Create the provider selected on the command line.

    Raises:
        ValueError: If the provider has no preset for the network.
    """
    if args.provider == "fastnear":
        if args.endpoint:
            config = FastNearConfig(endpoint=args.endpoint, authorization_token=args.token)
        elif args.network in FASTNEAR_NETWORKS:
            preset = getattr(FastNearConfig, args.network)
            config = preset(authorization_token=args.token)
        else:
            raise ValueError(f"No FastNear endpoint for {args.network}, pass --endpoint")
        return FastNearFetcher.from_config(config)

    s3_config = getattr(S3Config, args.network)()
    if args.endpoint:
        s3_config = replace(s3_config, endpoint_url=args.endpoint)
    return S3Fetcher.from_config(s3_config)


def format_block_summary(block: Block) -> str:
    """One line per block: height, hash and collection sizes."""
    return (
        f"{block.block_height} {block.block_hash} "
        f"receipts={len(block.receipts)} "
        f"actions={len(block.actions)} "
        f"events={len(block.events)}"
    )


async def print_block(block: Block) -> None:
    """Default handler: print the block summary."""
    print(format_block_summary(block), flush=True)


async def run_stream(lake: Lake, api_port: int | None = None) -> None:
    """Stream until interrupted, optionally serving the status API."""
    server: ApiServer | None = None
    if api_port is not None:
        server = ApiServer(ApiServerConfig(port=api_port), progress_getter=lake.get_progress)
        await server.start()

    try:
        await lake.run(print_block)
    finally:
        if server is not None:
            await server._async_stop()


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        config = LakeConfig(
            start_block_height=args.start_height,
            blocks_preload_pool_size=args.window,
            concurrency=args.concurrency,
        )
        fetcher = build_fetcher(args)
    except ValueError as exc:
        parser.error(str(exc))

    lake = Lake(config=config, fetcher=fetcher)

    # asyncio.run cancels the streamer task on interrupt.
    try:
        asyncio.run(run_stream(lake, args.api_port))
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()
