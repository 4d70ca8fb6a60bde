#!/usr/bin/env python3
"""
PTR-Sweep - Orchestrator Module
The single producer: reads CIDR lines, expands them and feeds the
resolution pool, then closes the pool and waits for it to drain.
"""
import asyncio
import io
import logging
from typing import Any, AsyncIterator, Dict, Optional, TextIO

from .cidr import expand_cidr
from .config import DEFAULT_WORKERS, err_console
from .errors import CIDRParseError
from .pool import ResolutionPool
from .resolver import Lookup

logger = logging.getLogger(__name__)


def open_input(path: str) -> TextIO:
    """Open a CIDR list; undecodable bytes become U+FFFD so the line fails to parse."""
    return open(path, "r", encoding="utf-8", errors="replace")


def prepare_stdin(stream: TextIO) -> TextIO:
    """Make a text stream decode leniently, like open_input does for files."""
    if isinstance(stream, io.TextIOWrapper):
        stream.reconfigure(errors="replace")
    return stream


async def read_lines(stream: TextIO) -> AsyncIterator[str]:
    """Yield lines from a blocking text stream without stalling the event loop."""
    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            return
        yield line


def report_parse_error(error: CIDRParseError):
    """Write a single diagnostic line for a rejected block to stderr."""
    err_console.print(str(error), style="red", markup=False, highlight=False, soft_wrap=True)


async def enqueue_block(pool: ResolutionPool, text: str) -> int:
    """
    Expand one CIDR line and submit each host address to the pool.

    Returns the number of addresses submitted. Raises CIDRParseError before
    submitting anything if the line is malformed.
    """
    addresses = expand_cidr(text)
    count = 0
    for address in addresses:
        await pool.submit(address)
        count += 1
    logger.debug(f"Queued {count} addresses from {text.strip()}")
    return count


async def run_sweep(
    stream: TextIO,
    lookup: Lookup,
    workers: int = DEFAULT_WORKERS,
    domain_only: bool = False,
    output_stream: Optional[TextIO] = None,
) -> Dict[str, Any]:
    """
    Run a full sweep over every CIDR line in `stream`.

    Bad lines are reported and skipped. Returns a summary of the input side of
    the run; lookup failures are never counted.
    """
    summary = {"blocks": 0, "invalid_blocks": 0, "addresses": 0}

    async with ResolutionPool(
        lookup, workers=workers, domain_only=domain_only, stream=output_stream
    ) as pool:
        async for line in read_lines(stream):
            text = line.strip()
            if not text:
                continue
            try:
                summary["addresses"] += await enqueue_block(pool, text)
            except CIDRParseError as e:
                summary["invalid_blocks"] += 1
                report_parse_error(e)
                continue
            summary["blocks"] += 1

    logger.debug(
        f"Sweep finished: {summary['blocks']} blocks, "
        f"{summary['invalid_blocks']} rejected, {summary['addresses']} addresses"
    )
    return summary
