#!/usr/bin/env python3
"""
PTR-Sweep - Resolution Pool
A fixed set of asyncio workers draining one shared queue of addresses.

The queue holds at most one pending address, so `submit` blocks until a worker
is ready for more work. `close` enqueues one sentinel per worker; a worker that
takes a sentinel exits. `join` waits for every worker to finish.

If writing a result fails (for example stdout is a closed pipe) the pool is
marked failed: workers keep draining the queue without doing lookups, and the
next `submit` or `join` raises OutputError so the producer stops as well.
"""
import asyncio
import logging
from typing import List, Optional, TextIO

from .config import DEFAULT_WORKERS
from .errors import OutputError
from .output import format_result, write_line
from .resolver import LOOKUP_ERRORS, Lookup

logger = logging.getLogger(__name__)

_CLOSED = None


class ResolutionPool:
    """Runs reverse lookups for submitted addresses on `workers` concurrent tasks."""

    def __init__(
        self,
        lookup: Lookup,
        workers: int = DEFAULT_WORKERS,
        domain_only: bool = False,
        stream: Optional[TextIO] = None,
    ):
        if workers < 1:
            raise ValueError(f"Worker count must be at least 1, got {workers}.")
        self.lookup = lookup
        self.workers = workers
        self.domain_only = domain_only
        self.stream = stream
        self.processed: List[str] = []
        self._queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue(maxsize=1)
        self._tasks: List[asyncio.Task] = []
        self._closed = False
        self._failure: Optional[BaseException] = None

    def start(self):
        """Launch the worker tasks. Must be called from a running event loop."""
        if self._tasks:
            return
        logger.debug(f"Starting {self.workers} resolution workers")
        self._tasks = [
            asyncio.create_task(self._worker(i), name=f"ptr-worker-{i}")
            for i in range(self.workers)
        ]

    @property
    def failed(self) -> bool:
        return self._failure is not None

    def _raise_if_failed(self):
        if self._failure is not None:
            raise OutputError(f"Could not write results: {self._failure}") from self._failure

    async def submit(self, address: str):
        """
        Hand an address to the pool, waiting while every worker is busy.

        Raises:
            OutputError: If a worker could not write its results.
        """
        self._raise_if_failed()
        if self._closed:
            raise RuntimeError("Cannot submit to a closed resolution pool.")
        await self._queue.put(address)
        self._raise_if_failed()

    async def close(self):
        """Signal that no more addresses will be submitted."""
        if self._closed:
            return
        self._closed = True
        for _ in range(self.workers):
            await self._queue.put(_CLOSED)

    async def join(self):
        """Wait until every worker has drained the queue and exited."""
        await asyncio.gather(*self._tasks)
        self._raise_if_failed()

    async def __aenter__(self) -> "ResolutionPool":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is None:
            await self.close()
            await self.join()
        else:
            for task in self._tasks:
                task.cancel()
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _worker(self, worker_id: int):
        while True:
            address = await self._queue.get()
            if address is _CLOSED:
                logger.debug(f"Worker {worker_id} finished")
                return
            self.processed.append(address)
            if self._failure is None:
                await self._resolve(address)

    async def _resolve(self, address: str):
        try:
            hostnames = await self.lookup(address)
        except LOOKUP_ERRORS:
            # No PTR record, timeout or unreachable server: skip silently
            return
        except Exception:  # pylint: disable=broad-exception-caught
            # A worker must survive anything, or the producer blocks forever
            logger.debug(f"Unexpected error looking up {address}", exc_info=True)
            return
        try:
            for hostname in hostnames:
                write_line(format_result(address, hostname, self.domain_only), self.stream)
        except (OSError, ValueError) as e:
            if self._failure is None:
                logger.debug(f"Writing results failed: {e!r}")
                self._failure = e
