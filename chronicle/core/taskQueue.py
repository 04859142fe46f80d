"""
Serialized task queue.

One asyncio.Queue and one consuming worker per log store. Operations run
strictly one at a time in submission order, whatever the concurrency of the
callers that submitted them.

Architecture Invariants:
- At most one operation in flight per queue
- FIFO across every operation kind (append, query, compact)
- An operation's exception is set on that operation's future only; the
  worker keeps draining
- No priorities, no cancellation: once submitted an operation always runs,
  even if its caller stops waiting on the future
- Depth is unbounded; slow I/O delays later operations but never drops them
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from sdk.logging import getLogger

from .errors import StoreClosedError


Operation = Callable[[], Awaitable[Any]]


class SerialTaskQueue:
    """
    Single-worker FIFO executor for async operations.

    The worker starts lazily on the first submit() inside a running event loop.
    """

    def __init__(self, name: str = "queue"):
        self.name = name
        self.log = getLogger()

        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._closed = False
        self._inFlight = False

        self._completed = 0
        self._failed = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Operations submitted but not yet finished (queued + in flight)."""
        queued = self._queue.qsize() if self._queue is not None else 0
        return queued + (1 if self._inFlight else 0)

    def submit(self, operation: Operation) -> asyncio.Future:
        """
        Queue an operation.

        Args:
            operation: Zero-argument callable returning an awaitable

        Returns:
            Future resolved with the operation's result or exception

        Raises:
            StoreClosedError: If the queue was closed
            RuntimeError: If called outside a running event loop
        """
        if self._closed:
            raise StoreClosedError(f"{self.name} is closed")

        loop = asyncio.get_running_loop()
        self._ensureWorker()

        future = loop.create_future()
        self._queue.put_nowait((operation, future))
        return future

    async def join(self):
        """Wait until every submitted operation has finished."""
        if self._queue is not None and self._worker is not None and not self._worker.done():
            await self._queue.join()

    async def close(self):
        """Refuse new operations, drain the backlog, then stop the worker."""
        if self._closed:
            return
        self._closed = True

        await self.join()

        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None

        self.log.debug(f"[{self.name}] Worker stopped", completed=self._completed, failed=self._failed)

    def _ensureWorker(self):
        # A finished worker belongs to a loop that is gone; start over on this one
        if self._worker is None or self._worker.done():
            self._queue = asyncio.Queue()
            self._worker = asyncio.create_task(self._run(), name=f"{self.name}-worker")
            self.log.debug(f"[{self.name}] Worker started")

    async def _run(self):
        """Worker loop: drain operations one at a time."""
        while True:
            operation, future = await self._queue.get()
            self._inFlight = True
            try:
                result = await operation()
            except Exception as e:
                self._failed += 1
                if not future.done():
                    future.set_exception(e)
            else:
                self._completed += 1
                if not future.done():
                    future.set_result(result)
            finally:
                self._inFlight = False
                self._queue.task_done()
