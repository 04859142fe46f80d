"""
Chronicle Log Store

Single-file, append-oriented log manager. Every operation against the backing
file goes through the store's SerialTaskQueue, so appends, queries and
compactions never interleave.

Public API (must be called from inside a running event loop):
    log(text, format=False)                  -> Future[None]       (fire-and-forget)
    getLogs(callback=None, date=None,
            content=None)                    -> Future[List[str]]
    cleanUp()                                -> Future[CompactionResult] (fire-and-forget)
    drain() / close()                        -> coroutines

Dual delivery:
    getLogs() resolves its future AND calls callback(entries, error) when a
    callback is given. Using both yields two deliveries of the same entries:

        entries = await store.getLogs(lambda logs, err: print("inner:", logs))
        print("outer:", entries)
        # inner: ['[24/12/2024 08:05:09.7] - boot']
        # outer: ['[24/12/2024 08:05:09.7] - boot']

Failure policy:
- Writes are best-effort: a failed log()/cleanUp() only shows on the returned
  future, which the store marks as retrieved so nothing is reported elsewhere
- Reads are strict: a failed getLogs() raises from its future and passes the
  error to the callback
- A malformed date filter raises ValidationError synchronously; no task is
  queued and the file is never touched
"""

import asyncio
import math
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

from sdk.logging import getLogger

from .config import StoreConfig
from .entryFormatter import formatEntry
from .errors import ConfigurationError, StoreClosedError, ValidationError
from .query import filterEntries
from .retention import CompactionResult, compactEntries
from .storage import FileStorage, WriteMode
from .taskQueue import SerialTaskQueue
from .timestamps import TimestampParser


DEFAULT_RETENTION_SECONDS = 7_776_000  # 90 days

LogsCallback = Callable[[Optional[List[str]], Optional[Exception]], None]


def _consumeOutcome(future: asyncio.Future):
    """Mark a fire-and-forget future's exception as retrieved."""
    if not future.cancelled():
        future.exception()


class LogStore:
    """
    Log manager owning one backing file.

    Args:
        path: Backing file
        writeMode: 'a', 'ax', 'w' or 'wx' (see WriteMode)
        retentionSeconds: Maximum entry age kept by cleanUp()
        dateDelimiter: Separator between day, month and year
        timeDelimiter: Separator between hours, minutes and seconds
        autoFormat: Timestamp every entry; if False, log() callers opt in per call
        storage: Storage accessor override (default FileStorage on path); its
            writeMode, when it has one, must match writeMode
        clock: Returns "now" as a naive local datetime (default datetime.now)

    Raises:
        ConfigurationError: On a missing path, unknown write mode, negative
            retention, unusable delimiters, or a storage override whose write
            mode differs from writeMode
    """

    def __init__(self, path: Union[str, Path], writeMode: Union[str, WriteMode] = WriteMode.APPEND,
                 retentionSeconds: float = DEFAULT_RETENTION_SECONDS, dateDelimiter: str = "/",
                 timeDelimiter: str = ":", autoFormat: bool = True, *, storage=None,
                 clock: Optional[Callable[[], datetime]] = None):
        if not path:
            raise ConfigurationError("LogStore requires the path of its backing file")

        mode = WriteMode.parse(writeMode)

        if isinstance(retentionSeconds, bool) or not isinstance(retentionSeconds, (int, float)) \
                or math.isnan(retentionSeconds) or retentionSeconds < 0:
            raise ConfigurationError(f"retentionSeconds must be a non-negative number, got {retentionSeconds!r}")

        for name, delimiter in (("dateDelimiter", dateDelimiter), ("timeDelimiter", timeDelimiter)):
            if not isinstance(delimiter, str) or not delimiter or any(c.isdigit() or c.isspace() for c in delimiter):
                raise ConfigurationError(f"{name} must be a non-empty string without digits or spaces, got {delimiter!r}")

        storageMode = getattr(storage, "writeMode", mode)
        if storageMode != mode:
            raise ConfigurationError(
                f"Storage override writes in mode {storageMode!r} but writeMode is {mode.value!r}"
            )

        self.logger = getLogger()

        self._path = Path(path)
        self._writeMode = mode
        self._retentionSeconds = retentionSeconds
        self._dateDelimiter = dateDelimiter
        self._timeDelimiter = timeDelimiter
        self._autoFormat = autoFormat

        self._parser = TimestampParser(dateDelimiter, timeDelimiter)
        self._storage = storage if storage is not None else FileStorage(self._path, mode)
        self._clock = clock or datetime.now
        self._queue = SerialTaskQueue(name=f"LogStore:{self._path.name}")
        self._cleanUpTask: Optional[asyncio.Task] = None

    @classmethod
    def fromConfig(cls, config: StoreConfig, **overrides) -> 'LogStore':
        """Build a store from a loaded StoreConfig (keyword overrides win)."""
        params = {
            'path': config.path,
            'writeMode': config.writeMode,
            'retentionSeconds': config.retentionSeconds,
            'dateDelimiter': config.dateDelimiter,
            'timeDelimiter': config.timeDelimiter,
            'autoFormat': config.autoFormat,
        }
        params.update(overrides)
        return cls(**params)

    # =========================================================================
    # Read-only state
    # =========================================================================

    @property
    def path(self) -> Path:
        return self._path

    @property
    def writeMode(self) -> WriteMode:
        return self._writeMode

    @property
    def retentionSeconds(self) -> float:
        return self._retentionSeconds

    @property
    def dateDelimiter(self) -> str:
        return self._dateDelimiter

    @property
    def timeDelimiter(self) -> str:
        return self._timeDelimiter

    @property
    def autoFormat(self) -> bool:
        return self._autoFormat

    @property
    def pending(self) -> int:
        """Operations queued or running."""
        return self._queue.pending

    @property
    def closed(self) -> bool:
        return self._queue.closed

    # =========================================================================
    # Operations
    # =========================================================================

    def log(self, text: str, format: bool = False) -> asyncio.Future:
        """
        Queue text for appending.

        The entry is timestamped now (at submission) when autoFormat or format
        is true, otherwise written verbatim.

        Returns:
            Future of the append; failures stay on it and are never raised elsewhere
        """
        line = text
        if self._autoFormat or format:
            line = formatEntry(text, self._clock(), self._dateDelimiter, self._timeDelimiter)

        future = self._queue.submit(lambda: self._storage.append(line))
        future.add_done_callback(_consumeOutcome)
        return future

    def getLogs(self, callback: Optional[LogsCallback] = None, date: Optional[str] = None,
                content: Optional[str] = None) -> asyncio.Future:
        """
        Queue a read of the entries matching date OR content (all if neither).

        Args:
            callback: Called as callback(entries, None) or callback(None, error)
            date: DD/MM/YYYY with optional " HH:MM:SS.mmm" (configured delimiters)
            content: Substring to look for

        Returns:
            Future resolving with the matching entries in file order

        Raises:
            ValidationError: Immediately, if date is malformed (callback gets it first)
        """
        if date and not self._parser.isValidFilter(date):
            d, t = self._dateDelimiter, self._timeDelimiter
            error = ValidationError(
                f"Invalid date: {date}. Must be in the format DD{d}MM{d}YYYY or DD{d}MM{d}YYYY HH{t}MM{t}SS.mmm"
            )
            if callback:
                callback(None, error)
            raise error

        async def query() -> List[str]:
            rawText = await self._storage.readAll()
            return filterEntries(rawText, content, date)

        future = self._queue.submit(query)
        if callback:
            future.add_done_callback(lambda f: self._deliver(f, callback))
        return future

    def cleanUp(self) -> asyncio.Future:
        """
        Queue a compaction dropping entries older than retentionSeconds.

        Returns:
            Future of the CompactionResult; failures stay on it
        """
        future = self._queue.submit(self._compact)
        future.add_done_callback(_consumeOutcome)
        return future

    async def drain(self):
        """Wait until every operation queued so far has finished."""
        await self._queue.join()

    async def close(self):
        """Stop periodic clean-up, flush queued operations and stop the worker. Idempotent."""
        task = self._cancelPeriodicCleanUp()
        try:
            if task is not None:
                try:
                    await task
                except asyncio.CancelledError:
                    pass
                except Exception as e:
                    self.logger.warning(f"[LogStore] Periodic clean-up task ended with an error: {e}")
        finally:
            await self._queue.close()

    def schedulePeriodicCleanUp(self, intervalSeconds: float) -> asyncio.Task:
        """
        Run cleanUp() every intervalSeconds until close().

        Replaces a previously scheduled clean-up.

        Raises:
            ConfigurationError: If intervalSeconds is not positive
            StoreClosedError: If the store is closed
        """
        if not intervalSeconds or intervalSeconds <= 0:
            raise ConfigurationError(f"Clean-up interval must be positive, got {intervalSeconds!r}")
        if self.closed:
            raise StoreClosedError(f"{self._path} is closed")

        self._cancelPeriodicCleanUp()

        async def periodicCleanUp():
            while True:
                await asyncio.sleep(intervalSeconds)
                try:
                    await self.cleanUp()
                except StoreClosedError:
                    return
                except Exception as e:
                    self.logger.warning(f"[LogStore] Periodic clean-up failed: {e}")

        self._cleanUpTask = asyncio.create_task(periodicCleanUp(), name=f"LogStore:{self._path.name}-cleanUp")
        self.logger.info("[LogStore] Periodic clean-up scheduled", intervalSeconds=intervalSeconds, store=str(self._path))
        return self._cleanUpTask

    # =========================================================================
    # Internals
    # =========================================================================

    async def _compact(self) -> CompactionResult:
        rawText = await self._storage.readAll()
        result = compactEntries(rawText, self._retentionSeconds, self._parser, self._clock())
        await self._storage.overwrite(result.render())
        self.logger.debug("[LogStore] Compacted", store=str(self._path), kept=len(result.kept),
                       expired=result.expired, unparseable=result.unparseable)
        return result

    def _cancelPeriodicCleanUp(self) -> Optional[asyncio.Task]:
        task = self._cleanUpTask
        if task is not None:
            task.cancel()
            self._cleanUpTask = None
        return task

    @staticmethod
    def _deliver(future: asyncio.Future, callback: LogsCallback):
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            callback(None, error)
        else:
            callback(future.result(), None)
