"""
Storage accessor for a log store's backing file.

Reads and writes the file; knows nothing about ordering. Blocking calls run
in a worker thread so that, inside the store's task queue, each I/O call is
the only point where the running task yields to the event loop.

Write modes (fixed per store):
    a   append, create if missing
    ax  append, fail if the file already exists
    w   truncate and write, create if missing
    wx  truncate and write, fail if the file already exists

No retries: every OSError surfaces immediately as StorageError.
"""

import asyncio
import os
from enum import Enum
from pathlib import Path
from typing import Union

from .errors import ConfigurationError, StorageError


class WriteMode(str, Enum):
    """File-open discipline for appended entries"""
    APPEND = "a"
    APPEND_EXCLUSIVE = "ax"
    TRUNCATE = "w"
    TRUNCATE_EXCLUSIVE = "wx"

    @classmethod
    def parse(cls, value: Union[str, "WriteMode"]) -> "WriteMode":
        """
        Resolve a mode flag.

        Raises:
            ConfigurationError: If value is not one of 'a', 'ax', 'w', 'wx'
        """
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(
                f"Write mode must be 'a', 'ax', 'w' or 'wx', got {value!r}"
            ) from None

    @property
    def osFlags(self) -> int:
        flags = os.O_WRONLY | os.O_CREAT
        if self in (WriteMode.APPEND, WriteMode.APPEND_EXCLUSIVE):
            flags |= os.O_APPEND
        else:
            flags |= os.O_TRUNC
        if self in (WriteMode.APPEND_EXCLUSIVE, WriteMode.TRUNCATE_EXCLUSIVE):
            flags |= os.O_EXCL
        return flags


class FileStorage:
    """
    Backing file access for one store.

    Only the owning store's queue worker may call these methods.
    """

    def __init__(self, path: Union[str, Path], writeMode: WriteMode = WriteMode.APPEND):
        self.path = Path(path)
        self.writeMode = writeMode

    async def append(self, line: str) -> None:
        """Write line using the configured write mode."""
        await asyncio.to_thread(self._write, line, self.writeMode.osFlags, "append")

    async def readAll(self) -> str:
        """
        Return the full file text.

        Raises:
            StorageError: If the file is missing or unreadable
        """
        return await asyncio.to_thread(self._read)

    async def overwrite(self, text: str) -> None:
        """Truncate the file and write text (compaction only)."""
        await asyncio.to_thread(self._write, text, WriteMode.TRUNCATE.osFlags, "overwrite")

    def _write(self, text: str, flags: int, operation: str) -> None:
        try:
            fd = os.open(self.path, flags, 0o644)
            with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
                f.write(text)
        except OSError as e:
            raise StorageError(operation, self.path, e) from e

    def _read(self) -> str:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError("read", self.path, e) from e
