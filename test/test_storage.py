"""
Storage Accessor Tests

Write modes, reads of missing files and destructive overwrite.

Run: python -m pytest test/test_storage.py -v
"""

import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from chronicle.core.errors import ConfigurationError, StorageError
from chronicle.core.storage import FileStorage, WriteMode


class TestWriteMode:
    """WriteMode flag parsing"""

    def test_parse_known_flags(self):
        assert WriteMode.parse("a") is WriteMode.APPEND
        assert WriteMode.parse("ax") is WriteMode.APPEND_EXCLUSIVE
        assert WriteMode.parse("w") is WriteMode.TRUNCATE
        assert WriteMode.parse("wx") is WriteMode.TRUNCATE_EXCLUSIVE
        assert WriteMode.parse(WriteMode.TRUNCATE) is WriteMode.TRUNCATE

    def test_parse_unknown_flag(self):
        with pytest.raises(ConfigurationError):
            WriteMode.parse("r+")

    def test_os_flags(self):
        assert WriteMode.APPEND.osFlags & os.O_APPEND
        assert not WriteMode.APPEND.osFlags & os.O_EXCL
        assert WriteMode.APPEND_EXCLUSIVE.osFlags & os.O_EXCL
        assert WriteMode.TRUNCATE.osFlags & os.O_TRUNC
        assert WriteMode.TRUNCATE_EXCLUSIVE.osFlags & os.O_EXCL


class TestFileStorage:
    """FileStorage I/O"""

    @pytest.mark.asyncio
    async def test_append_creates_and_appends(self, tempDir):
        storage = FileStorage(tempDir / "app.log")
        await storage.append("one\n")
        await storage.append("two\n")
        assert await storage.readAll() == "one\ntwo\n"

    @pytest.mark.asyncio
    async def test_truncate_mode_keeps_last_write(self, tempDir):
        storage = FileStorage(tempDir / "app.log", WriteMode.TRUNCATE)
        await storage.append("one\n")
        await storage.append("two\n")
        assert await storage.readAll() == "two\n"

    @pytest.mark.asyncio
    async def test_exclusive_mode_fails_when_file_exists(self, tempDir):
        path = tempDir / "app.log"
        path.write_text("existing\n", encoding="utf-8")

        for mode in (WriteMode.APPEND_EXCLUSIVE, WriteMode.TRUNCATE_EXCLUSIVE):
            storage = FileStorage(path, mode)
            with pytest.raises(StorageError) as excInfo:
                await storage.append("new\n")
            assert excInfo.value.operation == "append"
            assert isinstance(excInfo.value.cause, FileExistsError)

        assert path.read_text(encoding="utf-8") == "existing\n"

    @pytest.mark.asyncio
    async def test_read_missing_file(self, tempDir):
        storage = FileStorage(tempDir / "missing.log")
        with pytest.raises(StorageError) as excInfo:
            await storage.readAll()
        assert excInfo.value.operation == "read"
        assert isinstance(excInfo.value.__cause__, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_overwrite_truncates_regardless_of_mode(self, tempDir):
        path = tempDir / "app.log"
        storage = FileStorage(path, WriteMode.APPEND)
        await storage.append("old entry\n")
        await storage.overwrite("\nkept\n")
        assert path.read_text(encoding="utf-8") == "\nkept\n"

    @pytest.mark.asyncio
    async def test_write_into_missing_directory(self, tempDir):
        storage = FileStorage(tempDir / "nope" / "app.log")
        with pytest.raises(StorageError):
            await storage.append("x")

    @pytest.mark.asyncio
    async def test_unicode_round_trip(self, tempDir):
        storage = FileStorage(tempDir / "app.log")
        await storage.append("grüße ✓\n")
        assert await storage.readAll() == "grüße ✓\n"
