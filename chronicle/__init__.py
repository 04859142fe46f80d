"""
chronicle - single-file, append-oriented log store.

    from chronicle import LogStore

    store = LogStore("app.log")
    store.log("Server started")
    entries = await store.getLogs(content="started")
"""

from chronicle.core.errors import (
    ChronicleError, ConfigurationError, ValidationError, StorageError, StoreClosedError
)
from chronicle.core.logStore import LogStore
from chronicle.core.storage import WriteMode

__version__ = "1.0.0"

__all__ = [
    'LogStore', 'WriteMode',
    'ChronicleError', 'ConfigurationError', 'ValidationError', 'StorageError', 'StoreClosedError'
]
