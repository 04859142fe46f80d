"""
Chronicle error kinds.

Every failure a LogStore reports derives from ChronicleError so callers can
catch the family in one place. Failures are returned to the originating
caller only (future exception or callback error argument).
"""


class ChronicleError(Exception):
    """Base class for log store errors"""
    pass


class ConfigurationError(ChronicleError):
    """Missing or invalid construction parameter; the store is not created"""
    pass


class ValidationError(ChronicleError):
    """Malformed query argument; raised before any task is queued"""
    pass


class StorageError(ChronicleError):
    """Read, write or overwrite of the backing file failed"""

    def __init__(self, operation: str, path, cause: Exception):
        self.operation = operation
        self.path = str(path)
        self.cause = cause
        super().__init__(f"{operation} failed for {self.path}: {cause}")


class StoreClosedError(ChronicleError):
    """Operation submitted after the store was closed"""
    pass
