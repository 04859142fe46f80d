"""
SDK Logging - Diagnostic logger for chronicle components.

API:
    from sdk.logging import getLogger

    # Class-level (auto-detect once in __init__)
    class SerialTaskQueue:
        def __init__(self):
            self.log = getLogger()  # Auto: 'chronicle.core.taskQueue.SerialTaskQueue'

        async def close(self):
            self.log.debug("Worker stopped", completed=self._completed)

    # Module-level (auto-detect once at import)
    log = getLogger()  # Auto: 'chronicle.main'

    # Global configuration (optional, once at app startup)
    from sdk.logging import configureLogging
    configureLogging(logDir='./logs', maxBytes=10_000_000, backupCount=5)
"""

from .logger import getLogger, configureLogging, resetLogging

__all__ = [
    'getLogger',
    'configureLogging',
    'resetLogging'
]
