"""
Diagnostic logger with automatic hierarchy detection.

Features:
- Auto-detects logger name from the call stack (computed once, cached)
- Optional log directory with size-based rotation per application
- Structured field logging: log.info("Compacted", kept=3, dropped=1)
- Stdlib only, zero overhead after logger assignment

Usage:
    from sdk.logging import getLogger

    # Pattern 1: Class-level (compute once in __init__)
    class SerialTaskQueue:
        def __init__(self):
            self.log = getLogger()  # 'chronicle.core.taskQueue.SerialTaskQueue'

    # Pattern 2: Module-level (compute once at import)
    log = getLogger()  # 'chronicle.main'

These are process diagnostics only. Entries written by a LogStore never go
through this module.

Property of Uncompromising Sensors LLC.
"""

# Imports
import  inspect, logging, logging.handlers, socket
from pathlib import Path
from typing import Optional
from datetime import datetime, timezone as tz


# Global state
_hostname = socket.gethostname()
_configured = False
_fileHandlers = {}  # Singleton cache: logPath -> handler
_managedLoggers = set()
_config = {
    'logDir': None,                 # None: console only
    'maxBytes': 10_000_000,         # 10 MB per diagnostic file before rotation
    'backupCount': 5,
    'console': True,
    'level': logging.INFO,
    'utc': False
}

# Record attributes that are never rendered as structured fields
_RESERVED = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName',
    'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'hostname', 'asctime', 'taskName'
}


def configureLogging(logDir: Optional[str] = None, maxBytes: int = 10_000_000,
                     backupCount: int = 5, console: bool = True,
                     level: str = 'INFO', utc: bool = False):
    """
    Configure global diagnostic logging (call once at app startup).

    Args:
        logDir: Directory for diagnostic files (default: None, console only)
        maxBytes: Maximum size per diagnostic file before rotation (default: 10MB)
        backupCount: Number of rotated files to keep per app (default: 5)
        console: Also log to stderr (default: True)
        level: Minimum log level name (default: 'INFO')
        utc: Use UTC timestamps (default: False, uses local time)

    Raises:
        ValueError: If level is not a known logging level name
    """
    global _configured

    levelNo = logging.getLevelName(level.upper())
    if not isinstance(levelNo, int):
        raise ValueError(f"Unknown log level: {level}")

    _config.update({'logDir': logDir, 'maxBytes': maxBytes, 'backupCount': backupCount,
                    'console': console, 'level': levelNo, 'utc': utc})

    if logDir is not None:
        Path(logDir).mkdir(parents=True, exist_ok=True)
    _configured = True


def resetLogging():
    """Detach every handler installed by getLogger() so the next call reconfigures."""
    global _configured
    for name in list(_managedLoggers):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        if hasattr(logger, '_configured_by_sdk'):
            del logger._configured_by_sdk
    _managedLoggers.clear()
    for handler in _fileHandlers.values():
        handler.close()
    _fileHandlers.clear()
    _configured = False


def _autoDetectName() -> str:
    """Auto-detect logger name from call stack, e.g. 'chronicle.core.logStore.LogStore'"""

    frame = inspect.currentframe()
    try:
        current = frame
        while current is not None:
            current = current.f_back
            if current is None:
                break

            module = inspect.getmodule(current)
            if module is None:
                continue

            moduleName = module.__name__

            # Skip frames inside this package
            if moduleName.startswith('sdk.logging'):
                continue

            # Skip Python's import machinery
            if moduleName.startswith('importlib'):
                continue

            hierarchy = moduleName
            if moduleName == '__main__':
                hierarchy = Path(current.f_code.co_filename).stem or 'main'

            className = None
            if current.f_locals:
                if 'self' in current.f_locals:
                    className = current.f_locals['self'].__class__.__name__
                elif 'cls' in current.f_locals:
                    className = current.f_locals['cls'].__name__

            if className:
                hierarchy = f"{hierarchy}.{className}"

            return hierarchy or 'unknown'

        return 'unknown'
    finally:
        del frame


class StructuredFormatter(logging.Formatter):
    """Formatter that appends structured fields.
    Format: timestamp - hostname - logger.name - level - message [field1=value1, field2=value2]"""

    def __init__(self, fmt=None, datefmt=None, utc=False):
        super().__init__(fmt, datefmt)
        self.utc = utc

    def formatTime(self, record, datefmt=None):
        """Override to support UTC if configured."""
        if self.utc:
            ct = datetime.fromtimestamp(record.created, tz=tz.utc)
        else:
            ct = datetime.fromtimestamp(record.created)

        if datefmt:
            return ct.strftime(datefmt)
        return f"{ct.strftime('%Y-%m-%d %H:%M:%S')},{int(record.msecs):03d}"

    def format(self, record):
        record.hostname = _hostname

        fields = [f"{key}={value}" for key, value in record.__dict__.items()
                  if key not in _RESERVED and not key.startswith('_')]

        # Render fields on a copy of msg so other handlers see the original
        originalMsg = record.msg
        if fields:
            record.msg = f"{originalMsg} [{', '.join(fields)}]"
        try:
            return super().format(record)
        finally:
            record.msg = originalMsg


def getLogger(name: Optional[str] = None) -> logging.Logger:
    """
    Get or create a diagnostic logger.

    Stack inspection happens once per getLogger() call; keep the returned
    logger on the instance or module.

    Args:
        name: Logger name (auto-detected from call stack if None)

    Returns:
        logging.Logger whose debug/info/warning/error/critical accept
        structured fields as keyword arguments
    """
    if not _configured:
        configureLogging()

    if name is None:
        name = _autoDetectName()

    logger = logging.getLogger(name)

    # Handlers are attached per logger, so never propagate (no duplicates)
    logger.propagate = False

    if not hasattr(logger, '_configured_by_sdk'):
        logger.setLevel(_config['level'])

        if _config['logDir'] is not None:
            # One file per top-level app, e.g. 'chronicle.log'
            appName = name.split('.')[0]
            logPath = str(Path(_config['logDir']) / f"{appName}.log")

            if logPath not in _fileHandlers:
                fileHandler = logging.handlers.RotatingFileHandler(
                    logPath,
                    maxBytes=_config['maxBytes'],
                    backupCount=_config['backupCount'],
                    encoding='utf-8'
                )
                fileHandler.setLevel(_config['level'])
                fileHandler.setFormatter(StructuredFormatter(
                    '%(asctime)s - %(hostname)s - %(name)s - %(levelname)s - %(message)s',
                    utc=_config['utc']
                ))
                _fileHandlers[logPath] = fileHandler

            logger.addHandler(_fileHandlers[logPath])

        if _config['console']:
            consoleHandler = logging.StreamHandler()
            consoleHandler.setLevel(_config['level'])
            consoleHandler.setFormatter(StructuredFormatter(
                '%(name)s - %(levelname)s - %(message)s',
                utc=_config['utc']
            ))
            logger.addHandler(consoleHandler)

        logger._configured_by_sdk = True
        _managedLoggers.add(name)

    return _wrapLogger(logger)


def _wrapLogger(logger: logging.Logger) -> logging.Logger:
    """
    Let the level methods take structured fields as **kwargs.

    This allows: log.info("Compacted", kept=3)
    Instead of: log.info("Compacted", extra={'kept': 3})
    """
    if hasattr(logger, '_is_wrapped'):
        return logger

    def wrap(original):
        def method(msg, *args, **kwargs):
            # exc_info and stack_info are reserved logging parameters
            exc_info = kwargs.pop('exc_info', False)
            stack_info = kwargs.pop('stack_info', False)
            if kwargs:
                original(msg, *args, extra=kwargs, exc_info=exc_info, stack_info=stack_info)
            else:
                original(msg, *args, exc_info=exc_info, stack_info=stack_info)
        return method

    logger.debug = wrap(logger.debug)
    logger.info = wrap(logger.info)
    logger.warning = wrap(logger.warning)
    logger.error = wrap(logger.error)
    logger.critical = wrap(logger.critical)
    logger._is_wrapped = True

    return logger
