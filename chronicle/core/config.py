"""
Log store configuration.

Config file (JSON, every key optional):
{
  "path": "logs/app.log",
  "writeMode": "a",                 // a | ax | w | wx
  "retentionSeconds": 7776000,      // 90 days
  "dateDelimiter": "/",
  "timeDelimiter": ":",
  "autoFormat": true,
  "cleanUpIntervalSeconds": null,   // periodic compaction, null = off
  "logging": {                      // passed to sdk.logging.configureLogging
    "logDir": null,
    "level": "INFO",
    "console": true
  }
}

Environment:
  CHRONICLE_LOG_PATH overrides "path".
"""

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import orjson

from .errors import ConfigurationError


ENV_LOG_PATH = "CHRONICLE_LOG_PATH"

DEFAULT_STORE_CONFIG: Dict[str, Any] = {
    'path': None,
    'writeMode': 'a',
    'retentionSeconds': 7_776_000,  # 90 days
    'dateDelimiter': '/',
    'timeDelimiter': ':',
    'autoFormat': True,
    'cleanUpIntervalSeconds': None,
    'logging': {},
}

# Expected JSON types per key (None always allowed for path/interval)
_FIELD_TYPES = {
    'path': (str,),
    'writeMode': (str,),
    'retentionSeconds': (int, float),
    'dateDelimiter': (str,),
    'timeDelimiter': (str,),
    'autoFormat': (bool,),
    'cleanUpIntervalSeconds': (int, float),
    'logging': (dict,),
}
_NULLABLE = {'path', 'cleanUpIntervalSeconds'}


@dataclass
class StoreConfig:
    """Construction parameters of a LogStore plus process-level settings"""
    path: Optional[str] = None
    writeMode: str = 'a'
    retentionSeconds: float = 7_776_000
    dateDelimiter: str = '/'
    timeDelimiter: str = ':'
    autoFormat: bool = True
    cleanUpIntervalSeconds: Optional[float] = None
    logging: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def fromDict(cls, data: Dict[str, Any]) -> 'StoreConfig':
        """
        Merge data onto the defaults and validate.

        Raises:
            ConfigurationError: On unknown keys or wrongly typed values
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Store config is not a JSON object")

        unknown = set(data) - set(DEFAULT_STORE_CONFIG)
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        merged = copy.deepcopy(DEFAULT_STORE_CONFIG)
        merged.update(data)

        for key, value in merged.items():
            if value is None and key in _NULLABLE:
                continue
            expected = _FIELD_TYPES[key]
            # bool is an int subclass; only autoFormat may be a bool
            if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
                raise ConfigurationError(f"Config key '{key}' has invalid value {value!r}")

        return cls(**merged)

    def toDict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'writeMode': self.writeMode,
            'retentionSeconds': self.retentionSeconds,
            'dateDelimiter': self.dateDelimiter,
            'timeDelimiter': self.timeDelimiter,
            'autoFormat': self.autoFormat,
            'cleanUpIntervalSeconds': self.cleanUpIntervalSeconds,
            'logging': dict(self.logging),
        }


def loadStoreConfig(configPath: Optional[Union[str, Path]] = None,
                    environ: Optional[Dict[str, str]] = None) -> StoreConfig:
    """
    Load a store config from a JSON file (defaults only if configPath is None).

    Args:
        configPath: JSON config file
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated StoreConfig

    Raises:
        ConfigurationError: If the file is unreadable, not valid JSON, or invalid
    """
    environ = os.environ if environ is None else environ
    data: Dict[str, Any] = {}

    if configPath is not None:
        try:
            with open(configPath, 'rb') as f:
                data = orjson.loads(f.read())
        except OSError as e:
            raise ConfigurationError(f"Cannot read config {configPath}: {e}") from e
        except orjson.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config {configPath}: {e}") from e

    config = StoreConfig.fromDict(data)

    envPath = environ.get(ENV_LOG_PATH)
    if envPath:
        config.path = envPath

    return config
