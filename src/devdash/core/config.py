"""Configuration management.

Loads and merges configuration from multiple sources with proper precedence.
"""

import json
import os
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .config_loader import ConfigError, deep_merge, load_json_file
from .config_schema import Config, DockerConfig, LoggingConfig, PollingConfig
from .global_paths import GlobalPath
from ..util.log import Log

log = Log.create({"service": "config"})

__all__ = [
    "Config",
    "ConfigError",
    "ConfigManager",
    "DockerConfig",
    "LoggingConfig",
    "PollingConfig",
]

CONFIG_FILENAMES = ("devdash.json", "devdash.jsonc")


class ConfigManager:
    """Loads the effective configuration once and caches it.

    Sources, lowest precedence first:
    1. Global config (``<config dir>/devdash.json`` or ``devdash.jsonc``)
    2. File named by ``DEVDASH_CONFIG``
    3. Inline JSON in ``DEVDASH_CONFIG_CONTENT``
    """

    def __init__(self, overrides: Optional[Dict[str, Any]] = None) -> None:
        self._overrides = overrides or {}
        self._cache: Optional[Config] = None
        self._sources: List[str] = []

    def reset(self) -> None:
        self._cache = None
        self._sources = []

    def sources(self) -> List[str]:
        return self._sources.copy()

    def get(self) -> Config:
        if self._cache is None:
            self._cache = self._load()
        return self._cache

    def _load(self) -> Config:
        result: Dict[str, Any] = {}
        sources: List[str] = []

        # 1. Global config
        for filename in CONFIG_FILENAMES:
            filepath = os.path.join(GlobalPath.config(), filename)
            data = load_json_file(filepath)
            if data:
                result = deep_merge(result, data)
                sources.append(filepath)
                log.info("loaded global config", {"path": filepath})

        # 2. Explicit config file
        explicit = os.environ.get("DEVDASH_CONFIG")
        if explicit:
            if not os.path.exists(explicit):
                raise ConfigError(explicit, "file does not exist")
            result = deep_merge(result, load_json_file(explicit))
            sources.append(explicit)
            log.info("loaded config file", {"path": explicit})

        # 3. Inline content
        content = os.environ.get("DEVDASH_CONFIG_CONTENT")
        if content:
            try:
                data = json.loads(content)
            except json.JSONDecodeError as e:
                raise ConfigError("DEVDASH_CONFIG_CONTENT", str(e)) from e
            if not isinstance(data, dict):
                raise ConfigError("DEVDASH_CONFIG_CONTENT", "top-level value must be an object")
            result = deep_merge(result, data)
            sources.append("DEVDASH_CONFIG_CONTENT")
            log.info("loaded config from DEVDASH_CONFIG_CONTENT")

        if self._overrides:
            result = deep_merge(result, self._overrides)

        try:
            config = Config.model_validate(result)
        except ValidationError as e:
            where = sources[-1] if sources else "defaults"
            raise ConfigError(where, str(e)) from e

        self._sources = sources
        return config
