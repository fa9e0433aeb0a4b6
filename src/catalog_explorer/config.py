"""
Explorer Configuration - Where the catalog comes from and how to log.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from catalog_explorer.errors import ConfigError
from catalog_explorer.store import CatalogStore, default_store

logger = logging.getLogger(__name__)

ENV_SEED_PATH = "CATALOG_EXPLORER_SEED"
ENV_LOG_LEVEL = "CATALOG_EXPLORER_LOG_LEVEL"

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

LOG_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def _log_level(value: Any) -> str:
    level = str(value).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(
            f"Unknown log level {value!r}, expected one of {', '.join(LOG_LEVELS)}"
        )
    return level


@dataclass(frozen=True)
class ExplorerConfig:
    """
    Catalog explorer configuration.

    ``seed_path`` points at a YAML file with a ``datasets`` list; when unset
    the built-in seed catalog is used.
    """
    seed_path: Optional[str] = None
    log_level: str = "WARNING"
    max_lineage_depth: int = 3

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExplorerConfig":
        """Create config from dictionary (snake_case or camelCase keys)."""
        depth = data.get("max_lineage_depth", data.get("maxLineageDepth", 3))
        try:
            depth = int(depth)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"max_lineage_depth must be an integer, got {depth!r}") from e
        if depth < 1:
            raise ConfigError("max_lineage_depth must be at least 1")

        return cls(
            seed_path=data.get("seed_path", data.get("seedPath")),
            log_level=_log_level(data.get("log_level", data.get("logLevel", "WARNING"))),
            max_lineage_depth=depth,
        )

    @classmethod
    def from_yaml_file(cls, file_path: str | Path) -> "ExplorerConfig":
        """Load config from a YAML file."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot load config {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config {file_path} must be a mapping")

        config = cls.from_dict(data)
        # Relative seed paths are taken relative to the config file
        if config.seed_path and not os.path.isabs(config.seed_path):
            seed = Path(file_path).parent / config.seed_path
            config = replace(config, seed_path=str(seed))
        return config

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> "ExplorerConfig":
        """Apply CATALOG_EXPLORER_* environment variables."""
        environ = os.environ if environ is None else environ
        config = self
        if environ.get(ENV_SEED_PATH):
            config = replace(config, seed_path=environ[ENV_SEED_PATH])
        if environ.get(ENV_LOG_LEVEL):
            config = replace(config, log_level=_log_level(environ[ENV_LOG_LEVEL]))
        return config

    def to_dict(self) -> dict:
        return {
            "seedPath": self.seed_path,
            "logLevel": self.log_level,
            "maxLineageDepth": self.max_lineage_depth,
        }


def build_store(config: ExplorerConfig) -> CatalogStore:
    """Return the configured catalog store."""
    if config.seed_path:
        return CatalogStore.from_yaml_file(config.seed_path)
    return default_store()


def configure_logging(config: ExplorerConfig) -> None:
    level = LOG_LEVELS[_log_level(config.log_level)]
    logging.basicConfig(level=level, format=LOG_FORMAT)
