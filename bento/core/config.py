"""Framework settings and loading."""

from dataclasses import dataclass, field
from typing import List, Optional
from pathlib import Path
import logging
import os
import re

import yaml
from dotenv import load_dotenv

from bento.loader.module_loader import DEFAULT_IGNORE

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class LoaderConfig:
    """Directory aggregation settings."""
    ignore_pattern: str = DEFAULT_IGNORE
    apply_environment: bool = True
    environment: Optional[str] = None


@dataclass
class CollectionConfig:
    """Collection settings."""
    max_history: Optional[int] = None  # None keeps the full replay queue


@dataclass
class BentoConfig:
    """Main framework configuration.

    Passed explicitly to BentoBox; nothing here is process-wide state.
    """
    debug_mode: bool = False
    log_level: str = "INFO"
    config_path: Optional[str] = "config"
    log_dir: Optional[str] = None

    loader: LoaderConfig = field(default_factory=LoaderConfig)
    collections: CollectionConfig = field(default_factory=CollectionConfig)


def load_config(settings_path: Optional[str] = None) -> BentoConfig:
    """Load settings from environment and an optional YAML settings file."""
    load_dotenv()

    config = BentoConfig()

    config.debug_mode = os.getenv("DEBUG_MODE", "false").lower() == "true"
    config.log_level = os.getenv("LOG_LEVEL", config.log_level).upper()
    config.config_path = os.getenv("BENTO_CONFIG_PATH", config.config_path)
    config.log_dir = os.getenv("BENTO_LOG_DIR", config.log_dir)

    # Loader config
    config.loader.environment = os.getenv("BENTO_ENV", os.getenv("ENVIRONMENT"))
    config.loader.apply_environment = (
        os.getenv("BENTO_APPLY_ENV", "true").lower() == "true"
    )

    # Collection config
    max_history = os.getenv("BENTO_MAX_HISTORY")
    if max_history:
        config.collections.max_history = int(max_history)

    # Settings file overrides
    path = Path(settings_path or os.getenv("BENTO_SETTINGS", "bento.yaml"))
    if path.exists():
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if "loader" in data:
            config.loader = LoaderConfig(**{**vars(config.loader), **data["loader"]})
        if "collections" in data:
            config.collections = CollectionConfig(**{**vars(config.collections), **data["collections"]})
        for key in ("debug_mode", "log_level", "config_path", "log_dir"):
            if key in data:
                setattr(config, key, data[key])
        logging.getLogger(__name__).debug(f"Applied settings file {path}")

    return config


def validate_config(config: BentoConfig) -> List[str]:
    """Validate configuration and return errors."""
    errors = []

    if str(config.log_level).upper() not in LOG_LEVELS:
        errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}")

    max_history = config.collections.max_history
    if max_history is not None and (not isinstance(max_history, int) or max_history < 1):
        errors.append("collections.max_history must be a positive integer or unset")

    try:
        re.compile(config.loader.ignore_pattern)
    except (re.error, TypeError) as e:
        errors.append(f"loader.ignore_pattern is not a valid regular expression: {e}")

    if config.config_path and Path(config.config_path).exists() and not Path(config.config_path).is_dir():
        errors.append(f"config_path '{config.config_path}' is not a directory")

    return errors
