"""
Bento - a small application-composition framework.

Discovers modules from a directory tree, merges per-environment
configuration, and lets loosely coupled extensions talk through
collections of observable actions.

Usage:
    from bento import BentoBox, load_config

    bento = BentoBox(settings=load_config())
    bento.on("models")["add"](lambda key, model: print(key, model))
    bento.add("models", "user", {"table": "users"})
"""

__version__ = "0.1.0"
__license__ = "MIT"

from bento.core import (
    BentoConfig,
    load_config,
    validate_config,
    BentoBox,
    Collection,
    Observable,
    Extension,
)
from bento.loader import ModuleLoader, LoadContext, parse_directory
from bento.utils import setup_logging

__all__ = [
    "__version__",
    "__license__",

    # Core
    "BentoConfig",
    "load_config",
    "validate_config",
    "BentoBox",
    "Collection",
    "Observable",
    "Extension",

    # Loading
    "ModuleLoader",
    "LoadContext",
    "parse_directory",

    # Utilities
    "setup_logging",
]
