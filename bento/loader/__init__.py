"""Directory aggregation.

Loads every file of a directory tree into one nested mapping, roots
``index`` entries and applies environment sections.

Usage:
    from bento.loader import ModuleLoader, LoadContext

    result = ModuleLoader(env="production").parse_directory("config")
    config = result.modules
"""

from bento.loader.file_loaders import (
    DEFAULT_FILE_LOADERS,
    LoadContext,
    load_json,
    load_python,
    load_yaml,
)
from bento.loader.module_loader import (
    LoadResult,
    ModuleLoader,
    parse_directory,
)

__all__ = [
    "ModuleLoader",
    "LoadResult",
    "LoadContext",
    "parse_directory",

    # File loaders
    "DEFAULT_FILE_LOADERS",
    "load_python",
    "load_yaml",
    "load_json",
]
