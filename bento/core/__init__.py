"""Core framework components.

- Observable action channels with late-subscriber replay
- Collections of items that report mutations as actions
- The BentoBox application shell and its extensions
- Framework settings and the error taxonomy

Usage:
    from bento.core import BentoBox, Collection, Observable
"""

from bento.core.config import (
    BentoConfig,
    LoaderConfig,
    CollectionConfig,
    load_config,
    validate_config,
)
from bento.core.exceptions import (
    BentoError,
    DuplicateActionError,
    DuplicateCollectionError,
    MissingCollectionError,
    LoaderError,
    DirectoryReadError,
    FileLoadError,
)
from bento.core.observable import Observable, Responder
from bento.core.collection import Collection, Item
from bento.core.extension import (
    Extension,
    ExtensionRegistry,
    create_extension,
)
from bento.core.app import BentoBox
from bento.core.log_bridge import CollectionLogForwarder, forward_collection_logs

__all__ = [
    # Configuration
    "BentoConfig",
    "LoaderConfig",
    "CollectionConfig",
    "load_config",
    "validate_config",

    # Errors
    "BentoError",
    "DuplicateActionError",
    "DuplicateCollectionError",
    "MissingCollectionError",
    "LoaderError",
    "DirectoryReadError",
    "FileLoadError",

    # Actions & Collections
    "Observable",
    "Responder",
    "Collection",
    "Item",

    # Application
    "BentoBox",
    "Extension",
    "ExtensionRegistry",
    "create_extension",

    # Logging
    "CollectionLogForwarder",
    "forward_collection_logs",
]
