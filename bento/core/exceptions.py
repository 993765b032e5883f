"""Error taxonomy for collections, the application shell and the loader."""

from pathlib import Path
from typing import Optional, Union


class BentoError(Exception):
    """Base class for all bento errors."""
    pass


class DuplicateActionError(BentoError):
    """Action name already registered on a collection."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot create an action that already exists: '{name}'")


class DuplicateCollectionError(BentoError):
    """Collection name already registered on the application."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Attempting to create a collection that already exists: '{name}'")


class MissingCollectionError(BentoError):
    """Operation requires a collection that was never created."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Collection does not exist: '{name}'")


class LoaderError(BentoError):
    """Problem encountered while aggregating a directory.

    Loader errors are collected on the load result, never raised.
    """

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.cause is None:
            return f"Failed to load '{self.path}'"
        return f"Failed to load '{self.path}': {self.cause}"


class DirectoryReadError(LoaderError):
    """Directory could not be listed."""

    def _describe(self) -> str:
        return f"Cannot read directory '{self.path}': {self.cause}"


class FileLoadError(LoaderError):
    """Single file could not be loaded or evaluated."""
    pass
