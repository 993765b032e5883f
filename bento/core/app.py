"""Application shell owning configuration, collections and extensions."""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from bento.core.collection import Collection
from bento.core.config import BentoConfig
from bento.core.exceptions import (
    DuplicateCollectionError,
    LoaderError,
    MissingCollectionError,
)
from bento.core.extension import (
    ExtensionRegistry,
    create_extension,
    resolve_requested_config,
)
from bento.loader.file_loaders import LoadContext
from bento.loader.module_loader import LoadResult, ModuleLoader
from bento.utils.merge import deep_merge

logger = logging.getLogger(__name__)


class BentoBox:
    """Central coordinator for a bento application.

    Examples:

    Load modules with access to the ``models`` collection as a mapping:

        bento.load("path/to/modules", "models")

    Expose it to the modules under another name:

        bento.load("path/to/modules", "models", "all_models")
    """

    def __init__(
        self,
        config: Union[str, Mapping[str, Any], None] = None,
        settings: Optional[BentoConfig] = None,
    ):
        self._setup(settings)
        self._config = self._load_config(config)

        logger.info(f"BentoBox initialized ({len(self._config)} config sections)")

    @classmethod
    async def create_async(
        cls,
        config: Union[str, Mapping[str, Any], None] = None,
        settings: Optional[BentoConfig] = None,
    ) -> "BentoBox":
        """Build a BentoBox from inside a running event loop.

        Same arguments as the constructor, which cannot aggregate a config
        directory while a loop is running.
        """
        bento = cls.__new__(cls)
        bento._setup(settings)
        bento._config = await bento._load_config_async(config)

        logger.info(f"BentoBox initialized ({len(bento._config)} config sections)")
        return bento

    def _setup(self, settings: Optional[BentoConfig]) -> None:
        self.settings = settings or BentoConfig()
        self.loader = ModuleLoader(
            ignore=self.settings.loader.ignore_pattern,
            apply_env=self.settings.loader.apply_environment,
            env=self.settings.loader.environment,
        )
        self.extensions = ExtensionRegistry()
        self.last_load_errors: List[LoaderError] = []

        self._collections: Dict[str, Collection] = {}
        self._config: Dict[str, Any] = {}

    @property
    def config(self) -> Dict[str, Any]:
        return self._config

    @property
    def collections(self) -> Dict[str, Collection]:
        return dict(self._collections)

    def _load_config(self, config: Union[str, Mapping[str, Any], None]) -> Dict[str, Any]:
        """Load the app configuration.

        A string is a config directory. Otherwise the settings' config_path
        is aggregated and a mapping ``config`` is deep merged over it.
        """
        path, overrides = self._config_source(config)
        loaded = self._aggregate(path) if path else None
        return self._finish_config(path, loaded, overrides)

    async def _load_config_async(self, config: Union[str, Mapping[str, Any], None]) -> Dict[str, Any]:
        path, overrides = self._config_source(config)
        loaded = await self._aggregate_async(path) if path else None
        return self._finish_config(path, loaded, overrides)

    def _config_source(self, config):
        """Return the directory to aggregate (None if absent) and the overrides."""
        path = config if isinstance(config, str) else self.settings.config_path
        overrides = config if isinstance(config, Mapping) else None

        if path and Path(path).is_dir():
            return path, overrides

        if isinstance(config, str):
            logger.warning(f"Config directory '{config}' does not exist")
        return None, overrides

    @staticmethod
    def _finish_config(path, loaded, overrides) -> Dict[str, Any]:
        if path is None:
            return deep_merge({}, overrides)

        if not isinstance(loaded, Mapping):
            logger.warning(f"Config directory '{path}' did not produce a mapping; ignoring it")
            loaded = {}
        return deep_merge(loaded, overrides)

    def get_config(self, name: str) -> Any:
        """Get a config section, or None if not present."""
        return self._config.get(name)

    def create(self, name: str) -> Collection:
        """Create a new collection.

        Raises:
            DuplicateCollectionError: If the collection already exists
        """
        if name in self._collections:
            raise DuplicateCollectionError(name)

        collection = Collection(name, max_history=self.settings.collections.max_history)
        self._collections[name] = collection
        logger.debug(f"Created collection '{name}'")
        return collection

    def collection(self, name: str) -> Collection:
        """Get a collection, creating it on first use."""
        if name not in self._collections:
            return self.create(name)
        return self._collections[name]

    def add(self, name: str, *args: Any) -> None:
        """Add an item to a collection, creating it if needed."""
        self.collection(name).add(*args)

    def remove(self, name: str, identifier: Any) -> None:
        """Remove an item from a collection, creating it if needed."""
        self.collection(name).remove(identifier)

    def log(self, name: str, message: Any, level: str = "info") -> None:
        self.collection(name).log(message, level)

    def on(self, name: str) -> Dict[str, Callable[..., Any]]:
        """Get the action register methods of a collection, creating it if needed."""
        return self.collection(name).get_actions()

    def off(self, name: str) -> Dict[str, Callable[..., None]]:
        """Get the action unsubscribe methods of a collection.

        Raises:
            MissingCollectionError: If the collection does not exist
        """
        if name not in self._collections:
            raise MissingCollectionError(name)

        return self._collections[name].get_unsubscribe_actions()

    def load(self, directory: Union[str, Path], collection_name: Optional[str] = None,
             as_: Optional[str] = None) -> Any:
        """Load modules with the collection exposed as a mapping."""
        return self.load_with_collection_map(directory, collection_name, as_)

    def load_with_collection_map(self, directory: Union[str, Path],
                                 collection_name: Optional[str] = None,
                                 as_: Optional[str] = None) -> Any:
        return self._load_with_view(directory, collection_name, as_, Collection.get_map)

    def load_with_collection_array(self, directory: Union[str, Path],
                                   collection_name: Optional[str] = None,
                                   as_: Optional[str] = None) -> Any:
        return self._load_with_view(directory, collection_name, as_, Collection.get_array)

    async def load_async(self, directory: Union[str, Path], collection_name: Optional[str] = None,
                         as_: Optional[str] = None) -> Any:
        """Awaitable form of load(), for callers inside a running event loop."""
        return await self.load_with_collection_map_async(directory, collection_name, as_)

    async def load_with_collection_map_async(self, directory: Union[str, Path],
                                             collection_name: Optional[str] = None,
                                             as_: Optional[str] = None) -> Any:
        context = self._load_context(collection_name, as_, Collection.get_map)
        return await self._aggregate_async(directory, context, extend_globals=True)

    async def load_with_collection_array_async(self, directory: Union[str, Path],
                                               collection_name: Optional[str] = None,
                                               as_: Optional[str] = None) -> Any:
        context = self._load_context(collection_name, as_, Collection.get_array)
        return await self._aggregate_async(directory, context, extend_globals=True)

    def register_extension(self, name: str, factory: Callable[[], Any]) -> None:
        self.extensions.register(name, factory)

    def use(self, blueprint: Union[str, Callable[[], Any]], *args: Any) -> Any:
        """Create an extension and return its accessors.

        Args:
            blueprint: Extension class/factory, or a registered name
            *args: Passed to the extension's ``init`` hook

        Raises:
            KeyError: If a name is given that was never registered
        """
        if isinstance(blueprint, str):
            factory = self.extensions.get(blueprint)
            if factory is None:
                raise KeyError(f"No extension registered as '{blueprint}'")
            blueprint = factory

        extension = create_extension(blueprint, *args)
        requested = resolve_requested_config(extension.get_requested_config(), self._config)
        extension.ready(self, requested)

        logger.debug(f"Extension {type(extension).__name__} ready")
        return extension.get_accessors()

    def _load_with_view(self, directory, collection_name, as_, view) -> Any:
        context = self._load_context(collection_name, as_, view)
        return self._aggregate(directory, context, extend_globals=True)

    def _load_context(self, collection_name, as_, view) -> LoadContext:
        context = LoadContext(bento=self)

        if collection_name:
            if collection_name not in self._collections:
                raise MissingCollectionError(collection_name)
            context.values[as_ or collection_name] = view(self._collections[collection_name])

        return context

    def _aggregate(self, directory: Union[str, Path], context: Optional[LoadContext] = None,
                   extend_globals: bool = False) -> Any:
        result = self.loader.parse_directory(directory, context, extend_globals)
        return self._take_result(directory, result)

    async def _aggregate_async(self, directory: Union[str, Path], context: Optional[LoadContext] = None,
                               extend_globals: bool = False) -> Any:
        result = await self.loader.load(directory, context, extend_globals)
        return self._take_result(directory, result)

    def _take_result(self, directory, result: LoadResult) -> Any:
        self.last_load_errors = result.errors

        if result.errors:
            logger.error(f"{len(result.errors)} errors while loading '{directory}'")

        return result.modules
