"""Extension capability interface and registry.

An extension is created by BentoBox.use() in three steps:

1. ``init(*args)`` receives the arguments given to use()
2. ``ready(bento, config)`` receives the app and the config it requested
   through ``get_requested_config()``
3. ``get_accessors()`` supplies the public API returned to the caller

Subclass Extension and override only the hooks you need. Plain classes
are accepted too; missing hooks fall back to the defaults.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

RequestedConfig = Union[None, str, Sequence[str]]


class Extension:
    """Default no-op implementation of every extension hook."""

    def init(self, *args: Any) -> None:
        pass

    def ready(self, bento: Any, config: Any) -> None:
        pass

    def get_requested_config(self) -> RequestedConfig:
        return None

    def get_accessors(self) -> Any:
        return {}


class _DefaultFilled(Extension):
    """Delegates to a plain object, using Extension defaults for missing hooks."""

    def __init__(self, target: Any):
        self.target = target

    def init(self, *args: Any) -> None:
        hook = getattr(self.target, "init", None)
        if callable(hook):
            hook(*args)

    def ready(self, bento: Any, config: Any) -> None:
        hook = getattr(self.target, "ready", None)
        if callable(hook):
            hook(bento, config)

    def get_requested_config(self) -> RequestedConfig:
        hook = getattr(self.target, "get_requested_config", None)
        return hook() if callable(hook) else None

    def get_accessors(self) -> Any:
        hook = getattr(self.target, "get_accessors", None)
        return hook() if callable(hook) else {}


def as_extension(instance: Any) -> Extension:
    """Fill in default hooks for objects that do not subclass Extension."""
    if isinstance(instance, Extension):
        return instance
    return _DefaultFilled(instance)


def create_extension(blueprint: Callable[[], Any], *args: Any) -> Extension:
    """Instantiate a blueprint and run its ``init`` hook.

    Each call builds a fresh instance, so state set through accessors
    never leaks back into the blueprint.
    """
    extension = as_extension(blueprint())
    extension.init(*args)
    return extension


def resolve_requested_config(requested: RequestedConfig, config: Dict[str, Any]) -> Any:
    """Select the config sections an extension asked for."""
    if requested is None:
        return None
    if isinstance(requested, str):
        return config.get(requested)
    return {name: config.get(name) for name in requested}


class ExtensionRegistry:
    """
    Named extension factories.

    BentoBox.use() accepts a registered name in place of a blueprint.
    """

    def __init__(self):
        self._factories: Dict[str, Callable[[], Any]] = {}

    def register(self, name: str, factory: Callable[[], Any]) -> None:
        """Register a factory by name. Re-registering replaces it."""
        if name in self._factories:
            logger.warning(f"Replacing extension factory '{name}'")
        self._factories[name] = factory

    def get(self, name: str) -> Optional[Callable[[], Any]]:
        """Get a factory by name, or None if not found."""
        return self._factories.get(name)

    def list_extensions(self) -> List[str]:
        return list(self._factories.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._factories
