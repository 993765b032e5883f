"""Directory tree aggregation.

Reads a directory, loads each file and recurses through subdirectories,
returning one mapping keyed by entry name (suffix stripped). Every
``index`` entry is rooted: its contents become the top level of the
directory that holds it, and sibling entries extend or override them.

Environment sections are applied once to the final result: when the top
level has a key matching the active environment, that section is deep
merged over the root.

Failures never abort the aggregation. They are collected on the returned
LoadResult alongside whatever loaded successfully.

Usage:
    loader = ModuleLoader(env="production")
    result = await loader.load("config")
    if not result.ok:
        for error in result.errors:
            print(error)
    config = result.modules
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Pattern, Tuple, Union

from bento.core.exceptions import DirectoryReadError, FileLoadError, LoaderError
from bento.loader.file_loaders import DEFAULT_FILE_LOADERS, FileLoader, LoadContext
from bento.utils.merge import apply_environment, deep_merge

logger = logging.getLogger(__name__)

DEFAULT_IGNORE = r"^\."
INDEX_NAME = "index"

# Python packaging artifacts, skipped whatever the ignore pattern
ALWAYS_SKIPPED = frozenset({"__pycache__", "__init__.py"})

_MISSING = object()

ModuleCallback = Callable[[str, Any], None]


@dataclass
class LoadResult:
    """Aggregated modules plus every error met along the way."""
    modules: Dict[str, Any] = field(default_factory=dict)
    errors: List[LoaderError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class ModuleLoader:
    """Aggregates a directory tree into a nested mapping."""

    def __init__(
        self,
        ignore: Union[str, Pattern[str], None] = DEFAULT_IGNORE,
        apply_env: bool = True,
        env: Optional[str] = None,
        file_loaders: Optional[Mapping[str, FileLoader]] = None,
    ):
        self.ignore = re.compile(ignore) if isinstance(ignore, str) else ignore
        self.apply_env = apply_env
        self.env = env
        self.file_loaders: Dict[str, FileLoader] = dict(DEFAULT_FILE_LOADERS)
        if file_loaders:
            self.file_loaders.update(file_loaders)

    async def load(
        self,
        path: Union[str, Path],
        context: Optional[LoadContext] = None,
        extend_globals: bool = False,
        on_module: Optional[ModuleCallback] = None,
    ) -> LoadResult:
        """Aggregate ``path``.

        Resolves once every entry at every depth has been attempted. Only
        directory listing and file reads leave the event loop; module code,
        including ``create(context)``, runs on the loop thread.

        Args:
            path: Directory to aggregate
            context: Passed to module factories
            extend_globals: Also bind context names as module globals
            on_module: Called with ``(name, value)`` as each top-level
                entry finishes loading

        Returns:
            LoadResult with the mapping and any collected errors
        """
        root = Path(path)
        errors: List[LoaderError] = []

        modules = await self._load_directory(
            root, context, extend_globals, errors, on_module=on_module, top_level=True
        )
        if modules is None:
            modules = {}

        if self.apply_env and self.env and isinstance(modules, Mapping):
            modules = apply_environment(modules, self.env)

        logger.info(
            f"Loaded '{root}': {len(modules) if isinstance(modules, Mapping) else 1} "
            f"top-level entries, {len(errors)} errors"
        )
        return LoadResult(modules=modules, errors=errors)

    def parse_directory(
        self,
        path: Union[str, Path],
        context: Optional[LoadContext] = None,
        extend_globals: bool = False,
        on_module: Optional[ModuleCallback] = None,
    ) -> LoadResult:
        """Synchronous form of load(). Not usable inside a running event loop."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.load(path, context, extend_globals, on_module))

        raise RuntimeError("parse_directory() cannot run inside an event loop; await load() instead")

    def is_ignored(self, name: str) -> bool:
        if name in ALWAYS_SKIPPED:
            return True
        return bool(self.ignore and self.ignore.search(name))

    def root_index(self, modules: Mapping[str, Any], where: Union[str, Path] = "") -> Any:
        """Move the ``index`` entry to the root; siblings extend it.

        Returns a new mapping. An index that is not a mapping becomes the
        whole value when it has no siblings and is otherwise left in place.
        """
        if INDEX_NAME not in modules:
            return deep_merge({}, modules)

        index = modules[INDEX_NAME]
        siblings = {k: v for k, v in modules.items() if k != INDEX_NAME}

        if isinstance(index, Mapping):
            return deep_merge(index, siblings)

        if not siblings:
            return index

        logger.warning(f"Index of '{where}' is not a mapping; keeping it under '{INDEX_NAME}'")
        return deep_merge({}, modules)

    async def _load_directory(
        self,
        directory: Path,
        context: Optional[LoadContext],
        extend_globals: bool,
        errors: List[LoaderError],
        on_module: Optional[ModuleCallback] = None,
        top_level: bool = False,
    ) -> Optional[Any]:
        try:
            names = await asyncio.to_thread(_list_directory, directory)
        except OSError as e:
            error = DirectoryReadError(directory, e)
            errors.append(error)
            if top_level:
                logger.error(str(error))
            else:
                logger.warning(str(error))
            return None

        names = [n for n in names if not self.is_ignored(n)]

        entries = await asyncio.gather(*(
            self._load_entry(directory / name, context, extend_globals, errors, on_module)
            for name in names
        ))

        modules: Dict[str, Any] = {}
        for module_name, value in entries:
            if value is _MISSING:
                continue
            if module_name in modules:
                logger.warning(f"Duplicate module name '{module_name}' in '{directory}'; merging")
                value = _merge_values(modules[module_name], value)
            modules[module_name] = value

        return self.root_index(modules, directory)

    async def _load_entry(
        self,
        entry: Path,
        context: Optional[LoadContext],
        extend_globals: bool,
        errors: List[LoaderError],
        on_module: Optional[ModuleCallback] = None,
    ) -> Tuple[str, Any]:
        is_dir = await asyncio.to_thread(entry.is_dir)

        if is_dir:
            value = await self._load_directory(entry, context, extend_globals, errors)
            if value is None:
                return entry.name, _MISSING
            if on_module is not None:
                on_module(entry.name, value)
            return entry.name, value

        module_name = entry.stem
        loader = self.file_loaders.get(entry.suffix.lower())
        if loader is None:
            error = FileLoadError(entry, ValueError(f"no loader registered for '{entry.suffix}' files"))
            errors.append(error)
            logger.warning(str(error))
            return module_name, _MISSING

        try:
            source = await asyncio.to_thread(entry.read_text, encoding="utf-8")
            value = loader(entry, source, context, extend_globals)
        except Exception as e:
            error = FileLoadError(entry, e)
            errors.append(error)
            logger.warning(str(error), exc_info=True)
            return module_name, _MISSING

        logger.debug(f"Loaded module '{module_name}' from {entry}")
        if on_module is not None:
            on_module(module_name, value)
        return module_name, value


def parse_directory(
    path: Union[str, Path],
    context: Optional[LoadContext] = None,
    extend_globals: bool = False,
    on_module: Optional[ModuleCallback] = None,
    **loader_options: Any,
) -> LoadResult:
    """Aggregate ``path`` synchronously with a one-off ModuleLoader."""
    return ModuleLoader(**loader_options).parse_directory(path, context, extend_globals, on_module)


def _list_directory(directory: Path) -> List[str]:
    return sorted(p.name for p in directory.iterdir())


def _merge_values(existing: Any, value: Any) -> Any:
    if isinstance(existing, Mapping) and isinstance(value, Mapping):
        return deep_merge(existing, value)
    return value
