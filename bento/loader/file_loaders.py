"""Per-suffix loaders that turn a single file into its exported value."""

import importlib.util
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DYNAMIC_NAMESPACE = "bento.dynamic"

FACTORY_NAME = "create"
EXPORTS_NAME = "exports"


@dataclass
class LoadContext:
    """Explicit context handed to module factories.

    Python modules receive it through ``create(context)``. With
    ``extend_globals`` the same names are also bound as module globals.
    """
    bento: Any = None
    values: Dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Any:
        if name == "bento":
            return self.bento
        return self.values[name]

    def __contains__(self, name: str) -> bool:
        return name == "bento" or name in self.values

    def get(self, name: str, default: Any = None) -> Any:
        try:
            return self[name]
        except KeyError:
            return default

    def as_namespace(self) -> Dict[str, Any]:
        namespace = {"bento": self.bento}
        namespace.update(self.values)
        return namespace


# (path, source text, context, extend_globals) -> value. The source is read
# off the event loop; loaders themselves run on the loop thread.
FileLoader = Callable[[Path, str, Optional[LoadContext], bool], Any]


def load_python(path: Path, source: str, context: Optional[LoadContext] = None,
                extend_globals: bool = False) -> Any:
    """Execute Python source as an isolated module and return its export.

    The module is not added to sys.modules. Export resolution:
    ``create(context)`` if defined, else ``exports``, else the public
    non-module attributes (restricted to ``__all__`` when present).
    """
    module_name = f"{DYNAMIC_NAMESPACE}.{_safe_name(path.stem)}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"No module loader available for {path}")

    module = importlib.util.module_from_spec(spec)
    if context is not None and extend_globals:
        module.__dict__.update(context.as_namespace())

    code = compile(source, str(path), "exec")
    exec(code, module.__dict__)
    return _module_export(module, context)


def load_yaml(path: Path, source: str, context: Optional[LoadContext] = None,
              extend_globals: bool = False) -> Any:
    return yaml.safe_load(source)


def load_json(path: Path, source: str, context: Optional[LoadContext] = None,
              extend_globals: bool = False) -> Any:
    return json.loads(source)


DEFAULT_FILE_LOADERS: Dict[str, FileLoader] = {
    ".py": load_python,
    ".yaml": load_yaml,
    ".yml": load_yaml,
    ".json": load_json,
}


def _module_export(module: ModuleType, context: Optional[LoadContext]) -> Any:
    factory = getattr(module, FACTORY_NAME, None)
    if callable(factory):
        return factory(context if context is not None else LoadContext())

    if hasattr(module, EXPORTS_NAME):
        return getattr(module, EXPORTS_NAME)

    names = getattr(module, "__all__", None)
    if names is not None:
        return {name: getattr(module, name) for name in names}

    # Injected globals are context, not part of the module's export
    injected = set(context.as_namespace()) if context is not None else set()
    return {
        name: value
        for name, value in vars(module).items()
        if not name.startswith("_")
        and name not in injected
        and not isinstance(value, ModuleType)
    }


def _safe_name(stem: str) -> str:
    return re.sub(r"\W", "_", stem)
