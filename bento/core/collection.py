"""Collection of key/value items that reports every mutation as an action.

Each collection owns three built-in actions, ``add``, ``remove`` and
``log``, plus any created with create_action(). Extensions subscribe to
actions through get_actions() and stop listening through
get_unsubscribe_actions().
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from hashids import Hashids

from bento.core.exceptions import DuplicateActionError
from bento.core.observable import Observable

logger = logging.getLogger(__name__)

BUILTIN_ACTIONS = ("add", "remove", "log")

_hashids = Hashids(salt="bento-box", min_length=8)


def auto_key(position: int) -> str:
    """Opaque key get_map() assigns to an unkeyed item at ``position``."""
    return _hashids.encode(position)


@dataclass
class Item:
    """Stored collection entry. A key of None marks an unkeyed item."""
    key: Optional[str]
    value: Any


class Collection:
    """Ordered items plus their action channels."""

    def __init__(self, name: str, max_history: Optional[int] = None):
        self.name = name
        self._max_history = max_history
        self._actions: Dict[str, Observable] = {}
        self._items: List[Item] = []

        for action in BUILTIN_ACTIONS:
            self.create_action(action)

    def __repr__(self) -> str:
        return f"Collection(name={self.name!r}, items={len(self._items)})"

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> List[Item]:
        return list(self._items)

    @property
    def actions(self) -> Dict[str, Observable]:
        return dict(self._actions)

    def create_action(self, name: str) -> Observable:
        """Register a new action type.

        Raises:
            DuplicateActionError: If the action already exists
        """
        if name in self._actions:
            raise DuplicateActionError(name)

        observable = Observable(name, max_history=self._max_history)
        self._actions[name] = observable
        return observable

    def get_actions(self) -> Dict[str, Callable[..., Any]]:
        """Get each action's register method, keyed by action name."""
        return {name: obs.get_action_method() for name, obs in self._actions.items()}

    def get_unsubscribe_actions(self) -> Dict[str, Callable[..., None]]:
        """Get each action's unsubscribe method, keyed by action name."""
        return {name: obs.unsubscribe for name, obs in self._actions.items()}

    def add(self, *args: Any) -> None:
        """Add an item and emit the ``add`` action.

        ``add(value)`` stores an unkeyed item; ``add(key, value)`` a keyed one.
        """
        if len(args) == 1:
            item = Item(key=None, value=args[0])
        elif len(args) == 2:
            item = Item(key=args[0], value=args[1])
        else:
            raise TypeError(f"add() takes 1 or 2 arguments ({len(args)} given)")

        self._items.append(item)
        self._emit_item("add", item)

    def add_many(self, items: Any) -> None:
        """Add several items.

        A mapping adds keyed items in iteration order; any other iterable
        adds unkeyed items.
        """
        if isinstance(items, Mapping):
            for key, value in items.items():
                self.add(key, value)
        else:
            for value in items:
                self.add(value)

    def remove(self, identifier: Any) -> None:
        """Remove the first matching item and emit the ``remove`` action.

        String identifiers are matched against keys first. If no key matches,
        or the identifier is not a string, items are matched by value.
        Nothing happens when no item matches.
        """
        index = -1

        if isinstance(identifier, str):
            index = self._index_with_key(identifier)

        if index == -1:
            index = self._index_with_value(identifier)

        if index == -1:
            logger.debug(f"Collection '{self.name}': nothing to remove for {identifier!r}")
            return

        item = self._items.pop(index)
        self._emit_item("remove", item)

    def remove_many(self, identifiers: Iterable[Any]) -> None:
        for identifier in identifiers:
            self.remove(identifier)

    def clear(self) -> None:
        """Remove every item front to back, emitting ``remove`` for each."""
        while self._items:
            item = self._items.pop(0)
            self._emit_item("remove", item)

    def log(self, message: Any, level: str = "info") -> None:
        """Emit a keyed ``log`` action. Log messages are not stored as items."""
        self._actions["log"].emit(message, level)

    def get_map(self) -> Dict[Any, Any]:
        """Build a key-to-value mapping of the current items.

        Unkeyed items get an opaque key derived from their current position,
        so removals shift the keys of later unkeyed items.
        """
        result: Dict[Any, Any] = {}
        for position, item in enumerate(self._items):
            key = auto_key(position) if item.key is None else item.key
            result[key] = item.value
        return result

    def get_array(self) -> List[Any]:
        """Get item values in insertion order."""
        return [item.value for item in self._items]

    def _emit_item(self, action: str, item: Item) -> None:
        if item.key is None:
            self._actions[action].emit(item.value)
        else:
            self._actions[action].emit(item.key, item.value)

    def _index_with_key(self, key: Any) -> int:
        for index, item in enumerate(self._items):
            if item.key is not None and item.key == key:
                return index
        return -1

    def _index_with_value(self, value: Any) -> int:
        for index, item in enumerate(self._items):
            if item.value == value:
                return index
        return -1
