"""Named action channel with late-subscriber replay.

An Observable keeps every payload it has emitted. Registering a responder
immediately replays that history to it, so a subscriber that arrives late
still sees the full sequence of actions, in order, before any new one.

Emission comes in two modes, chosen by arity:

- unkeyed, ``emit(value)``: filters are checked against ``value``
- keyed, ``emit(key, value, ...)``: callable filters receive ``(key, value)``,
  plain filters are compared with ``key``

Usage:
    obs = Observable("add")
    obs.emit("item1")
    obs.register(print)              # prints "item1"
    obs.register(print, "k")         # keyed responders only for key "k"
    obs.emit("k", {"id": 1})         # prints "k {'id': 1}" twice
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Responder:
    """Registered callback plus optional filter.

    Compared by identity, so the same callback may be registered more than
    once with different filters.
    """
    callback: Callable[..., Any]
    filter: Any = None


class Observable:
    """Single action channel with a replay queue."""

    def __init__(self, name: str, max_history: Optional[int] = None):
        if max_history is not None and max_history < 1:
            raise ValueError("max_history must be a positive integer or None")

        self.name = name
        self._responders: List[Responder] = []
        self._queue: Deque[Tuple[Any, ...]] = deque(maxlen=max_history)

    def __repr__(self) -> str:
        return (
            f"Observable(name={self.name!r}, responders={len(self._responders)}, "
            f"history={len(self._queue)})"
        )

    @property
    def responders(self) -> List[Responder]:
        return list(self._responders)

    @property
    def history(self) -> List[Any]:
        """Previously emitted payloads in emission order.

        Unkeyed emissions appear as the single value, keyed emissions as the
        full argument tuple.
        """
        return [args[0] if len(args) == 1 else args for args in self._queue]

    def register(self, callback: Callable[..., Any], filter: Any = None) -> Responder:
        """Register a responder and replay the queue to it.

        Args:
            callback: Called with the emitted arguments
            filter: None, a predicate, or a plain value to compare against

        Returns:
            Responder handle, usable with unsubscribe()
        """
        responder = Responder(callback=callback, filter=filter)
        self._responders.append(responder)
        self._drain_queue(responder)
        return responder

    def get_action_method(self) -> Callable[..., Responder]:
        """Get register() bound to this observable."""
        return self.register

    def emit(self, *args: Any) -> None:
        """Send a payload to every matching responder, then queue it.

        Callback exceptions propagate to the caller.
        """
        if not args:
            raise TypeError(f"emit() on '{self.name}' requires at least one argument")

        notified = 0
        for responder in list(self._responders):
            if self._matches(args, responder.filter):
                responder.callback(*args)
                notified += 1

        self._queue.append(args)
        logger.debug(f"Emitted '{self.name}' to {notified}/{len(self._responders)} responders")

    def unsubscribe(self, callback: Any, filter: Any = None) -> None:
        """Remove responders.

        Passing a Responder handle removes exactly that registration.
        Otherwise every responder whose callback equals ``callback`` and
        whose filter is the same object as ``filter`` is removed. String and
        number filters match by value. No error when nothing matches.
        """
        if isinstance(callback, Responder):
            self._responders = [r for r in self._responders if r is not callback]
            return

        self._responders = [
            r for r in self._responders
            if not (r.callback == callback and _same_filter(r.filter, filter))
        ]

    def _drain_queue(self, responder: Responder) -> None:
        for args in list(self._queue):
            if self._matches(args, responder.filter):
                responder.callback(*args)

    @staticmethod
    def _matches(args: Tuple[Any, ...], filter: Any) -> bool:
        if filter is None:
            return True

        if len(args) == 1:
            if callable(filter):
                return bool(filter(args[0]))
            return args[0] == filter

        key, value = args[0], args[1]
        if callable(filter):
            return bool(filter(key, value))
        return key == filter


def _same_filter(registered: Any, given: Any) -> bool:
    if registered is given:
        return True
    # Scalars have no useful identity
    scalars = (str, bytes, int, float)
    return (
        isinstance(registered, scalars)
        and type(registered) is type(given)
        and registered == given
    )
