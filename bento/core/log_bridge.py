import logging
from typing import Any

logger = logging.getLogger(__name__)

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class CollectionLogForwarder:
    """Writes a collection's ``log`` actions to the logging module."""

    def __init__(self, collection_name: str):
        self.collection_name = collection_name
        self.logger = logging.getLogger(f"bento.collections.{collection_name}")

    def on_log(self, message: Any, level: Any = "info") -> None:
        self.logger.log(LEVELS.get(str(level).lower(), logging.INFO), "%s", message)


def forward_collection_logs(bento, collection_name: str) -> CollectionLogForwarder:
    """Attach a forwarder to a collection's ``log`` action.

    The action replays, so messages logged before attaching are written too.
    """
    forwarder = CollectionLogForwarder(collection_name)
    bento.on(collection_name)["log"](forwarder.on_log)

    logger.info(f"Forwarding logs of collection '{collection_name}'")
    return forwarder
