"""Progress sink protocol and helpers."""

import logging
from typing import Protocol

from .models import ProgressEvent

logger = logging.getLogger(__name__)


class ProgressSink(Protocol):
    """Receives progress events. Must return quickly."""

    def __call__(self, event: ProgressEvent) -> None: ...


def notify(sink: ProgressSink | None, event: ProgressEvent) -> None:
    """Deliver an event, logging and discarding any sink failure."""
    if sink is None:
        return
    try:
        sink(event)
    except Exception:
        logger.warning("Progress sink failed for %r", event.description, exc_info=True)


class CollectingSink:
    """Sink that keeps every event in memory."""

    def __init__(self) -> None:
        self.events: list[ProgressEvent] = []

    def __call__(self, event: ProgressEvent) -> None:
        self.events.append(event)
