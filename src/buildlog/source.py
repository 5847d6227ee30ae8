"""Event delivery between a build host and its loggers."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Protocol

import structlog
from pydantic import ValidationError

from buildlog.events import BuildEvent, EventRecord, parse_event

logger = structlog.get_logger()

EventHandler = Callable[[BuildEvent], None]


class EventSource(Protocol):
    """Push-based source of build events.

    Handlers are called synchronously, one event at a time, in the order
    the events are raised.
    """

    def subscribe(self, handler: EventHandler) -> None:
        """Register a handler for every future event."""
        ...

    def unsubscribe(self, handler: EventHandler) -> None:
        """Stop delivering events to a handler."""
        ...


class EventBus:
    """In-process EventSource that fans events out to its subscribers."""

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(self, event: BuildEvent) -> None:
        """Deliver an event to every subscriber in subscription order."""
        for handler in list(self._handlers):
            handler(event)


def read_events(path: Path) -> Iterator[EventRecord]:
    """Read build events from a JSONL file, one event per line.

    Blank lines are ignored. Lines that are not valid events are logged
    and skipped.

    Args:
        path: JSONL file with one raw event mapping per line.

    Yields:
        Validated events in file order.
    """
    log = logger.bind(path=str(path))
    with path.open(encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                data = json.loads(line)
                if not isinstance(data, dict):
                    msg = "event line must be a JSON object"
                    raise ValueError(msg)
                yield parse_event(data)
            except (json.JSONDecodeError, ValidationError, ValueError) as e:
                log.warning("Skipping invalid event", line=lineno, error=str(e))
