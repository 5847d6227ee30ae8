"""Conversion of build events into JSON array elements."""

from __future__ import annotations

from enum import Enum
from typing import Any

from buildlog.events import BuildEvent, ErrorEvent, WarningEvent, event_kind
from buildlog.exceptions import SerializationFailure

# Sender whose name is left out of log lines.
DEFAULT_SENDER = "MSBuild"


class RecordFormat(str, Enum):
    """Shape of each element in the output array.

    KEYED wraps the event under its kind name. BUNDLE carries the kind, a
    formatted log line and the event payload as separate fields.
    """

    KEYED = "keyed"
    BUNDLE = "bundle"


def format_line(event: BuildEvent) -> str:
    """Render the human readable log line for an event.

    Errors and warnings get a "file(line,col)" location prefix, and the
    sender name is prepended unless it is the build engine itself.

    Args:
        event: Event to render.

    Returns:
        Single-line description ending with the event message.
    """
    prefix = ""
    if isinstance(event, ErrorEvent):
        prefix = f"ERROR {event.file}({event.line_number},{event.column_number}): "
    elif isinstance(event, WarningEvent):
        prefix = f"Warning {event.file}({event.line_number},{event.column_number}): "

    if event.sender_name and event.sender_name.lower() != DEFAULT_SENDER.lower():
        prefix = f"{event.sender_name}: {prefix}"
    return prefix + event.message


def dump_event(event: BuildEvent) -> dict[str, Any]:
    """Dump an event to JSON-compatible data.

    Raises:
        SerializationFailure: If the event payload cannot be serialized.
    """
    kind = event_kind(event)
    try:
        return event.model_dump(mode="json")
    except (TypeError, ValueError) as e:
        msg = f"Cannot serialize {kind.value} event: {e}"
        raise SerializationFailure(msg, kind=kind.value) from e


def to_record(event: BuildEvent, record_format: RecordFormat = RecordFormat.KEYED) -> dict[str, Any]:
    """Build the array element for an event.

    Args:
        event: Event to convert.
        record_format: Element shape.

    Returns:
        JSON-compatible dict.

    Raises:
        SerializationFailure: If the event payload cannot be serialized.
    """
    kind = event_kind(event)
    payload = dump_event(event)
    if record_format is RecordFormat.BUNDLE:
        return {
            "EventType": kind.value,
            "Message": format_line(event),
            "BuildEventArgs": payload,
        }
    return {kind.value: payload}
