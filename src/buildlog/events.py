"""Build event models delivered by the host build engine."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Verbosity(str, Enum):
    """How much detail the logger admits, from least to most."""

    QUIET = "quiet"
    MINIMAL = "minimal"
    NORMAL = "normal"
    DETAILED = "detailed"

    @property
    def rank(self) -> int:
        """Position of the level in VERBOSITY_ORDER."""
        return VERBOSITY_ORDER.index(self)

    def is_at_least(self, other: Verbosity) -> bool:
        """Check whether this level is at least as verbose as ``other``."""
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: str | Verbosity) -> Verbosity:
        """Parse a verbosity name or its one-letter host abbreviation.

        Args:
            value: Name such as "normal", "Detailed", or "q".

        Returns:
            The matching Verbosity.

        Raises:
            ValueError: If the value names no level.
        """
        if isinstance(value, Verbosity):
            return value
        text = value.strip().lower()
        if text in ("diag", "diagnostic"):
            return cls.DETAILED
        for level in cls:
            if text in (level.value, level.value[0]):
                return level
        msg = f"Unknown verbosity: {value!r}"
        raise ValueError(msg)


VERBOSITY_ORDER = [
    Verbosity.QUIET,
    Verbosity.MINIMAL,
    Verbosity.NORMAL,
    Verbosity.DETAILED,
]


class Importance(str, Enum):
    """Priority tag carried by message events."""

    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


class EventKind(str, Enum):
    """Discriminator for the closed set of build event variants."""

    PROJECT_STARTED = "ProjectStarted"
    PROJECT_FINISHED = "ProjectFinished"
    TASK_STARTED = "TaskStarted"
    TASK_FINISHED = "TaskFinished"
    MESSAGE = "Message"
    WARNING = "Warning"
    ERROR = "Error"
    OTHER = "Other"


class BuildEvent(BaseModel):
    """Fields shared by every build event.

    Attributes:
        sender_name: Component that raised the event (e.g. "MSBuild", "Csc").
        message: Human readable text of the event.
        help_keyword: Optional keyword for the host's help lookup.
        timestamp: When the event was raised.
    """

    model_config = ConfigDict(frozen=True)

    sender_name: str = ""
    message: str = ""
    help_keyword: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))


class ProjectStartedEvent(BuildEvent):
    """A project build began."""

    kind: Literal["ProjectStarted"] = "ProjectStarted"
    project_file: str = ""
    project_id: int | None = None
    target_names: list[str] = Field(default_factory=list)


class ProjectFinishedEvent(BuildEvent):
    """A project build ended."""

    kind: Literal["ProjectFinished"] = "ProjectFinished"
    project_file: str = ""
    succeeded: bool = True


class TaskStartedEvent(BuildEvent):
    """A task inside a project began."""

    kind: Literal["TaskStarted"] = "TaskStarted"
    task_name: str = ""
    project_file: str = ""
    task_file: str = ""


class TaskFinishedEvent(BuildEvent):
    """A task inside a project ended."""

    kind: Literal["TaskFinished"] = "TaskFinished"
    task_name: str = ""
    project_file: str = ""
    task_file: str = ""
    succeeded: bool = True


class MessageEvent(BuildEvent):
    """An informational message.

    A missing importance matches no importance tier.
    """

    kind: Literal["Message"] = "Message"
    importance: Importance | None = None


class _LocatedEvent(BuildEvent):
    """Event tied to a position in a source file."""

    file: str = ""
    line_number: int = 0
    column_number: int = 0
    code: str = ""
    subcategory: str = ""
    project_file: str = ""


class WarningEvent(_LocatedEvent):
    """A build warning with its source location."""

    kind: Literal["Warning"] = "Warning"


class ErrorEvent(_LocatedEvent):
    """A build error with its source location."""

    kind: Literal["Error"] = "Error"


class OtherEvent(BuildEvent):
    """Any event the host raises that has no dedicated variant."""

    kind: Literal["Other"] = "Other"
    data: dict[str, Any] = Field(default_factory=dict)


EventRecord = Annotated[
    ProjectStartedEvent
    | ProjectFinishedEvent
    | TaskStartedEvent
    | TaskFinishedEvent
    | MessageEvent
    | WarningEvent
    | ErrorEvent
    | OtherEvent,
    Field(discriminator="kind"),
]

_event_adapter: TypeAdapter[EventRecord] = TypeAdapter(EventRecord)


def parse_event(data: dict[str, Any]) -> EventRecord:
    """Validate a raw mapping into the matching event variant.

    Args:
        data: Mapping with a "kind" key naming the variant.

    Returns:
        The validated, immutable event.

    Raises:
        pydantic.ValidationError: If the mapping is not a valid event.
    """
    return _event_adapter.validate_python(data)


def event_kind(event: BuildEvent) -> EventKind:
    """Return the EventKind of an event."""
    return EventKind(event.kind)  # type: ignore[attr-defined]
