"""Admission rules deciding which build events reach the log."""

from __future__ import annotations

from enum import Enum

from buildlog.events import (
    BuildEvent,
    EventKind,
    Importance,
    MessageEvent,
    Verbosity,
    event_kind,
)
from buildlog.exceptions import InvalidState


class FilterPolicy(str, Enum):
    """Selectable admission policies.

    VERBOSITY filters warnings, errors and messages by verbosity and rejects
    everything else. ALL admits every delivered event. LIFECYCLE admits only
    project and task start/finish events.
    """

    VERBOSITY = "verbosity"
    ALL = "all"
    LIFECYCLE = "lifecycle"


# Least verbose level at which a message of each importance is admitted.
MESSAGE_THRESHOLDS: dict[Importance, Verbosity] = {
    Importance.HIGH: Verbosity.MINIMAL,
    Importance.NORMAL: Verbosity.NORMAL,
    Importance.LOW: Verbosity.DETAILED,
}

LIFECYCLE_KINDS = frozenset(
    {
        EventKind.PROJECT_STARTED,
        EventKind.PROJECT_FINISHED,
        EventKind.TASK_STARTED,
        EventKind.TASK_FINISHED,
    }
)

# Kinds the verbosity policy never evaluates.
VERBOSITY_REJECTED_KINDS = LIFECYCLE_KINDS | {EventKind.OTHER}


def _admit_message(level: Verbosity, record: MessageEvent) -> bool:
    if level is Verbosity.DETAILED:
        return True
    if record.importance is None:
        return False
    return level.is_at_least(MESSAGE_THRESHOLDS[record.importance])


def should_admit(level: Verbosity, record: BuildEvent) -> bool:
    """Decide whether an event passes the verbosity policy.

    Warnings and errors are admitted at every level. Messages are admitted
    once the level reaches the threshold for their importance, and every
    message is admitted at DETAILED. All other kinds are rejected.

    Args:
        level: Configured verbosity.
        record: The event to check.

    Returns:
        True if the event should be written.

    Raises:
        InvalidState: If the event kind has no rule.
    """
    kind = event_kind(record)
    if kind in (EventKind.WARNING, EventKind.ERROR):
        return True
    if kind is EventKind.MESSAGE:
        return _admit_message(level, record)  # type: ignore[arg-type]
    if kind in VERBOSITY_REJECTED_KINDS:
        return False
    msg = f"No admission rule for event kind {kind.value}"
    raise InvalidState(msg, state=kind.value)


def admits(policy: FilterPolicy, level: Verbosity, record: BuildEvent) -> bool:
    """Apply the selected policy to an event.

    Args:
        policy: Which admission policy to use.
        level: Configured verbosity (only used by the VERBOSITY policy).
        record: The event to check.

    Returns:
        True if the event should be written.
    """
    if policy is FilterPolicy.VERBOSITY:
        return should_admit(level, record)
    if policy is FilterPolicy.ALL:
        return True
    return event_kind(record) in LIFECYCLE_KINDS
