"""Tests for event admission rules."""

from __future__ import annotations

import pytest

from buildlog.events import (
    VERBOSITY_ORDER,
    BuildEvent,
    ErrorEvent,
    Importance,
    MessageEvent,
    OtherEvent,
    ProjectFinishedEvent,
    ProjectStartedEvent,
    TaskFinishedEvent,
    TaskStartedEvent,
    Verbosity,
    WarningEvent,
)
from buildlog.filters import FilterPolicy, admits, should_admit

ALL_EVENTS: list[BuildEvent] = [
    ProjectStartedEvent(project_file="App.csproj"),
    ProjectFinishedEvent(project_file="App.csproj"),
    TaskStartedEvent(task_name="Csc"),
    TaskFinishedEvent(task_name="Csc"),
    MessageEvent(importance=Importance.HIGH),
    MessageEvent(importance=Importance.NORMAL),
    MessageEvent(importance=Importance.LOW),
    MessageEvent(),
    WarningEvent(),
    ErrorEvent(),
    OtherEvent(),
]


class TestShouldAdmit:
    """Tests for the verbosity policy."""

    @pytest.mark.parametrize("level", VERBOSITY_ORDER)
    def test_warnings_and_errors_always_admitted(self, level: Verbosity) -> None:
        assert should_admit(level, WarningEvent())
        assert should_admit(level, ErrorEvent())

    @pytest.mark.parametrize("level", VERBOSITY_ORDER)
    def test_non_diagnostic_kinds_rejected(self, level: Verbosity) -> None:
        """Project, task and other events never pass the verbosity policy."""
        for event in ALL_EVENTS[:4] + [OtherEvent()]:
            assert not should_admit(level, event)

    def test_quiet_rejects_messages(self) -> None:
        assert not should_admit(Verbosity.QUIET, MessageEvent(importance=Importance.HIGH))

    def test_minimal_admits_high_only(self) -> None:
        assert should_admit(Verbosity.MINIMAL, MessageEvent(importance=Importance.HIGH))
        assert not should_admit(Verbosity.MINIMAL, MessageEvent(importance=Importance.NORMAL))
        assert not should_admit(Verbosity.MINIMAL, MessageEvent(importance=Importance.LOW))

    def test_normal_admits_high_and_normal(self) -> None:
        assert should_admit(Verbosity.NORMAL, MessageEvent(importance=Importance.HIGH))
        assert should_admit(Verbosity.NORMAL, MessageEvent(importance=Importance.NORMAL))
        assert not should_admit(Verbosity.NORMAL, MessageEvent(importance=Importance.LOW))

    def test_detailed_admits_every_message(self) -> None:
        for importance in [*Importance, None]:
            assert should_admit(Verbosity.DETAILED, MessageEvent(importance=importance))

    def test_missing_importance_only_at_detailed(self) -> None:
        """A message without importance matches no tier below DETAILED."""
        event = MessageEvent(message="untagged")

        assert not should_admit(Verbosity.QUIET, event)
        assert not should_admit(Verbosity.MINIMAL, event)
        assert not should_admit(Verbosity.NORMAL, event)
        assert should_admit(Verbosity.DETAILED, event)

    def test_monotonic_in_verbosity(self) -> None:
        """An event admitted at one level is admitted at every higher level."""
        for event in ALL_EVENTS:
            for i, level in enumerate(VERBOSITY_ORDER):
                if should_admit(level, event):
                    for higher in VERBOSITY_ORDER[i + 1 :]:
                        assert should_admit(higher, event), (event, level, higher)


class TestAdmits:
    """Tests for selectable policies."""

    def test_verbosity_policy_delegates(self) -> None:
        event = MessageEvent(importance=Importance.NORMAL)

        assert admits(FilterPolicy.VERBOSITY, Verbosity.NORMAL, event)
        assert not admits(FilterPolicy.VERBOSITY, Verbosity.MINIMAL, event)

    @pytest.mark.parametrize("level", VERBOSITY_ORDER)
    def test_all_policy_admits_everything(self, level: Verbosity) -> None:
        for event in ALL_EVENTS:
            assert admits(FilterPolicy.ALL, level, event)

    def test_lifecycle_policy(self) -> None:
        """Only project and task start/finish events pass."""
        admitted = [
            e for e in ALL_EVENTS if admits(FilterPolicy.LIFECYCLE, Verbosity.DETAILED, e)
        ]

        assert [e.kind for e in admitted] == [  # type: ignore[attr-defined]
            "ProjectStarted",
            "ProjectFinished",
            "TaskStarted",
            "TaskFinished",
        ]
