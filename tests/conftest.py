"""Pytest fixtures for buildlog tests."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import pytest

from buildlog.config import LoggerSettings
from buildlog.events import (
    ErrorEvent,
    Importance,
    MessageEvent,
    ProjectStartedEvent,
    WarningEvent,
)
from buildlog.source import EventBus


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """Path for a JSON log inside the test directory."""
    return tmp_path / "build.json"


@pytest.fixture
def event_bus() -> EventBus:
    """Create an empty EventBus."""
    return EventBus()


@pytest.fixture
def quiet_settings() -> LoggerSettings:
    """Settings that only admit warnings and errors."""
    return LoggerSettings(verbosity="quiet", diagnostics="none")


@pytest.fixture
def detailed_settings() -> LoggerSettings:
    """Settings that admit every message."""
    return LoggerSettings(verbosity="detailed", diagnostics="none")


@pytest.fixture
def high_message() -> MessageEvent:
    return MessageEvent(
        sender_name="MSBuild",
        message="Build started.",
        importance=Importance.HIGH,
    )


@pytest.fixture
def low_message() -> MessageEvent:
    return MessageEvent(
        sender_name="Csc",
        message="Using shared compilation.",
        importance=Importance.LOW,
    )


@pytest.fixture
def sample_warning() -> WarningEvent:
    return WarningEvent(
        sender_name="Csc",
        message="The variable 'x' is declared but never used",
        file="src/Program.cs",
        line_number=12,
        column_number=17,
        code="CS0168",
    )


@pytest.fixture
def sample_error() -> ErrorEvent:
    return ErrorEvent(
        sender_name="MSBuild",
        message="The name 'Foo' does not exist in the current context",
        file="src/Program.cs",
        line_number=30,
        column_number=5,
        code="CS0103",
    )


@pytest.fixture
def project_started() -> ProjectStartedEvent:
    return ProjectStartedEvent(
        sender_name="MSBuild",
        message="Project \"App.csproj\" (Build target(s)).",
        project_file="App.csproj",
        project_id=1,
        target_names=["Build"],
    )
