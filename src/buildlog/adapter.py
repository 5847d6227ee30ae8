"""JSON file logger that records a build's event stream."""

from __future__ import annotations

from pathlib import Path

import structlog

from buildlog.config import LoggerSettings, parse_parameters
from buildlog.diagnostics import Diagnostics, create_diagnostics
from buildlog.events import BuildEvent, event_kind
from buildlog.exceptions import BuildLogError, InvalidState, IOFailure, SerializationFailure
from buildlog.filters import admits
from buildlog.records import to_record
from buildlog.source import EventSource
from buildlog.writer import JsonArrayWriter, WriterState

logger = structlog.get_logger()


class JsonFileLogger:
    """Writes admitted build events into a JSON array file.

    The host calls ``initialize`` with its event source, delivers events
    synchronously, and calls ``shutdown`` once the build is over. The file
    is closed exactly once, even when initialization fails part way.

    Example:
        >>> bus = EventBus()
        >>> with JsonFileLogger("build.json") as build_logger:
        ...     build_logger.initialize(bus)
        ...     bus.emit(WarningEvent(message="unused variable"))
    """

    def __init__(
        self,
        parameters: str | None = None,
        *,
        settings: LoggerSettings | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        """Initialize the logger.

        Args:
            parameters: Host parameter string holding the log file path.
            settings: Verbosity, policy and output settings.
            diagnostics: Side-channel for per-event failures. Built from
                the settings when omitted.
        """
        self.parameters = parameters
        self.settings = settings or LoggerSettings()
        self.diagnostics = diagnostics or create_diagnostics(
            self.settings.diagnostics, self.settings.diagnostics_dir
        )
        self._writer = JsonArrayWriter(indent=self.settings.indent or None)
        self._source: EventSource | None = None
        self._shut_down = False
        self._log = logger.bind(
            verbosity=self.settings.verbosity.value,
            policy=self.settings.policy.value,
        )

        self.events_received = 0
        self.events_admitted = 0
        self.events_dropped = 0

    @property
    def log_file(self) -> Path | None:
        """Path of the JSON log, once initialized."""
        return self._writer.path

    @property
    def is_open(self) -> bool:
        """Whether the logger is accepting events."""
        return self._writer.state is WriterState.OPEN

    def initialize(self, event_source: EventSource) -> None:
        """Open the log file and subscribe to the event source.

        Args:
            event_source: Source that will deliver the build events.

        Raises:
            ConfigError: If the parameters do not name exactly one file.
            IOFailure: If the log file cannot be created.
            InvalidState: If the logger was already initialized or shut down.
        """
        if self._shut_down or self._writer.state is not WriterState.UNOPENED:
            msg = "Logger can only be initialized once"
            raise InvalidState(msg, state=self._writer.state.value)

        log_file = parse_parameters(self.parameters)
        try:
            self._writer.open(log_file)
        except IOFailure as e:
            self._report(e)
            raise
        self._log = self._log.bind(log_file=str(log_file))

        try:
            event_source.subscribe(self.handle_event)
        except Exception:
            self.shutdown()
            raise
        self._source = event_source

        self._log.info("Build logger initialized")

    def handle_event(self, event: BuildEvent) -> None:
        """Filter an event and append it to the log when admitted.

        An event that cannot be serialized is reported to the diagnostics
        channel and dropped.

        Raises:
            InvalidState: If the logger is not open.
        """
        self.events_received += 1
        if not admits(self.settings.policy, self.settings.verbosity, event):
            return

        try:
            self._writer.append(to_record(event, self.settings.record_format))
        except SerializationFailure as e:
            self.events_dropped += 1
            self._log.warning(
                "Dropped event",
                kind=event_kind(event).value,
                error=str(e),
            )
            self._report(e)
            return

        self.events_admitted += 1

    def _report(self, error: BaseException) -> None:
        """Send an error to the diagnostics channel without letting it escape."""
        try:
            self.diagnostics.write_exception(error)
        except BuildLogError as e:
            self._log.warning("Diagnostics unavailable", error=str(e))

    def shutdown(self) -> None:
        """Unsubscribe, close the log file and release diagnostics.

        Safe to call more than once.
        """
        if self._shut_down:
            return
        self._shut_down = True

        try:
            if self._source is not None:
                self._source.unsubscribe(self.handle_event)
                self._source = None
        finally:
            try:
                self._writer.close()
            finally:
                self.diagnostics.close()

        self._log.info(
            "Build logger shut down",
            received=self.events_received,
            admitted=self.events_admitted,
            dropped=self.events_dropped,
        )

    def __enter__(self) -> JsonFileLogger:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
