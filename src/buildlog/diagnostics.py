"""Diagnostic side-channel for problems hit while logging a build."""

from __future__ import annotations

import traceback
from datetime import datetime
from pathlib import Path
from typing import IO, Protocol

import structlog

from buildlog.exceptions import BuildLogError

logger = structlog.get_logger()


class Diagnostics(Protocol):
    """Receives messages and exceptions the logger cannot put in the log."""

    def write_message(self, message: str) -> None:
        """Record a diagnostic message."""
        ...

    def write_exception(self, error: BaseException) -> None:
        """Record an exception raised while logging."""
        ...

    def close(self) -> None:
        """Release any resources held by the channel."""
        ...


class NullDiagnostics:
    """Discards all diagnostics."""

    def write_message(self, message: str) -> None:
        pass

    def write_exception(self, error: BaseException) -> None:
        pass

    def close(self) -> None:
        pass


class LogDiagnostics:
    """Forwards diagnostics to structlog."""

    def __init__(self) -> None:
        self._log = logger.bind(channel="diagnostics")

    def write_message(self, message: str) -> None:
        self._log.info(message)

    def write_exception(self, error: BaseException) -> None:
        self._log.warning(
            "Logger error",
            error=str(error),
            error_type=type(error).__name__,
        )

    def close(self) -> None:
        pass


class FileDiagnostics:
    """Appends timestamped diagnostics to a file named after its creation time.

    The file (``<YYYYmmddHHMMSS>Diag.log``) is only created on the first
    write, so a clean build leaves nothing behind.
    """

    def __init__(self, directory: Path | None = None) -> None:
        """Initialize the channel.

        Args:
            directory: Where to create the file. Defaults to the cwd.
        """
        self.directory = directory or Path.cwd()
        self._stream: IO[str] | None = None
        self._path: Path | None = None
        self._closed = False

    @property
    def path(self) -> Path | None:
        """Diagnostics file, once created."""
        return self._path

    def _get_stream(self) -> IO[str]:
        if self._stream is None:
            self._path = self.directory / f"{datetime.now():%Y%m%d%H%M%S}Diag.log"
            self._stream = self._path.open("a", encoding="utf-8")
        return self._stream

    def _write(self, data: str) -> None:
        if self._closed:
            return
        try:
            stream = self._get_stream()
            stream.write(f"[{datetime.now().isoformat()}]\t{data}\n")
            stream.flush()
        except OSError as e:
            msg = f"Diagnostic logging is failed: {e}"
            raise BuildLogError(msg) from e

    def write_message(self, message: str) -> None:
        self._write(message)

    def write_exception(self, error: BaseException) -> None:
        text = "".join(traceback.format_exception(error)).rstrip()
        self._write(text)

    def close(self) -> None:
        self._closed = True
        if self._stream is not None:
            self._stream.close()
            self._stream = None


def create_diagnostics(mode: str, directory: Path | None = None) -> Diagnostics:
    """Create a diagnostics channel by name.

    Args:
        mode: One of "log", "file" or "none".
        directory: Directory for the "file" channel.

    Returns:
        The diagnostics channel.

    Raises:
        ValueError: If the mode is unknown.
    """
    if mode == "log":
        return LogDiagnostics()
    if mode == "file":
        return FileDiagnostics(directory)
    if mode == "none":
        return NullDiagnostics()
    msg = f"Unknown diagnostics mode: {mode!r}"
    raise ValueError(msg)
