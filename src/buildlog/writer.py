"""Incremental writer for a file holding a single JSON array."""

from __future__ import annotations

import json
import textwrap
import threading
from enum import Enum
from pathlib import Path
from typing import IO, Any

import structlog

from buildlog.exceptions import InvalidState, IOFailure, SerializationFailure

logger = structlog.get_logger()


class WriterState(str, Enum):
    """Lifecycle of a JsonArrayWriter."""

    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


class JsonArrayWriter:
    """Writes array elements to disk one at a time.

    The opening bracket is written on open, each element is flushed as soon
    as it is appended, and the closing bracket is written on close. Until
    close runs the file holds a valid prefix of the array.

    Every element starts on its own line: a line break precedes the first
    element and ",\n" precedes each later one. An empty array is written
    as "[]".

    Example:
        >>> with JsonArrayWriter().open(Path("build.json")) as writer:
        ...     writer.append({"Warning": {"message": "unused variable"}})
    """

    def __init__(self, indent: int | None = 2) -> None:
        """Initialize the writer.

        Args:
            indent: Indentation for pretty-printed elements, None for compact.
        """
        self.indent = indent
        self._state = WriterState.UNOPENED
        self._has_written_first_element = False
        self._stream: IO[str] | None = None
        self._path: Path | None = None
        self._lock = threading.Lock()
        self.elements_written = 0

    @property
    def state(self) -> WriterState:
        """Current lifecycle state."""
        return self._state

    @property
    def has_written_first_element(self) -> bool:
        """Whether any element has been appended since open."""
        return self._has_written_first_element

    @property
    def path(self) -> Path | None:
        """Destination path, once opened."""
        return self._path

    def open(self, destination: Path | str) -> JsonArrayWriter:
        """Create the destination file and write the opening bracket.

        Args:
            destination: File to write. An existing file is truncated.

        Returns:
            The writer itself, for use in a ``with`` statement.

        Raises:
            InvalidState: If the writer was already opened.
            IOFailure: If the file cannot be created.
        """
        with self._lock:
            if self._state is not WriterState.UNOPENED:
                msg = f"Cannot open a writer that is {self._state.value}"
                raise InvalidState(msg, state=self._state.value)

            try:
                path = Path(destination)
                stream = path.open("w", encoding="utf-8")
            except (OSError, ValueError, TypeError) as e:
                msg = f"Failed to create log file: {e}"
                bad_path = Path(destination) if isinstance(destination, str | Path) else None
                raise IOFailure(msg, path=bad_path) from e

            try:
                stream.write("[")
                stream.flush()
            except OSError as e:
                stream.close()
                msg = f"Failed to create log file: {e}"
                raise IOFailure(msg, path=path) from e

            self._stream = stream
            self._path = path
            self._state = WriterState.OPEN
            self._has_written_first_element = False

        logger.debug("Opened JSON array log", path=str(path))
        return self

    def serialize(self, value: Any) -> str:
        """Render one element as strict JSON.

        Raises:
            SerializationFailure: If the value is not JSON serializable.
        """
        try:
            text = json.dumps(value, indent=self.indent, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError, RecursionError) as e:
            msg = f"Cannot serialize element: {e}"
            raise SerializationFailure(msg) from e
        if self.indent:
            text = textwrap.indent(text, " " * self.indent)
        return text

    def append(self, value: Any) -> None:
        """Append one element to the array.

        The element is fully serialized before anything is written, so a
        failure leaves the file and the writer untouched.

        Args:
            value: JSON-serializable element.

        Raises:
            InvalidState: If the writer is not open.
            SerializationFailure: If the value cannot be serialized.
        """
        with self._lock:
            if self._state is not WriterState.OPEN or self._stream is None:
                msg = f"Cannot append to a writer that is {self._state.value}"
                raise InvalidState(msg, state=self._state.value)

            text = self.serialize(value)
            separator = ",\n" if self._has_written_first_element else "\n"
            self._stream.write(separator + text)
            self._stream.flush()
            self._has_written_first_element = True
            self.elements_written += 1

    def close(self) -> None:
        """Write the closing bracket and release the file.

        Safe to call any number of times; only the first call does work.
        """
        with self._lock:
            if self._state is WriterState.CLOSED:
                return
            stream = self._stream
            self._stream = None
            self._state = WriterState.CLOSED
            if stream is None:
                return
            try:
                stream.write("\n]\n" if self._has_written_first_element else "]\n")
                stream.flush()
            finally:
                stream.close()

        logger.debug(
            "Closed JSON array log",
            path=str(self._path),
            elements=self.elements_written,
        )

    def __enter__(self) -> JsonArrayWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __del__(self) -> None:
        # Writers dropped without close still get their closing bracket.
        if getattr(self, "_state", None) is WriterState.OPEN:
            self.close()
