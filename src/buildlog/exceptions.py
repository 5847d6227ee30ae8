"""Custom exceptions for the build event logger."""

from pathlib import Path


class BuildLogError(Exception):
    """Base exception for all buildlog errors."""

    pass


class ConfigError(BuildLogError):
    """Raised when the logger parameters or settings are invalid."""

    def __init__(
        self,
        message: str,
        *,
        parameters: str | None = None,
        field: str = "",
    ) -> None:
        super().__init__(message)
        self.parameters = parameters
        self.field = field


class IOFailure(BuildLogError):
    """Raised when the log destination cannot be created or opened."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path


class SerializationFailure(BuildLogError):
    """Raised when a single event cannot be converted to JSON."""

    def __init__(
        self,
        message: str,
        *,
        kind: str = "",
    ) -> None:
        super().__init__(message)
        self.kind = kind


class InvalidState(BuildLogError):
    """Raised when an operation is used outside of its valid lifecycle state."""

    def __init__(
        self,
        message: str,
        *,
        state: str = "",
    ) -> None:
        super().__init__(message)
        self.state = state
