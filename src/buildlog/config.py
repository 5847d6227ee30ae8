"""Logger configuration: the host parameter string and logger settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from buildlog.events import Verbosity
from buildlog.exceptions import ConfigError
from buildlog.filters import FilterPolicy
from buildlog.records import RecordFormat

EXPECTED_COMMAND_TEXT = "-logger:buildlog;<json file path> is expected"


def parse_parameters(parameters: str | None) -> Path:
    """Extract the log file path from the host's parameter string.

    The string is split on semicolons and empty entries are dropped;
    exactly one entry must remain.

    Args:
        parameters: Raw parameter string passed by the host.

    Returns:
        Path of the JSON log file.

    Raises:
        ConfigError: If no path or more than one parameter is given.
    """
    entries = [p for p in (parameters or "").split(";") if p]
    if not entries:
        msg = f"Log file was not set. {EXPECTED_COMMAND_TEXT}"
        raise ConfigError(msg, parameters=parameters, field="log_file")
    if len(entries) > 1:
        msg = f"Too many parameters passed. {EXPECTED_COMMAND_TEXT}"
        raise ConfigError(msg, parameters=parameters, field="log_file")
    return Path(entries[0])


class LoggerSettings(BaseSettings):
    """Settings for the JSON file logger.

    Environment variables:
        BUILDLOG_VERBOSITY: quiet, minimal, normal, detailed (or q/m/n/d)
        BUILDLOG_POLICY: verbosity, all, lifecycle
        BUILDLOG_RECORD_FORMAT: keyed, bundle
        BUILDLOG_INDENT: Indentation of each element (0 for compact)
        BUILDLOG_DIAGNOSTICS: log, file, none
        BUILDLOG_DIAGNOSTICS_DIR: Directory for file diagnostics
    """

    model_config = SettingsConfigDict(
        env_prefix="BUILDLOG_",
        extra="ignore",
    )

    verbosity: Verbosity = Verbosity.NORMAL
    policy: FilterPolicy = FilterPolicy.VERBOSITY
    record_format: RecordFormat = RecordFormat.KEYED
    indent: int = Field(default=2, ge=0, le=8)
    diagnostics: Literal["log", "file", "none"] = "log"
    diagnostics_dir: Path | None = None

    @field_validator("verbosity", mode="before")
    @classmethod
    def parse_verbosity(cls, v: Any) -> Any:
        """Accept host abbreviations and any casing."""
        if isinstance(v, str):
            return Verbosity.parse(v)
        return v

    def to_yaml(self) -> str:
        """Serialize the settings to YAML."""
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_yaml(cls, yaml_content: str) -> LoggerSettings:
        """Parse settings from YAML content.

        Values in the YAML take priority over environment variables.

        Raises:
            ConfigError: If the YAML is invalid.
        """
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            msg = f"Invalid YAML: {e}"
            raise ConfigError(msg) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            msg = "Settings YAML must be a mapping"
            raise ConfigError(msg)

        try:
            return cls(**data)
        except ValidationError as e:
            msg = f"Invalid settings: {e}"
            raise ConfigError(msg) from e

    @classmethod
    def load(cls, path: Path) -> LoggerSettings:
        """Load settings from a YAML file.

        Raises:
            ConfigError: If the file is missing or invalid.
        """
        if not path.exists():
            msg = f"Settings file not found: {path}"
            raise ConfigError(msg, field=str(path))
        return cls.from_yaml(path.read_text(encoding="utf-8"))
