"""buildlog - JSON file logger for build event streams."""

__version__ = "0.1.0"
