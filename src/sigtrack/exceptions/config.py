"""Configuration exceptions: settings and project detection."""

from pathlib import Path
from typing import Any

from .base import SigtrackError


class ConfigurationError(SigtrackError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class NotASorbetProject(ConfigurationError):
    """Raised when the project has no Sorbet config file."""

    def __init__(self, path: Path, config_file: str):
        super().__init__(
            f"Not a Sorbet project: {path}",
            details={"path": str(path), "missing": config_file},
        )
        self.path = path
        self.config_file = config_file
