"""Configuration loading and management for sigtrack.

Configuration sources are merged in priority order:
    1. Defaults (defined in TimelineConfig)
    2. Global config (~/.sigtrack.toml)
    3. Project config (./sigtrack.toml)
    4. Explicit config file
    5. Environment variables (SIGTRACK_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(verbose=True, interval="monthly")
    >>> config.verbosity
    'verbose'
    >>> config.interval
    'monthly'
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .timeline.models import INTERVAL_DAYS

Verbosity = Literal["quiet", "normal", "verbose"]
Interval = Literal["all", "daily", "weekly", "monthly"]

DEFAULT_DATA_DIR = "sigtrack_data"


@dataclass(frozen=True)
class TimelineConfig:
    """Configuration for snapshot collection and timeline replay.

    Attributes:
        Storage:
            data_dir: Directory receiving one JSON record per snapshot

        Type checker:
            sorbet_bin: Path to a custom Sorbet binary (None = ``srb tc``)
            sorbet_config: Project-relative path of the Sorbet config file
            include_rbi: Count RBI files in the metrics
            analyzer_timeout_seconds: Upper bound for one type checker run

        Source control:
            git_timeout_seconds: Upper bound for one git invocation
            interval: Tick sampling (all commits, or one per day/week/month)

        Preparation:
            prepare_command: Command run after each checkout (e.g. bundle install)
            prepare_timeout_seconds: Upper bound for the preparation command

        Output control:
            verbosity: Logging verbosity level
    """

    data_dir: str = DEFAULT_DATA_DIR

    sorbet_bin: Optional[str] = None
    sorbet_config: str = "sorbet/config"
    include_rbi: bool = True
    analyzer_timeout_seconds: int = 600

    git_timeout_seconds: int = 60
    interval: Interval = "all"

    prepare_command: Optional[str] = None
    prepare_timeout_seconds: int = 900

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        for name in (
            "analyzer_timeout_seconds",
            "git_timeout_seconds",
            "prepare_timeout_seconds",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise InvalidConfigError(name, value, "must be a positive integer")

        if self.interval not in INTERVAL_DAYS:
            raise InvalidConfigError(
                "interval", self.interval, f"expected one of {', '.join(INTERVAL_DAYS)}"
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")
        if not self.data_dir:
            raise InvalidConfigError("data_dir", self.data_dir, "must not be empty")
        if not self.sorbet_config:
            raise InvalidConfigError("sorbet_config", self.sorbet_config, "must not be empty")

    @property
    def verbose(self) -> bool:
        return self.verbosity == "verbose"

    @property
    def quiet(self) -> bool:
        return self.verbosity == "quiet"


def load_config(config_file: Optional[Path] = None, **overrides) -> TimelineConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options don't mask file values.

    Returns:
        Validated TimelineConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".sigtrack.toml"
    if global_config.exists():
        merged.update(_read_config_file(global_config, "global config"))

    project_config = Path.cwd() / "sigtrack.toml"
    if project_config.exists():
        merged.update(_read_config_file(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_read_config_file(config_file, "config file"))

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return TimelineConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _read_config_file(path: Path, label: str) -> dict:
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")
    # Accept both a flat file and a [sigtrack] table
    section = data.get("sigtrack", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid {label} '{path}': [sigtrack] must be a table")
    return section


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from SIGTRACK_* environment variables.

    Every TimelineConfig field maps to ``SIGTRACK_<FIELD>``, for example
    ``SIGTRACK_DATA_DIR``, ``SIGTRACK_SORBET_BIN``, ``SIGTRACK_INCLUDE_RBI``
    or ``SIGTRACK_INTERVAL``.

    Returns:
        Dict of field_name -> parsed_value for any SIGTRACK_* vars found.
    """
    type_hints = get_type_hints(TimelineConfig)

    result: dict[str, Any] = {}

    for field_name in TimelineConfig.__dataclass_fields__:
        env_key = f"SIGTRACK_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None], extract X
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
