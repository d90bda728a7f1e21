"""Runner configuration.

Values come from command-line options (or their environment variables),
then an optional YAML file, then the defaults below.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .discovery.resolver import DEFAULT_NAMESPACE
from .errors import ConfigError

DEFAULT_LOG_FORMAT = "%(levelname)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_PATH_FIELDS = {"log_dir", "java_home", "agent_path", "report_path"}


def parse_skip_list(value: Union[str, list, tuple, None]) -> frozenset[str]:
    """Parse a comma-separated skip list into lowercased names."""
    if not value:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    return frozenset(str(name).strip().lower() for name in value if str(name).strip())


@dataclass
class RunnerConfig:
    """Configuration for a test run."""
    log_dir: Optional[Path] = None
    skip: frozenset[str] = field(default_factory=frozenset)
    log_level: Optional[str] = None
    log_format: Optional[str] = None
    java_home: Optional[Path] = None
    agent_path: Optional[Path] = None
    namespace: str = DEFAULT_NAMESPACE
    paths: list[str] = field(default_factory=lambda: ["."])
    report_path: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<inline>") -> "RunnerConfig":
        """Build a config from a mapping, converting value types.

        Raises:
            ConfigError: On unknown keys or malformed values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config key(s) in {source}: {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            if key in _PATH_FIELDS:
                values[key] = Path(value)
            elif key == "skip":
                values[key] = parse_skip_list(value)
            elif key == "paths":
                if isinstance(value, str):
                    value = [value]
                if not isinstance(value, list):
                    raise ConfigError(f"'paths' must be a list in {source}")
                values[key] = [str(p) for p in value]
            elif key == "log_level":
                level = str(value).upper()
                if level not in LOG_LEVELS:
                    raise ConfigError(
                        f"Invalid log_level '{value}' in {source}. Must be one of: {', '.join(LOG_LEVELS)}"
                    )
                values[key] = level
            else:
                values[key] = str(value)
        return cls(**values)

    def merged(self, **overrides: Any) -> "RunnerConfig":
        """Copy with every non-None override applied."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        for key, value in overrides.items():
            if value is not None:
                data[key] = value
        return RunnerConfig(**data)


def load_config(file_path: Union[str, Path, None]) -> RunnerConfig:
    """Load a YAML config file; None yields the defaults.

    Raises:
        ConfigError: If the file is missing or malformed.
    """
    if file_path is None:
        return RunnerConfig()

    file_path = Path(file_path)
    if not file_path.exists():
        raise ConfigError(f"Config file not found: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {file_path}: {e}") from e

    if data is None:
        return RunnerConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(data).__name__}")

    # YAML style keys use dashes
    data = {str(k).replace("-", "_"): v for k, v in data.items()}
    return RunnerConfig.from_dict(data, source=str(file_path))
