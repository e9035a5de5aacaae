"""
PROCWARDEN - Configuration Management

Handles init configuration from environment variables and files.
"""

import json
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import yaml

from procwarden.core.errors import ConfigurationError

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


def parse_bool(value: str) -> bool:
    """
    Parse a boolean flag or environment value.

    Raises:
        ValueError: If the value is not a recognised boolean
    """
    lowered = str(value).strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"invalid boolean value: {value!r}")


def find_env_default(default: str, *names: str) -> str:
    """
    First non-empty environment variable among names, else default.

    Args:
        default: Value when none of the variables is set
        *names: Variable names in priority order
    """
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return default


@dataclass
class InitConfig:
    """Configuration applied by init() before startup functions run."""

    # Signals
    standard_signals: bool = False  # SIGHUP/SIGINT/SIGTERM → shutdown

    # Logging
    log_dir: str = ""  # Resolved from the environment when empty
    log_files: bool = True
    log_spam: bool = True  # Process banner at the top of the log
    log_to_stderr: bool = False
    make_log_dir: bool = True
    verbosity: int = 0

    # PID file path ("" = no PID file)
    pidfile: str = ""

    @classmethod
    def from_env(cls) -> "InitConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - PROCWARDEN_LOGDIR, TMP, TEMP: Log directory (first one set wins, default /tmp)
        - PROCWARDEN_LOGFILES: Write log files (bool)
        - PROCWARDEN_VERBOSITY: Verbosity level (int)
        """
        try:
            return cls(
                log_dir=find_env_default("/tmp", "PROCWARDEN_LOGDIR", "TMP", "TEMP"),
                log_files=parse_bool(os.environ.get("PROCWARDEN_LOGFILES", str(cls.log_files))),
                verbosity=int(os.environ.get("PROCWARDEN_VERBOSITY", cls.verbosity)),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment configuration: {e}") from e

    @classmethod
    def from_file(cls, path: str) -> "InitConfig":
        """
        Load configuration from YAML or JSON file.

        Args:
            path: Path to configuration file (.yaml, .yml, or .json)

        Returns:
            InitConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config file format or keys are invalid
        """
        return cls(**cls._read_file(path))

    @classmethod
    def _read_file(cls, path: str) -> Dict[str, Any]:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            if path.endswith((".yaml", ".yml")):
                data = yaml.safe_load(f)
            elif path.endswith(".json"):
                data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported config file format: {path}")

        data = data or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {path}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys in {path}: {', '.join(unknown)}")

        return data

    @classmethod
    def load(cls, config_file: Optional[str] = None) -> "InitConfig":
        """
        Load configuration with priority: file > env > defaults.

        Args:
            config_file: Optional path to configuration file

        Returns:
            InitConfig instance
        """
        config = cls.from_env()

        # Merge: keys present in the file take precedence
        if config_file and os.path.exists(config_file):
            for key, value in cls._read_file(config_file).items():
                setattr(config, key, value)

        return config

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if self.verbosity < 0:
            raise ConfigurationError("verbosity must not be negative")

        if self.pidfile and os.path.isdir(self.pidfile):
            raise ConfigurationError(f"pidfile must not be a directory: {self.pidfile}")
