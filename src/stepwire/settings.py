"""Settings controlling injection passes.

Settings are read from a YAML (or JSON) file and may be overridden by
environment variables:

    # stepwire.yaml
    injection:
      max_depth: 16
      log_level: DEBUG

The file is looked up from the ``STEPWIRE_CONFIG`` environment variable, then
``stepwire.yaml`` in the current directory. ``STEPWIRE_MAX_DEPTH`` and
``STEPWIRE_LOG_LEVEL`` take precedence over values from the file.
"""

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from stepwire.errors import ConfigurationError

__all__ = ["InjectionSettings"]

CONFIG_ENV_VAR = "STEPWIRE_CONFIG"
DEFAULT_CONFIG_FILE = "stepwire.yaml"


@dataclass(frozen=True)
class InjectionSettings:
    """
    Attributes:
        max_depth: Maximum nesting depth of step libraries created within one
            injection pass.
        log_level: Level applied to the ``stepwire`` logger by :meth:`configure_logging`.
    """

    max_depth: int = 32
    log_level: str = "WARNING"

    def __post_init__(self):
        if (
            isinstance(self.max_depth, bool)
            or not isinstance(self.max_depth, int)
            or self.max_depth < 1
        ):
            raise ConfigurationError(
                f"max_depth must be a positive integer, got {self.max_depth!r}"
            )
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ConfigurationError(f"Unknown log level {self.log_level!r}")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "InjectionSettings":
        """Load settings from a file and the environment.

        Args:
            path: Explicit path to a settings file. When omitted, the path is taken
                from ``STEPWIRE_CONFIG`` or the default ``stepwire.yaml`` if it exists.

        Raises:
            ConfigurationError: If the file cannot be parsed or a value is invalid.
        """
        config_path = path or _default_config_path()
        values = _load_section(config_path) if config_path else {}
        settings = cls(**_known_values(values))
        return _apply_env_overrides(settings)

    def configure_logging(self):
        logging.getLogger("stepwire").setLevel(self.log_level.upper())


def _default_config_path() -> Optional[Path]:
    if env_path := os.getenv(CONFIG_ENV_VAR):
        return Path(env_path)

    default_path = Path.cwd() / DEFAULT_CONFIG_FILE
    if default_path.exists():
        return default_path
    return None


def _load_section(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise ConfigurationError(f"Settings file {config_path} does not exist")

    with open(config_path, "r") as f:
        try:
            if config_path.suffix in (".yaml", ".yml"):
                config = yaml.safe_load(f)
            elif config_path.suffix == ".json":
                config = json.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported settings format: {config_path.suffix}"
                )
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not parse settings file {config_path}: {e}") from e

    if not isinstance(config or {}, dict):
        raise ConfigurationError(f"Settings file {config_path} must contain a mapping")

    section = (config or {}).get("injection") or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'injection' section of {config_path} must be a mapping")
    return section


def _known_values(values: dict[str, Any]) -> dict[str, Any]:
    known = {"max_depth", "log_level"}
    unknown = values.keys() - known
    if unknown:
        raise ConfigurationError(f"Unknown injection settings {sorted(unknown)}")
    return dict(values)


def _apply_env_overrides(settings: InjectionSettings) -> InjectionSettings:
    overrides: dict[str, Any] = {}

    if max_depth := os.getenv("STEPWIRE_MAX_DEPTH"):
        try:
            overrides["max_depth"] = int(max_depth)
        except ValueError as e:
            raise ConfigurationError(
                f"STEPWIRE_MAX_DEPTH must be an integer, got {max_depth!r}"
            ) from e

    if log_level := os.getenv("STEPWIRE_LOG_LEVEL"):
        overrides["log_level"] = log_level

    return replace(settings, **overrides) if overrides else settings
