"""Application configuration models and loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from kube_hello.integrations.kubernetes.exceptions import ConfigurationError

logger = structlog.get_logger()

# XDG-compliant config location
CONFIG_DIR = Path.home() / ".config" / "khello"
CONFIG_FILE = CONFIG_DIR / "config.yaml"


class SystemConfig(BaseModel):
    """Top-level configuration file model.

    ``plugins`` maps plugin names to their raw configuration sections; each
    plugin validates its own section.
    """

    model_config = ConfigDict(extra="forbid")

    version: str = "1.0"
    environment: str = "default"
    debug: bool = False
    plugins: dict[str, dict[str, Any]] = {}

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any) -> str:
        """Accept unquoted numeric versions such as ``1.0``."""
        return str(v)


def load_config(path: Path | None = None) -> SystemConfig:
    """Load and validate the configuration file.

    Args:
        path: Configuration file. Defaults to ``CONFIG_FILE``.

    Returns:
        The validated configuration, or defaults when the file is missing.

    Raises:
        ConfigurationError: If the file cannot be parsed or validated.
    """
    path = path or CONFIG_FILE
    if not path.exists():
        logger.debug("config_not_found", path=str(path))
        return SystemConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read configuration {path}: {e}", original_error=e) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration {path} must be a mapping")

    try:
        config = SystemConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration {path}: {e}", original_error=e) from e

    logger.debug("config_loaded", path=str(path), environment=config.environment)
    return config
