"""Configuration management with Pydantic validation."""

from kube_hello.core.config.models import (
    CONFIG_DIR,
    CONFIG_FILE,
    SystemConfig,
    load_config,
)

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "SystemConfig",
    "load_config",
]
