"""Hello plugin implementation.

Registers the ``hello-world`` and ``hello-kubernetes`` commands and owns the
Kubernetes client they share.
"""

from __future__ import annotations

import structlog
import typer
from pydantic import ValidationError

from kube_hello.core.plugins.base import Plugin, hookimpl
from kube_hello.integrations.kubernetes.client import KubernetesClient
from kube_hello.integrations.kubernetes.config import KubernetesPluginConfig
from kube_hello.integrations.kubernetes.exceptions import ConfigurationError
from kube_hello.plugins.hello.commands import (
    register_hello_kubernetes_command,
    register_hello_world_command,
)

logger = structlog.get_logger()


class HelloPlugin(Plugin):
    """Greeting commands for the world and for Kubernetes resources."""

    name = "hello"
    version = "0.1.0"
    description = "Hello World and Kubernetes resource greeting commands"

    def __init__(self) -> None:
        """Initialize hello plugin."""
        super().__init__()
        self._client: KubernetesClient | None = None
        self._plugin_config: KubernetesPluginConfig | None = None
        self._config_error: ConfigurationError | None = None

    def on_initialize(self) -> None:
        """Parse the plugin configuration.

        Environment variables override configuration file values. Invalid
        configuration is reported when a command first needs the client, so
        commands that do not use it keep working.
        """
        self._client = None
        self._config_error = None
        try:
            self._plugin_config = KubernetesPluginConfig.from_env(self.config)
        except (ValidationError, ValueError) as e:
            self._plugin_config = None
            self._config_error = ConfigurationError(
                f"Invalid Kubernetes configuration: {e}", original_error=e
            )
            logger.warning("hello_plugin_config_invalid", error=str(e))
            return

        logger.debug(
            "Hello plugin initialized",
            context=self._plugin_config.get_active_context(),
            namespace=self._plugin_config.get_configured_namespace(),
        )

    def get_client(self) -> KubernetesClient:
        """Return the shared Kubernetes client, creating it on first use.

        Raises:
            ConfigurationError: If the plugin configuration is invalid.
        """
        if self._client is not None:
            return self._client
        if self._plugin_config is None and self._config_error is None:
            self.on_initialize()
        if self._plugin_config is None:
            raise self._config_error or ConfigurationError("Hello plugin is not configured")
        self._client = KubernetesClient(self._plugin_config)
        return self._client

    @hookimpl
    def register_commands(self, app: typer.Typer) -> None:
        """Register hello commands with the CLI."""
        register_hello_world_command(app)
        register_hello_kubernetes_command(app, self.get_client)
        logger.debug("Hello commands registered")

    @hookimpl
    def cleanup(self) -> None:
        """Cleanup hello plugin resources."""
        if self._client:
            self._client.close()
            self._client = None
        super().cleanup()

    @property
    def client(self) -> KubernetesClient | None:
        """Get the Kubernetes client."""
        return self._client

    @property
    def plugin_config(self) -> KubernetesPluginConfig | None:
        """Get the Kubernetes plugin configuration."""
        return self._plugin_config
