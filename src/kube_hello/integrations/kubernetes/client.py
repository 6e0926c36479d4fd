"""Kubernetes API client wrapper.

Provides the factory used by commands: namespace resolution from the
kubeconfig and plugin configuration, lazy dynamic client initialization,
resource builders, retry logic and consistent error translation.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from urllib3.exceptions import HTTPError

from kube_hello.integrations.kubernetes.exceptions import (
    ConfigurationError,
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesValidationError,
)

if TYPE_CHECKING:
    from kubernetes.dynamic import DynamicClient

    from kube_hello.integrations.kubernetes.config import KubernetesPluginConfig
    from kube_hello.services.kubernetes.builder import ResourceBuilder

logger = structlog.get_logger()

DEFAULT_NAMESPACE = "default"
DEFAULT_KUBECONFIG = "~/.kube/config"


class KubernetesClient:
    """Kubernetes API client and command factory.

    Wraps the official kubernetes Python client with:
    - Namespace resolution (flag, configuration, kubeconfig context)
    - Lazy kubeconfig loading and dynamic client creation
    - Automatic retry with tenacity for transient errors
    - Consistent error translation to custom exceptions
    - Context manager support

    Nothing touches the cluster until :attr:`dynamic` is first used, so
    commands that only read local files work without a reachable API server.

    Example:
        ```python
        from kube_hello.integrations.kubernetes import KubernetesClient
        from kube_hello.integrations.kubernetes.config import KubernetesPluginConfig

        config = KubernetesPluginConfig.from_env()
        with KubernetesClient(config) as client:
            namespace, enforce = client.namespace()
            result = client.new_builder().namespace_param(namespace).do()
        ```
    """

    def __init__(self, plugin_config: KubernetesPluginConfig) -> None:
        """Initialize Kubernetes client from plugin config.

        Args:
            plugin_config: Complete plugin configuration.
        """
        self._config = plugin_config
        self._retries = plugin_config.defaults.retry_attempts
        self._current_context: str | None = None
        self._dynamic: DynamicClient | None = None

    # =========================================================================
    # Kubeconfig
    # =========================================================================

    def _kubeconfig_paths(self) -> list[Path]:
        """Return candidate kubeconfig files, honoring ``KUBECONFIG`` lists."""
        configured = self._config.get_kubeconfig_path()
        raw = configured or os.environ.get("KUBECONFIG") or DEFAULT_KUBECONFIG
        return [Path(p).expanduser() for p in raw.split(os.pathsep) if p]

    def _kubeconfig_file(self) -> str | None:
        """Return the first existing kubeconfig file, or None."""
        for path in self._kubeconfig_paths():
            if path.is_file():
                return str(path)
        return None

    def _context_namespace(self) -> str | None:
        """Read the namespace of the active kubeconfig context.

        Returns:
            The context namespace, or None when the context sets none or no
            kubeconfig exists and no context was requested explicitly.

        Raises:
            ConfigurationError: If the kubeconfig is invalid or the
                requested context does not exist.
        """
        from kubernetes import config
        from kubernetes.config import ConfigException

        requested = self._config.get_active_context()
        config_file = self._kubeconfig_file()
        if config_file is None:
            if requested:
                raise ConfigurationError(
                    f'context "{requested}" does not exist: no kubeconfig file found'
                )
            logger.debug("no_kubeconfig_found", paths=[str(p) for p in self._kubeconfig_paths()])
            return None

        try:
            contexts, active = config.list_kube_config_contexts(config_file=config_file)
        except ConfigException as e:
            raise ConfigurationError(
                f"Invalid kubeconfig {config_file}: {e}",
                original_error=e,
            ) from e

        if requested:
            matches = [c for c in contexts or [] if c.get("name") == requested]
            if not matches:
                raise ConfigurationError(f'context "{requested}" does not exist')
            active = matches[0]

        if not active:
            return None
        self._current_context = active.get("name")
        return (active.get("context") or {}).get("namespace") or None

    def namespace(self, override: str | None = None) -> tuple[str, bool]:
        """Resolve the namespace commands should operate in.

        An explicit override wins and must be enforced on input objects.
        Otherwise the configured namespace, then the kubeconfig context's
        namespace, then ``default`` are used without enforcement.

        Args:
            override: Namespace passed on the command line.

        Returns:
            Tuple of (namespace, enforce_namespace).

        Raises:
            ConfigurationError: If the kubeconfig cannot be read.
        """
        if override:
            return override, True
        if configured := self._config.get_configured_namespace():
            return configured, False
        return self._context_namespace() or DEFAULT_NAMESPACE, False

    # =========================================================================
    # Lazy API Access
    # =========================================================================

    def _load_config(self) -> None:
        """Load Kubernetes configuration from kubeconfig or in-cluster."""
        from kubernetes import config
        from kubernetes.config import ConfigException

        active_context = self._config.get_active_context()
        kubeconfig_path = self._kubeconfig_file()

        try:
            config.load_kube_config(config_file=kubeconfig_path, context=active_context)
            self._current_context = active_context or self._current_context
            logger.debug("loaded_kubeconfig", context=active_context, kubeconfig=kubeconfig_path)
        except (ConfigException, TypeError) as e:
            try:
                config.load_incluster_config()
                self._current_context = "in-cluster"
                logger.debug("loaded_incluster_config")
            except ConfigException:
                raise KubernetesConnectionError(
                    message="Cannot load Kubernetes configuration. "
                    "Ensure kubeconfig exists or running inside a cluster.",
                    original_error=e,
                ) from e

    @property
    def dynamic(self) -> DynamicClient:
        """Get the DynamicClient, loading configuration on first use.

        Raises:
            KubernetesConnectionError: If no configuration can be loaded or
                the API server is unreachable.
            KubernetesError: If the API server rejects discovery, e.g.
                KubernetesAuthError for an expired token.
        """
        if self._dynamic is None:
            from kubernetes.client import ApiClient, ApiException
            from kubernetes.dynamic import DynamicClient

            self._load_config()
            try:
                self._dynamic = DynamicClient(ApiClient())
            except ApiException as e:
                raise self.translate_api_exception(e) from e
            except HTTPError as e:
                raise KubernetesConnectionError(
                    message="Failed to discover Kubernetes API resources",
                    original_error=e,
                ) from e
        return self._dynamic

    def new_builder(self) -> ResourceBuilder:
        """Return a fresh resource builder bound to this client."""
        from kube_hello.services.kubernetes.builder import ResourceBuilder

        return ResourceBuilder(self)

    def get_current_context(self) -> str:
        """Get the current active context name."""
        return self._current_context or "unknown"

    # =========================================================================
    # Error Translation
    # =========================================================================

    @staticmethod
    def translate_api_exception(
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> KubernetesError:
        """Translate a kubernetes ApiException to a custom exception.

        Args:
            e: The original exception.
            resource_type: Type of resource being operated on.
            resource_name: Name of the resource.
            namespace: Namespace of the resource.

        Returns:
            An appropriate KubernetesError subclass.
        """
        from kubernetes.client import ApiException

        if isinstance(e, KubernetesError):
            return e

        if isinstance(e, HTTPError):
            return KubernetesConnectionError(original_error=e)

        if not isinstance(e, ApiException):
            return KubernetesError(
                str(e),
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
                original_error=e,
            )

        status, reason = e.status, e.reason or None
        if status == 404:
            return KubernetesNotFoundError(
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )
        if status in (401, 403):
            return KubernetesAuthError(reason, status_code=status, reason=reason)
        if status in (400, 422):
            return KubernetesValidationError(reason, status_code=status)
        return KubernetesError(
            reason or f"Kubernetes API error: {status}",
            status_code=status,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )

    # =========================================================================
    # Retry Decorator
    # =========================================================================

    def make_retry_decorator(self) -> Any:
        """Create a retry decorator for transient connection errors.

        Returns:
            A tenacity retry decorator configured with exponential backoff.
        """
        return retry(
            retry=retry_if_exception_type(KubernetesConnectionError),
            stop=stop_after_attempt(self._retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def timeout(self) -> int:
        """Get the configured timeout."""
        return self._config.get_active_timeout()

    @property
    def output_format(self) -> str:
        """Get the configured default output format."""
        return self._config.output_format

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close the client and release resources."""
        self._dynamic = None
        logger.debug("Kubernetes client closed")

    def __enter__(self) -> KubernetesClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()
