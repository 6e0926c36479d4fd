"""Kubernetes integration - API client and configuration models."""

from kube_hello.integrations.kubernetes.client import KubernetesClient
from kube_hello.integrations.kubernetes.config import (
    ClusterConfig,
    KubernetesDefaultsConfig,
    KubernetesPluginConfig,
)
from kube_hello.integrations.kubernetes.exceptions import (
    AccessorError,
    ConfigurationError,
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesValidationError,
    NoObjectsError,
    PerItemVisitError,
    ResolutionError,
)

__all__ = [
    "AccessorError",
    "ClusterConfig",
    "ConfigurationError",
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConnectionError",
    "KubernetesDefaultsConfig",
    "KubernetesError",
    "KubernetesNotFoundError",
    "KubernetesPluginConfig",
    "KubernetesValidationError",
    "NoObjectsError",
    "PerItemVisitError",
    "ResolutionError",
]
