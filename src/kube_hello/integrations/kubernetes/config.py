"""Configuration of the hello plugin's Kubernetes access.

Values come from the ``plugins.hello`` section of the khello config file and
are overridden by ``KHELLO_K8S_*`` environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator


def _positive(value: int, field: str) -> int:
    if value <= 0:
        raise ValueError(f"{field} must be positive")
    return value


class ClusterConfig(BaseModel):
    """A named kubeconfig context with its own file, namespace and timeout."""

    model_config = ConfigDict(extra="forbid")

    context: str = ""
    kubeconfig: str = "~/.kube/config"
    namespace: str | None = None
    timeout: int = 300

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        return _positive(v, "timeout")

    @field_validator("kubeconfig")
    @classmethod
    def validate_kubeconfig(cls, v: str) -> str:
        """Expand ~ in kubeconfig path."""
        return str(Path(v).expanduser())


class KubernetesDefaultsConfig(BaseModel):
    """Timeout and retry settings used when no cluster entry applies."""

    model_config = ConfigDict(extra="forbid")

    timeout: int = 300
    retry_attempts: int = 3

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        return _positive(v, "timeout")

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        return _positive(v, "retry_attempts")


class KubernetesPluginConfig(BaseModel):
    """The ``plugins.hello`` configuration section."""

    model_config = ConfigDict(extra="forbid")

    clusters: dict[str, ClusterConfig] = {}
    active_cluster: str | None = None
    kubeconfig: str | None = None
    namespace: str | None = None
    defaults: KubernetesDefaultsConfig = KubernetesDefaultsConfig()
    output_format: Literal["greeting", "json", "yaml", "name"] = "greeting"

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> KubernetesPluginConfig:
        """Create configuration with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            KHELLO_K8S_KUBECONFIG: Override kubeconfig path
            KHELLO_K8S_CONTEXT: Override active Kubernetes context
            KHELLO_K8S_NAMESPACE: Override default namespace
            KHELLO_K8S_TIMEOUT: Default timeout in seconds
            KHELLO_K8S_OUTPUT: Output format (greeting, json, yaml, name)
        """
        config_dict = dict(base_config) if base_config else {}
        config_dict["defaults"] = dict(config_dict.get("defaults") or {})

        if kubeconfig := os.environ.get("KHELLO_K8S_KUBECONFIG"):
            config_dict["kubeconfig"] = kubeconfig

        if context := os.environ.get("KHELLO_K8S_CONTEXT"):
            config_dict["active_cluster"] = context

        if namespace := os.environ.get("KHELLO_K8S_NAMESPACE"):
            config_dict["namespace"] = namespace

        if timeout := os.environ.get("KHELLO_K8S_TIMEOUT"):
            config_dict["defaults"]["timeout"] = int(timeout)

        if output_format := os.environ.get("KHELLO_K8S_OUTPUT"):
            config_dict["output_format"] = output_format

        return cls.model_validate(config_dict)

    def get_active_cluster(self) -> ClusterConfig | None:
        """Return the cluster entry named by ``active_cluster``, if there is one."""
        if self.active_cluster:
            return self.clusters.get(self.active_cluster)
        return None

    def get_active_context(self) -> str | None:
        """Get the active cluster context name.

        Returns the context of the named cluster when ``active_cluster``
        matches one, the raw ``active_cluster`` value otherwise, or None so
        the kubeconfig's current context is used.
        """
        if cluster := self.get_active_cluster():
            return cluster.context or None
        return self.active_cluster or None

    def get_kubeconfig_path(self) -> str | None:
        """Get the kubeconfig file to load, or None for auto-detection."""
        if cluster := self.get_active_cluster():
            return cluster.kubeconfig
        if self.kubeconfig:
            return str(Path(self.kubeconfig).expanduser())
        return None

    def get_configured_namespace(self) -> str | None:
        """Get the namespace set through configuration, if any.

        The top-level namespace (or ``KHELLO_K8S_NAMESPACE``) wins over the
        active cluster's namespace.
        """
        if self.namespace:
            return self.namespace
        if cluster := self.get_active_cluster():
            return cluster.namespace
        return None

    def get_active_timeout(self) -> int:
        """Get the timeout for the active cluster."""
        if cluster := self.get_active_cluster():
            return cluster.timeout
        return self.defaults.timeout
