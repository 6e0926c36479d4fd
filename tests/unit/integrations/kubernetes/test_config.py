"""Unit tests for Kubernetes plugin configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from kube_hello.integrations.kubernetes.config import (
    ClusterConfig,
    KubernetesDefaultsConfig,
    KubernetesPluginConfig,
)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestClusterConfig:
    """Test ClusterConfig model."""

    def test_expands_kubeconfig(self) -> None:
        """The kubeconfig path is expanded."""
        config = ClusterConfig(context="dev")
        assert config.kubeconfig == str(Path("~/.kube/config").expanduser())

    def test_rejects_non_positive_timeout(self) -> None:
        """Timeouts must be positive."""
        with pytest.raises(ValidationError):
            ClusterConfig(timeout=0)

    def test_rejects_unknown_fields(self) -> None:
        """Unknown fields are rejected."""
        with pytest.raises(ValidationError):
            ClusterConfig.model_validate({"context": "dev", "region": "eu"})


@pytest.mark.unit
@pytest.mark.kubernetes
class TestKubernetesDefaultsConfig:
    """Test KubernetesDefaultsConfig model."""

    def test_defaults(self) -> None:
        """Defaults are applied."""
        config = KubernetesDefaultsConfig()
        assert config.timeout == 300
        assert config.retry_attempts == 3

    def test_rejects_zero_retries(self) -> None:
        """At least one attempt is required."""
        with pytest.raises(ValidationError):
            KubernetesDefaultsConfig(retry_attempts=0)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestKubernetesPluginConfig:
    """Test KubernetesPluginConfig model."""

    def test_defaults(self) -> None:
        """Without configuration nothing is pinned."""
        config = KubernetesPluginConfig()
        assert config.get_active_context() is None
        assert config.get_kubeconfig_path() is None
        assert config.get_configured_namespace() is None
        assert config.get_active_timeout() == 300
        assert config.output_format == "greeting"

    def test_active_cluster_settings(self) -> None:
        """A named cluster supplies context, kubeconfig, namespace and timeout."""
        config = KubernetesPluginConfig(
            clusters={
                "staging": ClusterConfig(
                    context="staging-ctx",
                    kubeconfig="/etc/kube/staging",
                    namespace="apps",
                    timeout=60,
                )
            },
            active_cluster="staging",
        )
        assert config.get_active_context() == "staging-ctx"
        assert config.get_kubeconfig_path() == "/etc/kube/staging"
        assert config.get_configured_namespace() == "apps"
        assert config.get_active_timeout() == 60

    def test_unknown_active_cluster_is_a_context_name(self) -> None:
        """An active cluster that is not configured names a kubeconfig context."""
        config = KubernetesPluginConfig(active_cluster="kind-dev")
        assert config.get_active_context() == "kind-dev"

    def test_top_level_namespace_wins(self) -> None:
        """The top-level namespace overrides the cluster namespace."""
        config = KubernetesPluginConfig(
            clusters={"c": ClusterConfig(context="c", namespace="apps")},
            active_cluster="c",
            namespace="override",
        )
        assert config.get_configured_namespace() == "override"

    def test_rejects_unknown_output_format(self) -> None:
        """Only known output formats are accepted."""
        with pytest.raises(ValidationError):
            KubernetesPluginConfig(output_format="wide")  # type: ignore[arg-type]


@pytest.mark.unit
@pytest.mark.kubernetes
class TestFromEnv:
    """Test environment variable overrides."""

    def test_without_env_uses_base_config(self) -> None:
        """Base configuration is used as-is."""
        config = KubernetesPluginConfig.from_env({"namespace": "team-a"})
        assert config.namespace == "team-a"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables take precedence over the base configuration."""
        monkeypatch.setenv("KHELLO_K8S_KUBECONFIG", "/tmp/kubeconfig")
        monkeypatch.setenv("KHELLO_K8S_CONTEXT", "kind-dev")
        monkeypatch.setenv("KHELLO_K8S_NAMESPACE", "env-ns")
        monkeypatch.setenv("KHELLO_K8S_TIMEOUT", "42")
        monkeypatch.setenv("KHELLO_K8S_OUTPUT", "yaml")

        config = KubernetesPluginConfig.from_env(
            {"namespace": "team-a", "defaults": {"retry_attempts": 5}}
        )

        assert config.kubeconfig == "/tmp/kubeconfig"
        assert config.get_active_context() == "kind-dev"
        assert config.namespace == "env-ns"
        assert config.defaults.timeout == 42
        assert config.defaults.retry_attempts == 5
        assert config.output_format == "yaml"

    def test_does_not_mutate_base_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The caller's mapping is left untouched."""
        monkeypatch.setenv("KHELLO_K8S_NAMESPACE", "env-ns")
        base = {"namespace": "team-a"}
        KubernetesPluginConfig.from_env(base)
        assert base == {"namespace": "team-a"}

    def test_invalid_timeout_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A non-numeric timeout is rejected."""
        monkeypatch.setenv("KHELLO_K8S_TIMEOUT", "soon")
        with pytest.raises(ValueError):
            KubernetesPluginConfig.from_env()
