"""Shared fixtures for Kubernetes service tests."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from kube_hello.integrations.kubernetes.client import KubernetesClient
from kube_hello.integrations.kubernetes.config import KubernetesPluginConfig


def make_api_resource(
    name: str,
    kind: str,
    *,
    group: str = "",
    api_version: str = "v1",
    namespaced: bool = True,
    short_names: list[str] | None = None,
    categories: list[str] | None = None,
    preferred: bool = True,
    verbs: list[str] | None = None,
) -> SimpleNamespace:
    """Return an object shaped like a dynamic client ``Resource``."""
    return SimpleNamespace(
        name=name,
        singular_name=kind.lower(),
        kind=kind,
        group=group,
        api_version=api_version,
        namespaced=namespaced,
        short_names=short_names or [],
        categories=categories or [],
        preferred=preferred,
        verbs=["get", "list"] if verbs is None else verbs,
        get=MagicMock(),
    )


@pytest.fixture
def api_resources() -> dict[str, SimpleNamespace]:
    """Discovery results for a small cluster."""
    return {
        "pods": make_api_resource("pods", "Pod", short_names=["po"], categories=["all"]),
        "pods/log": make_api_resource("pods/log", "Pod"),
        "services": make_api_resource(
            "services", "Service", short_names=["svc"], categories=["all"]
        ),
        "deployments": make_api_resource(
            "deployments",
            "Deployment",
            group="apps",
            short_names=["deploy"],
            categories=["all"],
        ),
        "deployments-old": make_api_resource(
            "deployments",
            "Deployment",
            group="apps",
            api_version="v1beta1",
            short_names=["deploy"],
            categories=["all"],
            preferred=False,
        ),
        "nodes": make_api_resource("nodes", "Node", namespaced=False, short_names=["no"]),
        "bindings": make_api_resource("bindings", "Binding", verbs=[]),
    }


@pytest.fixture
def k8s_client(api_resources: dict[str, SimpleNamespace]) -> KubernetesClient:
    """A real client whose dynamic client is a mock serving ``api_resources``."""
    client = KubernetesClient(KubernetesPluginConfig())
    dynamic = MagicMock()
    dynamic.resources.search.return_value = list(api_resources.values())
    client._dynamic = dynamic
    return client
