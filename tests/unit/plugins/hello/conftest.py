"""Shared fixtures for hello plugin tests."""

from __future__ import annotations

import io
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from kube_hello.integrations.kubernetes.client import KubernetesClient
from kube_hello.integrations.kubernetes.config import KubernetesPluginConfig


@pytest.fixture
def output() -> io.StringIO:
    """Buffer receiving console output."""
    return io.StringIO()


@pytest.fixture
def console(output: io.StringIO) -> Console:
    """A console writing to ``output``."""
    return Console(file=output, width=80)


@pytest.fixture
def pods_resource() -> SimpleNamespace:
    """A discovered ``pods`` API resource with a mocked ``get``."""
    return SimpleNamespace(
        name="pods",
        singular_name="pod",
        kind="Pod",
        group="",
        api_version="v1",
        namespaced=True,
        short_names=["po"],
        categories=["all"],
        preferred=True,
        verbs=["get", "list"],
        get=MagicMock(),
    )


@pytest.fixture
def k8s_client(pods_resource: SimpleNamespace) -> KubernetesClient:
    """A real client whose dynamic client only knows ``pods``."""
    client = KubernetesClient(KubernetesPluginConfig())
    dynamic = MagicMock()
    dynamic.resources.search.return_value = [pods_resource]
    client._dynamic = dynamic
    return client
