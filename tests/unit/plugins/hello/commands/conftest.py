"""Shared fixtures for hello command tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest
import typer
from typer.testing import CliRunner

from kube_hello.integrations.kubernetes.client import KubernetesClient
from kube_hello.plugins.hello.commands import (
    register_hello_kubernetes_command,
    register_hello_world_command,
)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def get_client(k8s_client: KubernetesClient) -> Callable[[], KubernetesClient]:
    """Create a factory function that returns the test client."""
    return lambda: k8s_client


@pytest.fixture
def app(get_client: Callable[[], KubernetesClient]) -> typer.Typer:
    """Create a test app with the hello commands."""
    app = typer.Typer()
    register_hello_world_command(app)
    register_hello_kubernetes_command(app, get_client)
    return app
