"""Base utilities for hello CLI commands.

Provides common Typer options and error handling shared by the commands.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from kube_hello.integrations.kubernetes.exceptions import (
    ConfigurationError,
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    NoObjectsError,
    PerItemVisitError,
    ResolutionError,
)
from kube_hello.plugins.hello.printers import OutputFormat

# Shared console instances
console = Console()
err_console = Console(stderr=True, soft_wrap=True)


# =============================================================================
# Common Typer Option Annotations
# =============================================================================

OutputOption = Annotated[
    OutputFormat | None,
    typer.Option(
        "--output",
        "-o",
        help="Print the resolved objects as json, yaml or name instead of greeting them",
        case_sensitive=False,
    ),
]

NamespaceOption = Annotated[
    str | None,
    typer.Option(
        "--namespace",
        "-n",
        help="Kubernetes namespace (defaults to config, kubeconfig context or 'default')",
    ),
]

LabelSelectorOption = Annotated[
    str | None,
    typer.Option(
        "--selector",
        "-l",
        help="Selector (label query) to filter on, supports '=', '==', and '!='."
        "(e.g. -l key1=value1,key2=value2)",
    ),
]

AllOption = Annotated[
    bool,
    typer.Option(
        "--all",
        help="Select all resources in the namespace of the specified resource types",
    ),
]

FilenameOption = Annotated[
    list[str] | None,
    typer.Option(
        "--filename",
        "-f",
        help="Filename, directory, or '-' for stdin identifying the resource "
        "to print information about",
    ),
]

RecursiveOption = Annotated[
    bool,
    typer.Option(
        "--recursive",
        "-R",
        help="Process the directory used in -f, --filename recursively",
    ),
]

RecordOption = Annotated[
    bool,
    typer.Option(
        "--record",
        help="Record current command in the resource annotation",
    ),
]


# =============================================================================
# Error Handling
# =============================================================================


def handle_k8s_error(error: KubernetesError) -> None:
    """Handle Kubernetes errors with user-friendly output on stderr.

    Args:
        error: The Kubernetes error to handle.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, KubernetesConnectionError):
        err_console.print("[red]Error:[/red] Cannot connect to Kubernetes cluster")
        err_console.print(f"  {escape(error.message)}")
        if error.original_error:
            err_console.print(f"  Cause: {escape(str(error.original_error))}")
        err_console.print(
            "\n[dim]Hint: Check that your kubeconfig is valid and the cluster is reachable.[/dim]"
        )

    elif isinstance(error, ConfigurationError):
        err_console.print(f"[red]Error:[/red] {escape(error.message)}")
        err_console.print(
            "\n[dim]Hint: Check your kubeconfig, KHELLO_K8S_* variables "
            "and ~/.config/khello/config.yaml.[/dim]"
        )

    elif isinstance(error, KubernetesAuthError):
        err_console.print("[red]Error:[/red] Authentication/authorization failed")
        err_console.print(f"  {escape(error.message)}")
        err_console.print("\n[dim]Hint: Check your credentials, token, or RBAC permissions.[/dim]")

    elif isinstance(error, PerItemVisitError):
        for item_error in error.errors:
            err_console.print(f"[red]Error:[/red] {escape(str(item_error))}")

    elif isinstance(error, (ResolutionError, NoObjectsError, KubernetesNotFoundError)):
        err_console.print(f"[red]Error:[/red] {escape(str(error))}")

    else:
        err_console.print(f"[red]Error:[/red] {escape(error.message)}")
        if error.status_code:
            err_console.print(f"  HTTP Status: {error.status_code}")

    raise typer.Exit(1)
