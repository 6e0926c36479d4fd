"""CLI command greeting Kubernetes resources.

Prints the kind, name and creation time of resources read from files or
fetched from the cluster by type, name and label selector.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated

import typer

from kube_hello.integrations.kubernetes.exceptions import KubernetesError
from kube_hello.plugins.hello.commands.base import (
    AllOption,
    FilenameOption,
    LabelSelectorOption,
    NamespaceOption,
    OutputOption,
    RecordOption,
    RecursiveOption,
    console,
    handle_k8s_error,
)
from kube_hello.plugins.hello.options import HelloKubernetesOptions
from kube_hello.plugins.hello.recorder import RecordFlags
from kube_hello.services.kubernetes.builder import FilenameOptions

if TYPE_CHECKING:
    from kube_hello.integrations.kubernetes.client import KubernetesClient

ResourceArgs = Annotated[
    list[str] | None,
    typer.Argument(
        metavar="[TYPE NAME... | TYPE/NAME...]",
        help="Resource type and names, or type/name pairs",
        show_default=False,
    ),
]


def register_hello_kubernetes_command(
    app: typer.Typer,
    get_client: Callable[[], KubernetesClient],
) -> None:
    """Register the hello-kubernetes command."""

    @app.command("hello-kubernetes", options_metavar="(-f FILENAME | TYPE NAME)")
    def hello_kubernetes(
        ctx: typer.Context,
        args: ResourceArgs = None,
        filenames: FilenameOption = None,
        recursive: RecursiveOption = False,
        selector: LabelSelectorOption = None,
        all_resources: AllOption = False,
        namespace: NamespaceOption = None,
        output: OutputOption = None,
        record: RecordOption = False,
    ) -> None:
        """Print information about a resource, either existing or from a file.

        Examples:
            # Get the type and name of a resource specified in "foo.yaml".
            khello hello-kubernetes -f foo.yaml

            # Get the type, name, and creation time of a pod named 'foo'.
            khello hello-kubernetes pod/foo

            # Get the type, name, and creation time of all resources with label app=hello.
            khello hello-kubernetes all -l app=hello
        """
        options = HelloKubernetesOptions(
            filename_options=FilenameOptions(filenames=list(filenames or []), recursive=recursive),
            record_flags=RecordFlags(record=record),
            output=output.value if output else None,
            selector=selector or "",
            all=all_resources,
            namespace_override=namespace,
            console=console,
        )

        try:
            options.complete(get_client(), list(args or []), command_path=ctx.command_path)
            options.validate()
            options.run()
        except KubernetesError as e:
            handle_k8s_error(e)
