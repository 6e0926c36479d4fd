"""CLI command printing "Hello World"."""

from __future__ import annotations

import typer

from kube_hello.plugins.hello.commands.base import console


def register_hello_world_command(app: typer.Typer) -> None:
    """Register the hello-world command."""

    @app.command(
        "hello-world",
        context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    )
    def hello_world(ctx: typer.Context) -> None:
        """Print "Hello World".

        Any arguments are accepted and ignored.

        Examples:
            khello hello-world
        """
        console.out("Hello World", highlight=False)
