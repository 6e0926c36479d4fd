"""Main CLI entry point using Typer."""

from __future__ import annotations

from typing import Any

import structlog
import typer
from rich.console import Console

from kube_hello import __version__
from kube_hello.core.config import load_config
from kube_hello.core.plugins import PluginManager
from kube_hello.integrations.kubernetes.exceptions import ConfigurationError
from kube_hello.logging.config import configure_logging
from kube_hello.plugins.hello import HelloPlugin

app = typer.Typer(
    name="khello",
    help="Kubernetes hello commands: greet the world or your cluster's resources.",
    add_completion=True,
    no_args_is_help=True,
)

console = Console()
logger = structlog.get_logger()

plugin_manager = PluginManager()
plugin_manager.register(HelloPlugin())
plugin_manager.load_entry_points()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"khello version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
) -> None:
    """khello - greet the world or your Kubernetes resources."""
    configure_logging(verbose=verbose, debug=debug)

    config: dict[str, Any] = {}
    try:
        system_config = load_config()
    except ConfigurationError as e:
        logger.warning("config_load_failed", error=str(e))
    else:
        if system_config.debug and not debug:
            configure_logging(verbose=verbose, debug=True)
        config = system_config.model_dump()

    plugin_manager.initialize_all(config)
    ctx.call_on_close(plugin_manager.cleanup_all)


# Register plugin subcommands
plugin_manager.register_commands(app)


if __name__ == "__main__":
    app()
