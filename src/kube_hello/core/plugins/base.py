"""pluggy hooks that khello plugins implement.

A plugin receives its ``plugins.<name>`` configuration section, adds its
commands to the root Typer app and releases whatever it opened on exit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    import typer

PROJECT_NAME = "kube_hello"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class KhelloHookSpec:
    """Hooks called by :class:`~kube_hello.core.plugins.manager.PluginManager`."""

    @hookspec
    def initialize(self, config: dict[str, Any]) -> None:
        """Receive the plugin's configuration section."""

    @hookspec
    def register_commands(self, app: typer.Typer) -> None:
        """Add the plugin's commands to ``app``."""

    @hookspec
    def cleanup(self) -> None:
        """Release clients and other resources."""


class Plugin:
    """Base class for khello plugins.

    Subclasses set ``name`` (also the configuration section key) and
    ``version``, and override :meth:`on_initialize` and ``register_commands``.
    """

    name: str = ""
    version: str = ""
    description: str = ""

    def __init__(self) -> None:
        missing = [attr for attr in ("name", "version") if not getattr(self, attr)]
        if missing:
            raise ValueError(
                f"{type(self).__name__} must set class attribute(s): {', '.join(missing)}"
            )
        self._config: dict[str, Any] = {}
        self._initialized = False

    @hookimpl
    def initialize(self, config: dict[str, Any]) -> None:
        self._config = dict(config)
        self._initialized = True
        self.on_initialize()

    def on_initialize(self) -> None:
        """Run after the configuration section has been stored."""

    @hookimpl
    def register_commands(self, app: typer.Typer) -> None:
        pass

    @hookimpl
    def cleanup(self) -> None:
        self._initialized = False

    @property
    def config(self) -> dict[str, Any]:
        """The plugin's configuration section, empty until initialized."""
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._initialized
