"""Plugin registry for the khello CLI."""

from __future__ import annotations

import importlib.metadata
from typing import TYPE_CHECKING, Any

import pluggy
import structlog

from kube_hello.core.plugins.base import PROJECT_NAME, KhelloHookSpec, Plugin

if TYPE_CHECKING:
    import typer

logger = structlog.get_logger()


class PluginManager:
    """Registers built-in and entry point plugins and drives their hooks.

    Built-in plugins are registered directly, so the CLI works from a source
    checkout without installed metadata. Entry points in
    :attr:`ENTRY_POINT_GROUP` add further plugins; a name that is already
    registered is never replaced.
    """

    ENTRY_POINT_GROUP = "kube_hello.plugins"

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(KhelloHookSpec)
        self._plugins: dict[str, Plugin] = {}

    def register(self, plugin: Plugin) -> bool:
        """Register a plugin instance.

        Returns:
            False if a plugin with the same name was already registered.
        """
        if plugin.name in self._plugins:
            logger.debug("plugin_already_registered", name=plugin.name)
            return False
        self._pm.register(plugin, name=plugin.name)
        self._plugins[plugin.name] = plugin
        logger.debug("plugin_registered", name=plugin.name, version=plugin.version)
        return True

    def load_entry_points(self) -> list[str]:
        """Load and register every plugin advertised through entry points.

        A plugin that fails to import is logged and skipped.

        Returns:
            Names of the plugins loaded by this call.
        """
        try:
            entry_points = importlib.metadata.entry_points(group=self.ENTRY_POINT_GROUP)
        except Exception as e:
            logger.warning("plugin_discovery_failed", error=str(e))
            return []

        loaded: list[str] = []
        for ep in entry_points:
            if ep.name in self._plugins:
                continue
            try:
                target = ep.load()
                plugin = target() if isinstance(target, type) else target
            except Exception as e:
                logger.error("plugin_load_failed", name=ep.name, value=ep.value, error=str(e))
                continue
            if self.register(plugin):
                loaded.append(plugin.name)
        return loaded

    def initialize_all(self, config: dict[str, Any]) -> None:
        """Hand each plugin its ``plugins.<name>`` section of ``config``."""
        sections = config.get("plugins") or {}
        for name, plugin in self._plugins.items():
            plugin.initialize(sections.get(name) or {})

    def register_commands(self, app: typer.Typer) -> None:
        self._pm.hook.register_commands(app=app)

    def cleanup_all(self) -> None:
        try:
            self._pm.hook.cleanup()
        except Exception as e:
            logger.error("plugin_cleanup_failed", error=str(e))

    def get_plugin(self, name: str) -> Plugin | None:
        return self._plugins.get(name)

    @property
    def plugin_names(self) -> list[str]:
        """Names of registered plugins in registration order."""
        return list(self._plugins)
