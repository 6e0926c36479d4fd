"""Plugin system built on pluggy."""

from kube_hello.core.plugins.base import KhelloHookSpec, Plugin, hookimpl, hookspec
from kube_hello.core.plugins.manager import PluginManager

__all__ = ["KhelloHookSpec", "Plugin", "PluginManager", "hookimpl", "hookspec"]
