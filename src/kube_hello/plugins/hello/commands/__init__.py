"""Hello CLI command modules."""

from kube_hello.plugins.hello.commands.hello_kubernetes import (
    register_hello_kubernetes_command,
)
from kube_hello.plugins.hello.commands.hello_world import register_hello_world_command

__all__ = [
    "register_hello_kubernetes_command",
    "register_hello_world_command",
]
