"""Hello plugin: hello-world and hello-kubernetes commands."""

from kube_hello.plugins.hello.plugin import HelloPlugin

__all__ = ["HelloPlugin"]
