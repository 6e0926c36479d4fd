"""kube_hello - illustrative hello commands for a Kubernetes client tool."""

from kube_hello.__version__ import __version__

__all__ = ["__version__"]
