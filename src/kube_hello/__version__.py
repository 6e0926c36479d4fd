"""Version information for kube_hello."""

__version__ = "0.1.0"
