"""Logging configuration for kube_hello."""

from kube_hello.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
