"""Kubernetes service module.

Provides resource resolution (builder, selectors) and read-only object
metadata access for the hello commands.
"""

from kube_hello.services.kubernetes.builder import (
    FilenameOptions,
    ResourceBuilder,
    ResourceInfo,
    Result,
)

__all__ = [
    "FilenameOptions",
    "ResourceBuilder",
    "ResourceInfo",
    "Result",
]
