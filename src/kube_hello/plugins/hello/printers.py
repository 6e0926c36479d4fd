"""Structured printers for resolved objects.

Implements the Strategy pattern for ``--output``: the default greeting path
prints one line per object, while json, yaml and name printers write the
resolved objects themselves.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import StrEnum
from typing import Any

import yaml
from rich.console import Console

from kube_hello.integrations.kubernetes.exceptions import ConfigurationError
from kube_hello.services.kubernetes import meta

GREETING_FORMAT = "greeting"


class OutputFormat(StrEnum):
    """Supported structured output formats."""

    JSON = "json"
    YAML = "yaml"
    NAME = "name"


def _as_plain(obj: Any) -> Any:
    return dict(meta.as_mapping(obj))


def _as_document(objects: Sequence[Any]) -> Any:
    """Return a single object, or a v1 List wrapping several."""
    items = [_as_plain(o) for o in objects]
    if len(items) == 1:
        return items[0]
    return {"apiVersion": "v1", "kind": "List", "metadata": {}, "items": items}


class ResourcePrinter(ABC):
    """Abstract base class for resource printers."""

    def __init__(self, console: Console) -> None:
        self.console = console

    @abstractmethod
    def print_obj(self, objects: Sequence[Any]) -> None:
        """Print the resolved objects."""

    def write(self, text: str) -> None:
        """Write raw text without markup, highlighting or wrapping."""
        self.console.out(text, highlight=False)


class JsonPrinter(ResourcePrinter):
    """JSON printer."""

    def print_obj(self, objects: Sequence[Any]) -> None:
        self.write(json.dumps(_as_document(objects), indent=4, default=str))


class YamlPrinter(ResourcePrinter):
    """YAML printer."""

    def print_obj(self, objects: Sequence[Any]) -> None:
        document = yaml.safe_dump(
            json.loads(json.dumps(_as_document(objects), default=str)),
            default_flow_style=False,
            sort_keys=False,
        )
        self.write(document.rstrip("\n"))


class NamePrinter(ResourcePrinter):
    """Prints ``kind[.group]/name`` per object."""

    def print_obj(self, objects: Sequence[Any]) -> None:
        for obj in objects:
            self.write(self.resource_name(obj))

    @staticmethod
    def resource_name(obj: Any) -> str:
        """Return the ``kind[.group]/name`` form of an object."""
        group, _, _ = meta.api_version(obj).rpartition("/")
        kind = meta.kind(obj).lower()
        if group:
            kind = f"{kind}.{group}"
        return f"{kind}/{meta.name(obj)}"


_PRINTERS: dict[OutputFormat, type[ResourcePrinter]] = {
    OutputFormat.JSON: JsonPrinter,
    OutputFormat.YAML: YamlPrinter,
    OutputFormat.NAME: NamePrinter,
}


def get_printer(output: str | None, console: Console) -> ResourcePrinter | None:
    """Factory function returning the printer for an output format.

    Args:
        output: Output format; None or ``greeting`` selects the greeting path.
        console: Destination console.

    Returns:
        A printer, or None for the default greeting output.

    Raises:
        ConfigurationError: If the format is not supported.
    """
    if not output or output == GREETING_FORMAT:
        return None
    try:
        output_format = OutputFormat(output.lower())
    except ValueError as e:
        allowed = ", ".join(sorted(f.value for f in OutputFormat))
        raise ConfigurationError(
            f'unable to match a printer suitable for the output format "{output}", '
            f"allowed formats are: {allowed}",
            original_error=e,
        ) from e
    return _PRINTERS[output_format](console)
