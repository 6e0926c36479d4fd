"""Read-only metadata accessors for unstructured Kubernetes objects."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from kube_hello.integrations.kubernetes.exceptions import AccessorError


def as_mapping(obj: Any) -> Mapping[str, Any]:
    """Return *obj* as a mapping.

    Accepts plain dicts and objects exposing ``to_dict()`` such as the
    dynamic client's ``ResourceInstance``.

    Raises:
        AccessorError: If the object has no mapping form.
    """
    if isinstance(obj, Mapping):
        return obj
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        data = to_dict()
        if isinstance(data, Mapping):
            return data
    raise AccessorError(f"{type(obj).__name__} is not a Kubernetes object")


def metadata(obj: Any) -> Mapping[str, Any]:
    """Return the object's metadata, or an empty mapping when absent."""
    meta = as_mapping(obj).get("metadata")
    if meta is None:
        return {}
    if not isinstance(meta, Mapping):
        raise AccessorError(f"metadata must be a mapping, got {type(meta).__name__}")
    return meta


def kind(obj: Any) -> str:
    """Return the object's kind, or an empty string when unset."""
    value = as_mapping(obj).get("kind") or ""
    if not isinstance(value, str):
        raise AccessorError(f"kind must be a string, got {type(value).__name__}")
    return value


def api_version(obj: Any) -> str:
    """Return the object's apiVersion, or an empty string when unset."""
    value = as_mapping(obj).get("apiVersion") or ""
    return str(value)


def name(obj: Any) -> str:
    """Return the object's name, or an empty string when unset."""
    value = metadata(obj).get("name") or ""
    if not isinstance(value, str):
        raise AccessorError(f"metadata.name must be a string, got {type(value).__name__}")
    return value


def namespace(obj: Any) -> str | None:
    """Return the object's namespace, or None when unset."""
    return metadata(obj).get("namespace") or None


def labels(obj: Any) -> Mapping[str, str]:
    """Return the object's labels."""
    value = metadata(obj).get("labels")
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise AccessorError(f"metadata.labels must be a mapping, got {type(value).__name__}")
    return value


def creation_timestamp(obj: Any) -> datetime | None:
    """Return the object's creation timestamp.

    None is the zero value: the object only exists as a local definition
    and has not been created on a cluster.

    Raises:
        AccessorError: If the timestamp is present but not parseable.
    """
    value = metadata(obj).get("creationTimestamp")
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if not isinstance(value, str):
        raise AccessorError(f"invalid creationTimestamp {value!r}")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise AccessorError(f"invalid creationTimestamp {value!r}") from e
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
