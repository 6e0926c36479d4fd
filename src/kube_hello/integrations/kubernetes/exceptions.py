"""Exceptions raised while resolving and greeting Kubernetes resources.

Every error derives from :class:`KubernetesError`, which is what the command
layer catches. Subclasses only differ in their default message and status.
"""

from __future__ import annotations


class KubernetesError(Exception):
    """Base exception for Kubernetes operations.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code from the API server, if any.
        resource_type: Kind of the resource involved (e.g. "Pod").
        resource_name: Name of the resource involved.
        namespace: Namespace of the resource, if namespaced.
        original_error: The lower-level exception this one wraps.
    """

    default_message = "Kubernetes operation failed"
    default_status: int | None = None

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.status_code = status_code if status_code is not None else self.default_status
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.namespace = namespace
        self.original_error = original_error

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.resource_type and self.resource_name:
            where = f" in {self.namespace}" if self.namespace else ""
            parts.append(f"[{self.resource_type}/{self.resource_name}{where}]")
        return " ".join(parts)


class KubernetesConnectionError(KubernetesError):
    """The API server could not be reached or the kubeconfig could not be loaded."""

    default_message = "Failed to connect to Kubernetes cluster"


class KubernetesAuthError(KubernetesError):
    """The API server rejected the credentials (401) or the request (403)."""

    default_message = "Kubernetes authentication/authorization failed"
    default_status = 401

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.reason = reason


class KubernetesNotFoundError(KubernetesError):
    """A requested resource does not exist."""

    default_message = "Kubernetes resource not found"
    default_status = 404

    def __init__(
        self,
        message: str | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        if resource_type and resource_name:
            message = f"{resource_type} '{resource_name}' not found"
            if namespace:
                message += f" in namespace '{namespace}'"
        super().__init__(
            message,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class KubernetesValidationError(KubernetesError):
    """The API server refused a malformed request (400/422)."""

    default_message = "Invalid request"
    default_status = 422


class ConfigurationError(KubernetesError):
    """Command options could not be completed.

    Raised for unknown output formats, unusable ``--record`` settings,
    invalid plugin configuration and kubeconfig namespace lookups.
    """

    default_message = "Invalid configuration"


class ResolutionError(KubernetesError):
    """A resource query could not be built or executed.

    Examples are malformed selectors, unknown resource types, missing input
    files and conflicting argument forms.
    """

    default_message = "Unable to resolve resources"


class AccessorError(KubernetesError):
    """Object metadata could not be read."""

    default_message = "Unable to read object metadata"


class PerItemVisitError(KubernetesError):
    """One or more resolved items carried an error.

    ``errors`` holds them in visit order. A single error keeps its own
    message; several are joined in brackets.
    """

    def __init__(self, errors: list[Exception]) -> None:
        if len(errors) == 1:
            message = str(errors[0])
        else:
            message = "[" + ", ".join(str(e) for e in errors) + "]"
        super().__init__(message)
        self.errors = errors


class NoObjectsError(KubernetesError):
    """A query resolved no printable objects."""

    default_message = "no objects passed to kubernetes-hello"
