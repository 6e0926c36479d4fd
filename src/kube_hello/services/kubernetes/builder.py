"""Kubernetes resource builder.

Turns command-line style resource references (files, ``TYPE NAME...``,
``TYPE/NAME`` and label selectors) into an ordered, error tolerant
sequence of resolved objects. Files are parsed locally; type arguments are
resolved through API discovery and fetched with the dynamic client.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kube_hello.integrations.kubernetes.exceptions import (
    KubernetesError,
    PerItemVisitError,
    ResolutionError,
)
from kube_hello.logging.config import get_logger
from kube_hello.services.kubernetes import meta
from kube_hello.services.kubernetes.selector import (
    Requirement,
    matches_labels,
    parse_selector,
)

if TYPE_CHECKING:
    from kube_hello.integrations.kubernetes.client import KubernetesClient

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

FILE_EXTENSIONS = (".json", ".yaml", ".yml")
STDIN_FILENAME = "-"
STDIN_SOURCE = "STDIN"
CLUSTER_SOURCE = "cluster"
ALL_CATEGORY = "all"

# Kinds that never carry a namespace when read from files
CLUSTER_SCOPED_KINDS = frozenset(
    {
        "APIService",
        "ClusterIssuer",
        "ClusterRole",
        "ClusterRoleBinding",
        "CustomResourceDefinition",
        "IngressClass",
        "MutatingWebhookConfiguration",
        "Namespace",
        "Node",
        "PersistentVolume",
        "PriorityClass",
        "StorageClass",
        "ValidatingWebhookConfiguration",
    }
)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class FilenameOptions:
    """File inputs for a builder query."""

    filenames: list[str] = field(default_factory=list)
    recursive: bool = False


@dataclass
class ResourceInfo:
    """A single resolved object and where it came from."""

    name: str
    namespace: str | None
    source: str
    object: Any

    @property
    def kind(self) -> str:
        """Return the object's kind."""
        return meta.kind(self.object)


VisitFunc = Callable[[ResourceInfo | None, KubernetesError | None], None]
VisitItem = tuple[ResourceInfo | None, KubernetesError | None]


class Result:
    """Outcome of :meth:`ResourceBuilder.do`.

    Holds either a query error or a sequence of per-item results, each
    carrying a resolved :class:`ResourceInfo` or the error that prevented
    resolving it.
    """

    def __init__(
        self,
        items: list[VisitItem],
        error: KubernetesError | None = None,
        *,
        continue_on_error: bool = False,
    ) -> None:
        self._items = items
        self._error = error
        self._continue_on_error = continue_on_error

    def err(self) -> KubernetesError | None:
        """Return the error that prevented the query from running, if any."""
        return self._error

    def __iter__(self) -> Iterator[VisitItem]:
        return iter(self._items)

    def visit(self, fn: VisitFunc) -> None:
        """Call *fn* with every ``(info, error)`` pair in order.

        Errors raised by *fn* stop the visit immediately unless the query
        was built with continue-on-error, in which case the remaining items
        are still visited and the collected errors are raised together.

        Raises:
            KubernetesError: The query error, or the first error raised by *fn*.
            PerItemVisitError: Errors collected under continue-on-error.
        """
        if self._error is not None:
            raise self._error

        errors: list[Exception] = []
        for info, item_error in self._items:
            try:
                fn(info, item_error)
            except KubernetesError as e:
                if not self._continue_on_error:
                    raise
                errors.append(e)
        if errors:
            raise PerItemVisitError(errors)

    def infos(self) -> list[ResourceInfo]:
        """Return every resolved object, raising on any item error."""
        collected: list[ResourceInfo] = []

        def _collect(info: ResourceInfo | None, error: KubernetesError | None) -> None:
            if error is not None:
                raise error
            if info is not None:
                collected.append(info)

        self.visit(_collect)
        return collected


# ---------------------------------------------------------------------------
# ResourceBuilder
# ---------------------------------------------------------------------------


class ResourceBuilder:
    """Fluent builder resolving resource references into a :class:`Result`.

    Example:
        >>> result = (
        ...     client.new_builder()
        ...     .unstructured()
        ...     .continue_on_error()
        ...     .namespace_param("default")
        ...     .default_namespace()
        ...     .resource_type_or_name_args(False, "pods", "web")
        ...     .flatten()
        ...     .do()
        ... )
    """

    def __init__(self, client: KubernetesClient) -> None:
        self._client = client
        self._log = get_logger(__name__, entity="builder")
        self._unstructured = False
        self._continue_on_error = False
        self._namespace = ""
        self._default_namespace = False
        self._require_namespace = False
        self._paths: list[str] = []
        self._recursive = False
        self._types: list[str] = []
        self._names: list[str] = []
        self._tuples: list[tuple[str, str]] = []
        self._select_all = False
        self._flatten = False
        self._selector: str | None = None
        self._errors: list[KubernetesError] = []
        self._api_resources: list[Any] | None = None

    # -----------------------------------------------------------------------
    # Query construction
    # -----------------------------------------------------------------------

    def unstructured(self) -> ResourceBuilder:
        """Return cluster objects as plain dicts instead of ResourceInstances."""
        self._unstructured = True
        return self

    def continue_on_error(self) -> ResourceBuilder:
        """Keep visiting remaining items when one of them fails."""
        self._continue_on_error = True
        return self

    def namespace_param(self, namespace: str) -> ResourceBuilder:
        """Set the namespace to query and to assign to namespaceless objects."""
        self._namespace = namespace
        return self

    def default_namespace(self) -> ResourceBuilder:
        """Assign the builder namespace to file objects that set none."""
        self._default_namespace = True
        return self

    def filename_param(
        self, enforce_namespace: bool, options: FilenameOptions | None
    ) -> ResourceBuilder:
        """Read objects from files, directories or stdin (``-``).

        Args:
            enforce_namespace: Reject objects whose namespace differs from
                the builder namespace.
            options: Paths and recursion setting.
        """
        if options is None:
            return self
        self._paths.extend(options.filenames)
        self._recursive = options.recursive
        if enforce_namespace:
            self._require_namespace = True
        return self

    def resource_type_or_name_args(
        self, allow_empty_selector: bool, *args: str
    ) -> ResourceBuilder:
        """Interpret positional ``TYPE NAME...`` or ``TYPE/NAME...`` arguments.

        Args:
            allow_empty_selector: Select every object of the given types
                when no names are passed (``--all``).
            args: Positional command arguments.
        """
        args = tuple(a for a in args if a)
        if not args:
            return self

        if any("/" in a for a in args):
            if not all("/" in a for a in args):
                self._errors.append(
                    ResolutionError(
                        "there is no need to specify a resource type as a separate argument "
                        "when passing arguments in resource/name form "
                        "(e.g. 'khello hello-kubernetes resource/<resource_name>' instead of "
                        "'khello hello-kubernetes resource resource/<resource_name>')"
                    )
                )
                return self
            for arg in args:
                resource_type, _, name = arg.partition("/")
                if not resource_type or not name or "/" in name:
                    self._errors.append(
                        ResolutionError(
                            "arguments in resource/name form must have "
                            f"a single resource and name: {arg!r}"
                        )
                    )
                    return self
                self._tuples.append((resource_type, name))
            return self

        types = [t.strip() for t in args[0].split(",")]
        if any(not t for t in types):
            self._errors.append(ResolutionError(f"invalid resource type list: {args[0]!r}"))
            return self
        self._types.extend(types)
        self._names.extend(args[1:])
        if not self._names and allow_empty_selector:
            self._select_all = True
        return self

    def flatten(self) -> ResourceBuilder:
        """Expand list objects into their individual items."""
        self._flatten = True
        return self

    def label_selector_param(self, selector: str | None) -> ResourceBuilder:
        """Filter resolved objects by a label selector."""
        selector = (selector or "").strip()
        if selector:
            self._selector = selector
        return self

    # -----------------------------------------------------------------------
    # Execution
    # -----------------------------------------------------------------------

    def do(self) -> Result:
        """Execute the query.

        Returns:
            A :class:`Result`; query level failures are reported through
            ``Result.err()`` rather than raised.
        """
        if self._errors:
            return Result([], self._errors[0], continue_on_error=self._continue_on_error)

        try:
            requirements = parse_selector(self._selector)
            items = self._visitor_result(requirements)
        except KubernetesError as e:
            self._log.debug("resource_query_failed", error=str(e))
            return Result([], e, continue_on_error=self._continue_on_error)

        self._log.debug(
            "resources_resolved",
            count=sum(1 for info, _ in items if info is not None),
            errors=sum(1 for _, err in items if err is not None),
            namespace=self._namespace,
        )
        return Result(items, continue_on_error=self._continue_on_error)

    def _visitor_result(self, requirements: list[Requirement]) -> list[VisitItem]:
        has_args = bool(self._types or self._tuples)

        if self._paths and has_args:
            raise ResolutionError(
                "when paths or stdin is provided as input, "
                "you may not specify resource arguments as well"
            )
        if self._names and self._selector:
            raise ResolutionError("name cannot be provided when a selector is specified")
        if self._tuples and (self._selector or self._select_all):
            raise ResolutionError(
                "selectors and the all flag cannot be used when passing resource/name arguments"
            )

        if self._paths:
            return self._visit_by_paths(requirements)
        if self._tuples:
            return self._visit_by_tuples()
        if self._types:
            if self._names:
                return self._visit_by_name()
            if self._selector or self._select_all:
                return self._visit_by_selector()
            raise ResolutionError("resource(s) were provided, but no name was specified")
        raise ResolutionError("You must provide one or more resources by argument or filename.")

    # -----------------------------------------------------------------------
    # Files
    # -----------------------------------------------------------------------

    def _visit_by_paths(self, requirements: list[Requirement]) -> list[VisitItem]:
        sources: list[tuple[str, Path | None]] = []
        for raw_path in self._paths:
            if raw_path == STDIN_FILENAME:
                sources.append((STDIN_SOURCE, None))
                continue
            path = Path(raw_path)
            if not path.exists():
                raise ResolutionError(f'the path "{raw_path}" does not exist')
            sources.extend((str(f), f) for f in self._expand_path(path))

        items: list[VisitItem] = []
        for label, file_path in sources:
            try:
                if file_path is None:
                    content = sys.stdin.read()
                else:
                    content = file_path.read_text(encoding="utf-8")
            except OSError as e:
                error = ResolutionError(f"error reading {label}: {e}", original_error=e)
                items.append((None, error))
                continue
            items.extend(self._load_source(label, content, requirements))
        return items

    def _expand_path(self, path: Path) -> list[Path]:
        """Expand a directory into its manifest files, sorted for determinism."""
        if not path.is_dir():
            return [path]
        candidates = path.rglob("*") if self._recursive else path.iterdir()
        return sorted(p for p in candidates if p.is_file() and p.suffix in FILE_EXTENSIONS)

    def _load_source(
        self, label: str, content: str, requirements: list[Requirement]
    ) -> list[VisitItem]:
        """Parse a YAML or JSON stream into visit items."""
        from ruamel.yaml import YAML
        from ruamel.yaml.error import YAMLError

        yaml = YAML(typ="safe")
        try:
            documents = list(yaml.load_all(content))
        except YAMLError as e:
            return [(None, ResolutionError(f"error parsing {label}: {e}", original_error=e))]

        items: list[VisitItem] = []
        for doc in documents:
            if doc is None:
                continue
            if not isinstance(doc, dict):
                items.append(
                    (None, ResolutionError(f"error parsing {label}: document is not an object"))
                )
                continue
            for obj in self._flatten_object(doc) if self._flatten else [doc]:
                item = self._file_item(obj, label, requirements)
                if item is not None:
                    items.append(item)
        return items

    @classmethod
    def _flatten_object(cls, obj: dict[str, Any]) -> list[dict[str, Any]]:
        """Expand ``*List`` objects into their items, recursively."""
        kind = obj.get("kind")
        items = obj.get("items")
        if not (isinstance(kind, str) and kind.endswith("List") and isinstance(items, list)):
            return [obj]

        flattened: list[dict[str, Any]] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            item = dict(item)
            if kind != "List":
                item.setdefault("kind", kind.removesuffix("List"))
                item.setdefault("apiVersion", obj.get("apiVersion"))
            flattened.extend(cls._flatten_object(item))
        return flattened

    def _file_item(
        self, obj: dict[str, Any], label: str, requirements: list[Requirement]
    ) -> VisitItem | None:
        """Build a visit item for a file object, or None when filtered out."""
        try:
            kind = meta.kind(obj)
            if not kind:
                raise ResolutionError(f"Object 'Kind' is missing in '{label}'")
            if requirements and not matches_labels(requirements, meta.labels(obj)):
                return None
            name = meta.name(obj)
            namespace = meta.namespace(obj)
        except KubernetesError as e:
            return None, e

        if kind not in CLUSTER_SCOPED_KINDS:
            if self._require_namespace and namespace and namespace != self._namespace:
                return None, ResolutionError(
                    f'the namespace from the provided object "{namespace}" does not match '
                    f'the namespace "{self._namespace}". '
                    f"You must pass '--namespace={namespace}' to perform this operation."
                )
            if namespace is None and (self._default_namespace or self._require_namespace):
                namespace = self._namespace or None
        else:
            namespace = None

        return ResourceInfo(name=name, namespace=namespace, source=label, object=obj), None

    # -----------------------------------------------------------------------
    # Cluster
    # -----------------------------------------------------------------------

    def _discover(self) -> list[Any]:
        """Return listable API resources from discovery, cached per builder."""
        if self._api_resources is None:
            try:
                found = self._client.dynamic.resources.search()
            except Exception as e:
                raise self._client.translate_api_exception(e) from e
            self._api_resources = [
                r for r in found if getattr(r, "verbs", None) and "/" not in (r.name or "")
            ]
        return self._api_resources

    @staticmethod
    def _aliases(resource: Any) -> set[str]:
        aliases = {resource.name, getattr(resource, "singular_name", None), resource.kind}
        aliases.update(getattr(resource, "short_names", None) or [])
        return {a.lower() for a in aliases if a}

    def _resolve_type(self, token: str) -> list[Any]:
        """Map a type argument (``pods``, ``po``, ``deployments.apps``) to API resources.

        Raises:
            ResolutionError: If discovery knows no matching resource.
        """
        token = token.strip().lower()
        discovered = self._discover()

        if token == ALL_CATEGORY:
            seen: set[tuple[str, str]] = set()
            expanded = []
            for resource in discovered:
                key = (resource.group or "", resource.kind)
                categories = getattr(resource, "categories", None) or []
                if ALL_CATEGORY in categories and key not in seen:
                    seen.add(key)
                    expanded.append(resource)
            return expanded

        resource_name, _, group = token.partition(".")
        matches = [
            r
            for r in discovered
            if resource_name in self._aliases(r)
            and (not group or (r.group or "") == group or (r.group or "").startswith(f"{group}."))
        ]
        if not matches:
            raise ResolutionError(f'the server doesn\'t have a resource type "{token}"')

        # Preferred versions first, then the core group
        matches.sort(key=lambda r: (not getattr(r, "preferred", False), bool(r.group)))
        return [matches[0]]

    def _resolve_single(self, token: str) -> Any:
        resources = self._resolve_type(token)
        if len(resources) != 1:
            raise ResolutionError("you may only specify a single resource type")
        return resources[0]

    def _visit_by_name(self) -> list[VisitItem]:
        if len(self._types) > 1:
            raise ResolutionError("you may only specify a single resource type")
        resource = self._resolve_single(self._types[0])
        return [self._get_item(resource, name) for name in self._names]

    def _visit_by_tuples(self) -> list[VisitItem]:
        resolved = [(self._resolve_single(t), name) for t, name in self._tuples]
        return [self._get_item(resource, name) for resource, name in resolved]

    def _visit_by_selector(self) -> list[VisitItem]:
        resources = [r for token in self._types for r in self._resolve_type(token)]
        items: list[VisitItem] = []
        for resource in resources:
            items.extend(self._list_items(resource))
        return items

    def _namespace_for(self, resource: Any) -> str | None:
        return (self._namespace or None) if getattr(resource, "namespaced", False) else None

    @staticmethod
    def _group_version(resource: Any) -> str:
        group = getattr(resource, "group", "") or ""
        return f"{group}/{resource.api_version}" if group else resource.api_version

    def _call(self, resource: Any, name: str | None = None, **kwargs: Any) -> Any:
        """Invoke ``resource.get`` with retries and error translation."""

        @self._client.make_retry_decorator()
        def _get() -> Any:
            try:
                return resource.get(name=name, _request_timeout=self._client.timeout, **kwargs)
            except Exception as e:
                raise self._client.translate_api_exception(
                    e,
                    resource_type=resource.kind,
                    resource_name=name,
                    namespace=kwargs.get("namespace"),
                ) from e

        return _get()

    def _get_item(self, resource: Any, name: str) -> VisitItem:
        namespace = self._namespace_for(resource)
        try:
            obj = self._call(resource, name=name, namespace=namespace)
        except KubernetesError as e:
            self._log.debug("resource_get_failed", kind=resource.kind, name=name, error=str(e))
            return None, e

        data = dict(meta.as_mapping(obj)) if self._unstructured else obj
        info = ResourceInfo(
            name=meta.name(data),
            namespace=namespace,
            source=CLUSTER_SOURCE,
            object=data,
        )
        return info, None

    def _list_items(self, resource: Any) -> list[VisitItem]:
        namespace = self._namespace_for(resource)
        kwargs: dict[str, Any] = {"namespace": namespace}
        if self._selector:
            kwargs["label_selector"] = self._selector
        try:
            listing = meta.as_mapping(self._call(resource, **kwargs))
        except KubernetesError as e:
            self._log.debug("resource_list_failed", kind=resource.kind, error=str(e))
            return [(None, e)]

        if not self._flatten:
            info = ResourceInfo(
                name="",
                namespace=namespace,
                source=CLUSTER_SOURCE,
                object=dict(listing),
            )
            return [(info, None)]

        items: list[VisitItem] = []
        for item in listing.get("items") or []:
            obj = dict(item)
            obj.setdefault("kind", resource.kind)
            obj.setdefault("apiVersion", self._group_version(resource))
            info = ResourceInfo(
                name=meta.name(obj),
                namespace=meta.namespace(obj) or namespace,
                source=CLUSTER_SOURCE,
                object=obj,
            )
            items.append((info, None))
        return items
