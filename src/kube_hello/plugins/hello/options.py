"""Options and execution for the hello-kubernetes command.

The command runs in three steps: :meth:`HelloKubernetesOptions.complete`
derives everything that depends on the environment, ``validate`` checks the
options and ``run`` resolves resources and greets each of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog
from rich.console import Console

from kube_hello.integrations.kubernetes.exceptions import (
    KubernetesError,
    NoObjectsError,
)
from kube_hello.plugins.hello.printers import ResourcePrinter, get_printer
from kube_hello.plugins.hello.recorder import NoopRecorder, RecordFlags, Recorder
from kube_hello.services.kubernetes import meta
from kube_hello.services.kubernetes.builder import FilenameOptions, ResourceInfo, Result

if TYPE_CHECKING:
    from kube_hello.integrations.kubernetes.client import KubernetesClient
    from kube_hello.services.kubernetes.builder import ResourceBuilder

logger = structlog.get_logger()


def format_greeting(obj: Any) -> str:
    """Return the greeting line for an object.

    Objects that only exist as local definitions have no creation
    timestamp and are greeted by kind and name alone.
    """
    kind = meta.kind(obj)
    name = meta.name(obj)
    created = meta.creation_timestamp(obj)
    if created is None:
        return f"Hello {kind} {name}"
    return f"Hello {kind} {name} {created}"


@dataclass
class HelloKubernetesOptions:
    """All options of the hello-kubernetes command."""

    filename_options: FilenameOptions = field(default_factory=FilenameOptions)
    record_flags: RecordFlags = field(default_factory=RecordFlags)
    output: str | None = None
    selector: str = ""
    all: bool = False
    namespace_override: str | None = None
    console: Console = field(default_factory=Console)

    # Populated by complete()
    recorder: Recorder = field(default_factory=NoopRecorder)
    printer: ResourcePrinter | None = None
    namespace: str = ""
    enforce_namespace: bool = False
    args: list[str] = field(default_factory=list)
    builder: ResourceBuilder | None = None

    def complete(
        self,
        client: KubernetesClient,
        args: list[str],
        command_path: str = "khello hello-kubernetes",
    ) -> None:
        """Derive recorder, printer, namespace and builder.

        Raises:
            ConfigurationError: If any of them cannot be set up.
        """
        self.record_flags.complete(command_path, args)
        self.recorder = self.record_flags.to_recorder()
        self.printer = get_printer(self.output or client.output_format, self.console)
        self.namespace, self.enforce_namespace = client.namespace(self.namespace_override)
        self.builder = client.new_builder()
        self.args = list(args)
        logger.debug(
            "hello_kubernetes_completed",
            context=client.get_current_context(),
            namespace=self.namespace,
            enforce_namespace=self.enforce_namespace,
            args=self.args,
        )

    def validate(self) -> None:
        """Validate the options. There are no constraints yet."""

    def run(self) -> int:
        """Resolve the requested resources and greet each of them.

        Returns:
            The number of objects printed.

        Raises:
            ResolutionError: If the query cannot be built.
            KubernetesError: If the API server cannot be reached or rejects
                the query, e.g. KubernetesAuthError.
            PerItemVisitError: If any resolved item carried an error; the
                healthy items are still printed first.
            NoObjectsError: If nothing was printed.
        """
        if self.builder is None:
            raise RuntimeError("complete() must be called before run()")

        result = (
            self.builder.unstructured()
            .continue_on_error()
            .namespace_param(self.namespace)
            .default_namespace()
            .filename_param(self.enforce_namespace, self.filename_options)
            .resource_type_or_name_args(self.all, *self.args)
            .flatten()
            .label_selector_param(self.selector)
            .do()
        )
        if (err := result.err()) is not None:
            raise err

        if self.printer is not None:
            return self._print_objects(result, self.printer)

        counter = 0

        def _greet(info: ResourceInfo | None, error: KubernetesError | None) -> None:
            nonlocal counter
            if error is not None:
                raise error
            if info is None:
                return
            self.console.out(format_greeting(info.object), highlight=False)
            logger.debug("greeted_resource", kind=info.kind, name=info.name, source=info.source)
            counter += 1

        result.visit(_greet)
        if counter == 0:
            raise NoObjectsError()
        return counter

    def _print_objects(self, result: Result, printer: ResourcePrinter) -> int:
        """Print resolved objects with a structured printer instead of greeting."""
        objects: list[Any] = []

        def _collect(info: ResourceInfo | None, error: KubernetesError | None) -> None:
            if error is not None:
                raise error
            if info is not None:
                objects.append(info.object)

        try:
            result.visit(_collect)
        finally:
            if objects:
                printer.print_obj(objects)
        if not objects:
            raise NoObjectsError()
        return len(objects)
