"""Change-cause recording for commands that mutate objects.

The hello commands never mutate anything, so the recorder is built and
carried for parity with mutating commands but only ever annotates in memory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from kube_hello.integrations.kubernetes.exceptions import ConfigurationError

CHANGE_CAUSE_ANNOTATION = "kubernetes.io/change-cause"


class Recorder(Protocol):
    """Records the command that caused a change on an object."""

    def record(self, obj: dict[str, Any]) -> None: ...


class NoopRecorder:
    """Recorder that records nothing."""

    def record(self, obj: dict[str, Any]) -> None:
        return None


class ChangeCauseRecorder:
    """Recorder writing the change cause into the object's annotations."""

    def __init__(self, change_cause: str) -> None:
        self.change_cause = change_cause

    def record(self, obj: dict[str, Any]) -> None:
        metadata = obj.setdefault("metadata", {})
        annotations = metadata.get("annotations") or {}
        annotations[CHANGE_CAUSE_ANNOTATION] = self.change_cause
        metadata["annotations"] = annotations


@dataclass
class RecordFlags:
    """The ``--record`` flag and the change cause it derives."""

    record: bool = False
    change_cause: str = ""

    def complete(self, command_path: str, args: list[str]) -> None:
        """Derive the change cause from the invoked command line."""
        self.change_cause = " ".join([command_path, *args]).strip()

    def to_recorder(self) -> Recorder:
        """Return the recorder selected by the flags.

        Raises:
            ConfigurationError: If recording was requested without a change cause.
        """
        if not self.record:
            return NoopRecorder()
        if not self.change_cause:
            raise ConfigurationError("--record requires a command line to record")
        return ChangeCauseRecorder(self.change_cause)
