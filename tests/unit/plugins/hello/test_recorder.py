"""Unit tests for change-cause recording."""

from __future__ import annotations

from typing import Any

import pytest

from kube_hello.integrations.kubernetes.exceptions import ConfigurationError
from kube_hello.plugins.hello.recorder import (
    CHANGE_CAUSE_ANNOTATION,
    ChangeCauseRecorder,
    NoopRecorder,
    RecordFlags,
)


@pytest.mark.unit
class TestRecordFlags:
    """Tests for RecordFlags."""

    def test_default_is_noop(self) -> None:
        """Without --record nothing is recorded."""
        flags = RecordFlags()
        flags.complete("khello hello-kubernetes", ["pods", "web"])
        assert isinstance(flags.to_recorder(), NoopRecorder)

    def test_record_builds_change_cause(self) -> None:
        """The change cause is the invoked command line."""
        flags = RecordFlags(record=True)
        flags.complete("khello hello-kubernetes", ["pods", "web"])

        recorder = flags.to_recorder()

        assert isinstance(recorder, ChangeCauseRecorder)
        assert recorder.change_cause == "khello hello-kubernetes pods web"

    def test_record_without_cause_raises(self) -> None:
        """Recording needs a command line."""
        with pytest.raises(ConfigurationError, match="--record"):
            RecordFlags(record=True).to_recorder()


@pytest.mark.unit
class TestRecorders:
    """Tests for recorder implementations."""

    def test_change_cause_annotation(self) -> None:
        """The change cause is written into the annotations."""
        obj: dict[str, Any] = {"metadata": {"name": "web", "annotations": {"a": "b"}}}
        ChangeCauseRecorder("khello hello-kubernetes").record(obj)
        assert obj["metadata"]["annotations"] == {
            "a": "b",
            CHANGE_CAUSE_ANNOTATION: "khello hello-kubernetes",
        }

    def test_change_cause_without_metadata(self) -> None:
        """Objects without metadata get it created."""
        obj: dict[str, Any] = {}
        ChangeCauseRecorder("cause").record(obj)
        assert obj["metadata"]["annotations"][CHANGE_CAUSE_ANNOTATION] == "cause"

    def test_noop(self) -> None:
        """The no-op recorder leaves objects untouched."""
        obj: dict[str, Any] = {"metadata": {}}
        NoopRecorder().record(obj)
        assert obj == {"metadata": {}}
