"""Tests for metrics helpers."""
from __future__ import annotations

from typing import Any, Dict

from dayplanner.observability import metrics
from dayplanner.observability import tracing


class _DummyTrace:
    def __init__(self, name: str, metadata: Dict[str, Any]):
        self.name = name
        self.metadata = metadata
        self.ended = False
        self.errors: list[Dict[str, Any]] = []

    def update(self, error_info: Dict[str, Any] | None = None, **_: Any) -> None:
        if error_info:
            self.errors.append(error_info)

    def end(self) -> None:
        self.ended = True


class _DummyClient:
    def __init__(self):
        self.traces: list[_DummyTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        trace = _DummyTrace(name, metadata or {})
        self.traces.append(trace)
        return trace


def test_log_metric_closes_trace(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    metrics.log_metric("schedule.merge.changed", 1, metadata={"day": "Monday"})

    assert dummy_client.traces, "Metric call should record a trace"
    recorded = dummy_client.traces[0]
    assert recorded.name == "metric:schedule.merge.changed"
    assert recorded.metadata["value"] == 1
    assert recorded.metadata["day"] == "Monday"
    assert recorded.ended is True


def test_trace_records_errors_and_reraises(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    try:
        with tracing.trace("schedule.custom_block", metadata={"text": "10 - 9", "skip": None}, user_id="u1"):
            raise ValueError("End time must be after start time.")
    except ValueError:
        pass
    else:  # pragma: no cover
        raise AssertionError("trace() must re-raise")

    recorded = dummy_client.traces[0]
    assert recorded.metadata == {"text": "10 - 9", "user_id": "u1"}
    assert recorded.errors[0]["type"] == "ValueError"
    assert recorded.ended is True


def test_metrics_are_noops_without_client(monkeypatch) -> None:
    monkeypatch.setattr(tracing, "get_opik_client", lambda: None)

    metrics.log_metric("schedule.load.corrupt", 1)
