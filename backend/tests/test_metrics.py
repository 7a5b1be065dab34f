"""Tests for metrics helpers."""
from __future__ import annotations

from typing import Any, Dict

import pytest

from planwise.observability import client as client_module
from planwise.observability import metrics


class _DummyTrace:
    def __init__(self, name: str, metadata: Dict[str, Any]):
        self.name = name
        self.metadata = metadata
        self.ended = False

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
    monkeypatch.setattr(client_module, "get_opik_client", lambda: dummy_client)

    metrics.log_metric("plan.apply.tasks_created", 3, metadata={"project_id": "p-1"})

    assert dummy_client.traces, "Metric call should record a trace"
    assert dummy_client.traces[0].name == "metric:plan.apply.tasks_created"
    assert dummy_client.traces[0].metadata["value"] == 3
    assert dummy_client.traces[0].metadata["project_id"] == "p-1"
    assert dummy_client.traces[0].ended is True


def test_timed_emits_latency_even_on_error(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(client_module, "get_opik_client", lambda: dummy_client)

    with pytest.raises(RuntimeError):
        with metrics.timed("plan.generate", {"mode": "full"}):
            raise RuntimeError("boom")

    latency = dummy_client.traces[-1]
    assert latency.name == "metric:plan.generate.latency_ms"
    assert latency.metadata["mode"] == "full"
    assert latency.metadata["value"] >= 0
