"""Lightweight metrics helpers."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, Optional

from planwise.observability.tracing import trace

logger = logging.getLogger(__name__)


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a metric as a short-lived Opik trace; no-op when tracing is off."""
    payload: Dict[str, Any] = {"value": value}
    if metadata:
        payload.update(metadata)
    with trace(f"metric:{name}", metadata=payload):
        logger.debug("metric %s=%s", name, value)


@contextmanager
def timed(name: str, metadata: Optional[Dict[str, Any]] = None) -> Iterator[Dict[str, Any]]:
    """Emit ``<name>.latency_ms`` when the block exits, successful or not."""
    extra: Dict[str, Any] = dict(metadata or {})
    start = perf_counter()
    try:
        yield extra
    finally:
        log_metric(f"{name}.latency_ms", (perf_counter() - start) * 1000, metadata=extra)
