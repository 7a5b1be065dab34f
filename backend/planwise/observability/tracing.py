"""Tracing utilities wrapping Opik."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

from planwise.core.context import get_request_id
from planwise.observability import client as opik_client

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from opik.api_objects.trace.trace_client import Trace
else:  # pragma: no cover - typing helper
    Trace = object  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def _start_trace(name: str, metadata: Dict[str, Any]) -> Optional["Trace"]:
    client = opik_client.get_opik_client()
    if not client:
        return None
    try:
        return client.trace(name=name, metadata=metadata or None)
    except Exception as exc:  # pragma: no cover - defensive guard
        logger.debug("Unable to start Opik trace %s: %s", name, exc)
        return None


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional["Trace"]]:
    """
    Open an Opik trace around a block of plan-pipeline work.

    Yields None when Opik is disabled so callers can guard updates with
    ``if span:``. Exceptions raised inside the block are recorded on the
    trace and re-raised unchanged. ``request_id`` defaults to the id bound
    by the request middleware.
    """
    trace_metadata = dict(metadata or {})
    if user_id:
        trace_metadata.setdefault("user_id", str(user_id))
    request_id = request_id or get_request_id()
    if request_id:
        trace_metadata.setdefault("request_id", request_id)
    opik_trace = _start_trace(name, trace_metadata)

    try:
        yield opik_trace
    except Exception as exc:
        if opik_trace:
            try:
                opik_trace.update(error_info={"message": str(exc), "type": type(exc).__name__})
            except Exception:  # pragma: no cover
                logger.debug("Failed to attach error info to Opik trace %s", name, exc_info=True)
        raise
    finally:
        if opik_trace:
            try:
                opik_trace.end()
            except Exception:  # pragma: no cover
                logger.debug("Failed to close Opik trace %s cleanly", name, exc_info=True)


def annotate(opik_trace: Optional["Trace"], **metadata: Any) -> None:
    """Attach extra metadata to an open trace, ignoring disabled tracing."""
    if not opik_trace:
        return
    try:
        opik_trace.update(metadata=metadata)
    except Exception:  # pragma: no cover - defensive
        logger.debug("Failed to annotate Opik trace", exc_info=True)
