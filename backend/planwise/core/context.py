"""Request-scoped values shared by logging and tracing."""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_request_id: ContextVar[Optional[str]] = ContextVar("planwise_request_id", default=None)


def get_request_id() -> Optional[str]:
    """Id of the request being served, or None outside a request."""
    return _request_id.get()


@contextmanager
def request_scope(request_id: str) -> Iterator[str]:
    """Bind ``request_id`` for log records and traces opened inside the block."""
    token = _request_id.set(request_id)
    try:
        yield request_id
    finally:
        _request_id.reset(token)
