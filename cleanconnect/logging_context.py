"""Request ID logging context for tracing a booking across modules.

Every record from a ``get_request_logger`` logger carries ``request_id``.
The orchestrator binds it to the booking id with ``request_scope`` once the
booking row exists, so the side steps and the provider fan-out started
inside that block (including tasks spawned by ``asyncio.gather``, which copy
the context) log under the same id. Leaving the block restores whatever id
was bound before.

Usage:
    from cleanconnect.logging_context import get_request_logger, request_scope

    logger = get_request_logger(__name__)
    with request_scope("bk_3f9a"):
        logger.info("Notifying providers")  # record.request_id == "bk_3f9a"
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

NO_REQUEST_ID = "NO_REQUEST_ID"

_request_id: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)


def set_request_id(request_id: str) -> None:
    """Bind the correlation ID for the rest of the current context."""
    _request_id.set(request_id)


def get_request_id() -> str:
    return _request_id.get()


@contextmanager
def request_scope(request_id: str) -> Iterator[str]:
    """Bind ``request_id`` for the duration of the block."""
    token = _request_id.set(request_id)
    try:
        yield request_id
    finally:
        _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Copies the bound request id onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)`` with a single RequestIdFilter attached."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
