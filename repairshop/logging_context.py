"""Request token logging context for tracing availability loads.

The availability loader numbers every store query. While a load runs, its
token is held in a context variable and stamped onto log records as
``request_id`` (``REQ-<n>``), so lines from a superseded load can be told
apart from the one that ends up on screen.

Usage:
    logger = get_request_logger(__name__)
    with request_scope(7):
        logger.info("Loading month")  # record.request_id == "REQ-7"
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

NO_REQUEST = "-"

_request_token: ContextVar[Optional[int]] = ContextVar("request_token", default=None)


def current_request() -> Optional[int]:
    """Token of the load running in this context, if any."""
    return _request_token.get()


def format_request_id(token: Optional[int]) -> str:
    return NO_REQUEST if token is None else f"REQ-{token}"


@contextmanager
def request_scope(token: int) -> Iterator[None]:
    """Attach ``token`` to log records emitted inside the block."""
    reset = _request_token.set(token)
    try:
        yield
    finally:
        _request_token.reset(reset)


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = format_request_id(_request_token.get())  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    """Return a logger that adds ``request_id`` to each record.

    Formatters can then include ``%(request_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
