"""Correlation ids shared by every log line of one caller's work.

An HTTP request or a direct action call opens a ``correlation_scope``; the id
is visible through ``current_correlation_id()`` and bound to loguru for the
duration of the scope. Scopes nest: leaving an inner scope restores the outer
id instead of clearing it.
"""

import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar

from loguru import logger

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def current_correlation_id() -> str | None:
    """Correlation id of the enclosing scope, if any."""
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Generator[str]:
    """Run a block under a correlation id.

    Args:
        correlation_id: Id supplied by the caller. A fresh one is generated
            when absent or empty.

    Yields:
        str: The id in effect for the block.
    """
    active = correlation_id or str(uuid.uuid4())
    token = _correlation_id.set(active)
    try:
        with logger.contextualize(correlation_id=active):
            yield active
    finally:
        _correlation_id.reset(token)


def new_error_id() -> str:
    """Identifier of a single error response, e.g. ``req-<uuid4>``."""
    return f"req-{uuid.uuid4()}"
