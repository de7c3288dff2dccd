"""Cache invalidation signal fired after successful mutations.

Page renderers cache views under opaque path keys. When a mutation changes
the data behind a view, the caller names that view's path and the executor
calls ``invalidate(path)`` once the change is committed. Listeners subscribed
to the invalidator receive the path unchanged.

The signal is fire-and-forget: ``invalidate`` returns nothing, and a listener
that raises is logged without affecting the action result or the other
listeners.
"""

from collections.abc import Callable

from loguru import logger

type InvalidationListener = Callable[[str], None]


def log_invalidation(path: str) -> None:
    """Default listener: record the stale path in the log."""
    logger.info("Invalidated cached view {}", path, invalidation_path=path)


class CacheInvalidator:
    """Fans invalidation paths out to subscribed listeners."""

    def __init__(self, listeners: list[InvalidationListener] | None = None) -> None:
        self._listeners: list[InvalidationListener] = list(listeners or [])

    @property
    def listeners(self) -> tuple[InvalidationListener, ...]:
        """Currently subscribed listeners."""
        return tuple(self._listeners)

    def subscribe(self, listener: InvalidationListener) -> Callable[[], None]:
        """Subscribe a listener.

        Args:
            listener: Called with each invalidated path.

        Returns:
            Callable[[], None]: Unsubscribes the listener when called.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def invalidate(self, path: str) -> None:
        """Notify every listener that ``path`` is stale."""
        for listener in list(self._listeners):
            try:
                listener(path)
            except Exception:  # noqa: BLE001 - listeners must not fail the action
                logger.opt(exception=True).warning(
                    "Invalidation listener {} failed for {}",
                    getattr(listener, "__name__", repr(listener)),
                    path,
                )


_invalidator = CacheInvalidator([log_invalidation])


def get_invalidator() -> CacheInvalidator:
    """Get the process-wide cache invalidator."""
    return _invalidator
