"""
Application layer: background execution of client calls.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable


class ViewScope:
    """Marks whether the view that issued a call still wants its result."""

    def __init__(self, name: str = "view"):
        self.name = name
        self._active = threading.Event()
        self._active.set()

    @property
    def active(self) -> bool:
        return self._active.is_set()

    def close(self) -> None:
        self._active.clear()

    def __enter__(self) -> ViewScope:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class Dispatcher:
    """Runs calls off the caller's thread and drops results for closed scopes.

    In-flight calls are never cancelled; only their callbacks are skipped.
    """

    def __init__(self, max_workers: int = 4):
        self.logger = logging.getLogger(__name__)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="demandhub"
        )

    def submit(
        self,
        fn: Callable[..., Any],
        scope: ViewScope,
        on_result: Callable[[Any], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
        *args: Any,
        **kwargs: Any,
    ) -> Future:
        """Schedule fn(*args, **kwargs); callbacks run only if scope is active."""
        future = self._executor.submit(fn, *args, **kwargs)

        def deliver(done: Future) -> None:
            if not scope.active:
                self.logger.debug("Dropping stale result for %s", scope.name)
                return
            error = done.exception()
            if error is None:
                if on_result:
                    on_result(done.result())
            elif isinstance(error, Exception) and on_error:
                on_error(error)
            else:
                self.logger.error("Unhandled error in %s", scope.name, exc_info=error)

        future.add_done_callback(deliver)
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
        self.logger.info("Dispatcher stopped")
