from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_WAIT_S = 0.5


@dataclass(frozen=True)
class _Pending:
    fn: Callable[..., Any]
    args: tuple
    kwargs: dict
    due: float


class DebouncedScheduler:
    """
    Coalesces bursts of recompute requests into one deferred call.

    Single-threaded: nothing runs on its own. The owner calls poll() from its
    event loop (or flush() when edits are known to have settled). A new
    request cancels whatever is pending; at most one task is ever held.
    """

    def __init__(self, wait_s: float = DEFAULT_WAIT_S, *, clock: Callable[[], float] = time.monotonic) -> None:
        if wait_s < 0:
            raise ValueError("wait_s must be >= 0")
        self.wait_s = float(wait_s)
        self._clock = clock
        self._pending: _Pending | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def request(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        if self._pending is not None:
            logger.debug("Superseding pending recompute request")
        self._pending = _Pending(fn=fn, args=args, kwargs=kwargs, due=self._clock() + self.wait_s)

    def cancel(self) -> None:
        self._pending = None

    def poll(self) -> tuple[bool, Any]:
        """Run the pending task if its quiet window has elapsed. Returns (ran, result)."""
        task = self._pending
        if task is None or self._clock() < task.due:
            return False, None
        return True, self._run(task)

    def flush(self) -> tuple[bool, Any]:
        """Run the pending task now, ignoring the quiet window."""
        task = self._pending
        if task is None:
            return False, None
        return True, self._run(task)

    def _run(self, task: _Pending) -> Any:
        # cleared before the call so the task may schedule a follow-up
        self._pending = None
        return task.fn(*task.args, **task.kwargs)
