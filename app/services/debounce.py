import asyncio
import os
from typing import Any, Callable, Optional


def default_debounce_seconds() -> float:
    raw = os.getenv("SEARCH_DEBOUNCE_MS")
    if raw is None or raw == "":
        return 0.3
    try:
        return max(0, int(raw)) / 1000.0
    except ValueError:
        return 0.3


class Debouncer:
    """Delays ``callback(value)`` until no new value arrives for ``delay`` seconds.

    Each ``submit`` cancels the pending evaluation and schedules a new one
    on the running event loop.
    """

    def __init__(self, callback: Callable[[Any], None], delay: Optional[float] = None):
        self._callback = callback
        self.delay = default_debounce_seconds() if delay is None else float(delay)
        self._task: Optional[asyncio.Task] = None
        self._pending_value: Any = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def submit(self, value: Any) -> None:
        self.cancel()
        self._pending_value = value
        self._task = asyncio.get_running_loop().create_task(self._fire_later(value))

    async def _fire_later(self, value: Any) -> None:
        await asyncio.sleep(self.delay)
        self._task = None
        self._callback(value)

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def flush(self) -> None:
        """Apply the pending value now instead of waiting out the delay."""
        if not self.pending:
            return
        value = self._pending_value
        self.cancel()
        self._callback(value)
