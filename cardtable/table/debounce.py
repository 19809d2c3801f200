"""
Debounced callbacks.

Each call to `trigger` cancels the pending run and schedules a new one after
the delay, so only the last input in a burst is acted on. Requires a running
event loop.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from cardtable.config import SEARCH_DEBOUNCE_SECONDS

logger = logging.getLogger(__name__)


class Debouncer:
    """Cancel-and-restart timer around a callback."""

    def __init__(self, callback: Callable[..., Any], delay: float = SEARCH_DEBOUNCE_SECONDS):
        self._callback = callback
        self.delay = delay
        self._task: asyncio.Task[None] | None = None
        self._args: tuple[Any, ...] = ()

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self, *args: Any) -> None:
        """Schedule the callback with these arguments, replacing any pending run."""
        self.cancel()
        self._args = args
        self._task = asyncio.create_task(self._run_later(args))

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def flush(self) -> None:
        """Run the pending callback now instead of waiting out the delay."""
        if not self.pending:
            return
        args = self._args
        self.cancel()
        await self._invoke(args)

    async def _run_later(self, args: tuple[Any, ...]) -> None:
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            return
        try:
            await self._invoke(args)
        except Exception:
            # Nothing awaits this task, so report here
            logger.exception("Debounced callback failed")

    async def _invoke(self, args: tuple[Any, ...]) -> None:
        result = self._callback(*args)
        if inspect.isawaitable(result):
            await result
