"""Busy tracking for operations that must not be issued twice."""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TypeVar

from castpro_console.errors import OperationInProgressError

T = TypeVar("T")


@dataclass
class BusyTracker:
    """Keyed busy flags shared by forms, refreshes and status transitions."""

    _held: set[str] = field(default_factory=set)
    _shared: dict[str, asyncio.Future] = field(default_factory=dict)

    def is_busy(self, key: str) -> bool:
        return key in self._held or key in self._shared

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Mark a key busy for the duration; refuse if it already is."""
        if self.is_busy(key):
            raise OperationInProgressError()
        self._held.add(key)
        try:
            yield
        finally:
            self._held.discard(key)

    async def join(self, key: str, operation: Callable[[], Awaitable[T]]) -> T:
        """Run an idempotent read once, letting concurrent callers share it."""
        task = self._shared.get(key)
        if task is None:
            task = asyncio.ensure_future(operation())
            self._shared[key] = task
            task.add_done_callback(lambda done: self._release(key, done))
        return await asyncio.shield(task)

    def forget(self, key: str) -> None:
        """Detach an in-flight read so later callers start a fresh one."""
        self._shared.pop(key, None)

    def _release(self, key: str, task: asyncio.Future) -> None:
        if self._shared.get(key) is task:
            del self._shared[key]
