"""Trailing-edge debounce on the running asyncio loop."""

import asyncio
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Deliver only the last pushed value once ``delay`` seconds pass quietly."""

    def __init__(self, delay: float, callback: Callable[[T], None]) -> None:
        self.delay = delay
        self.callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._pending: T | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def push(self, value: T) -> None:
        """Record a value and restart the quiet-period timer."""
        self.cancel()
        self._pending = value
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending value without delivering it."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending = None

    def _fire(self) -> None:
        value = self._pending
        self._handle = None
        self._pending = None
        self.callback(value)
