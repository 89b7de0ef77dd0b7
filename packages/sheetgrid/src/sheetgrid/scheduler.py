"""Deferred callbacks on the running asyncio loop."""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler:
    """Schedules grid timers on the running event loop.

    Without a running loop callbacks run immediately, the same way a
    render request falls back to rendering synchronously.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            callback()
            return None
        return loop.call_later(delay, callback)

    def call_soon(self, callback: Callable[[], None]) -> Cancellable | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            callback()
            return None
        return loop.call_soon(callback)
