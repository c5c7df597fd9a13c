"""Trailing-edge debouncing of URL updates."""

import asyncio
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Deliver only the last value scheduled within ``delay`` seconds.

    Inside a running event loop the callback fires ``delay`` seconds after the
    most recent ``schedule`` call. Without a loop the value is held until
    ``flush`` is called.

    Args:
        callback: Receives the settled value.
        delay: Quiet period in seconds.
    """

    def __init__(self, callback: Callable[[T], None], delay: float = 0.5) -> None:
        self._callback = callback
        self._delay = delay
        self._pending: T | None = None
        self._has_pending = False
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._has_pending

    def schedule(self, value: T) -> None:
        self._pending = value
        self._has_pending = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._handle = loop.call_later(self._delay, self.flush)

    def flush(self) -> None:
        """Deliver the pending value now, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if not self._has_pending:
            return
        value = self._pending
        self._pending = None
        self._has_pending = False
        self._callback(value)  # type: ignore[arg-type]

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending = None
        self._has_pending = False
