"""Call context carrying a deadline and a cancellation flag.

Every submission call takes a context. The client refuses to start an
exchange once the context has expired or was cancelled. While an exchange
is in flight the client stops waiting on it as soon as the context is
cancelled or its deadline passes.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from signalclient.errors import ContextCancelledError, ContextError, DeadlineExceededError


class CallContext:
    """Deadline/cancellation scope shared by one or more calls.

    Usage:
        ctx = CallContext.with_timeout(5.0)
        client.signal_service().send_signal(ctx, signal)
    """

    def __init__(self, deadline: float | None = None) -> None:
        self._deadline = deadline
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], object]] = []

    @classmethod
    def background(cls) -> CallContext:
        """A context that never expires unless cancelled."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> CallContext:
        return cls(time.monotonic() + seconds)

    @classmethod
    def with_deadline(cls, deadline: float) -> CallContext:
        """``deadline`` is a ``time.monotonic()`` timestamp."""
        return cls(deadline)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def cancel(self) -> None:
        with self._lock:
            self._cancelled.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], object]) -> Callable[[], None]:
        """Run ``callback`` once when the context is cancelled.

        Runs it right away if the context is already cancelled. Returns a
        function that unregisters the callback.
        """
        with self._lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return lambda: self._discard(callback)
        callback()
        return lambda: None

    def _discard(self, callback: Callable[[], object]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def err(self) -> ContextError | None:
        if self.cancelled:
            return ContextCancelledError()
        if self.expired():
            return DeadlineExceededError()
        return None

    def __repr__(self) -> str:
        return f"CallContext(remaining={self.remaining()!r}, cancelled={self.cancelled})"
