from __future__ import annotations

import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from ..core.exceptions import DeadlineExceeded

_current: ContextVar[Optional["Deadline"]] = ContextVar("attend_deadline", default=None)


def current_deadline() -> Optional["Deadline"]:
    """Deadline bound to the running request, if any."""
    return _current.get()


@dataclass(frozen=True)
class Deadline:
    """Absolute point on the monotonic clock after which work must stop."""

    expires_at: float
    clock: Callable[[], float] = time.monotonic

    @classmethod
    def after(cls, seconds: float, *, clock: Callable[[], float] = time.monotonic) -> "Deadline":
        return cls(expires_at=clock() + float(seconds), clock=clock)

    def remaining(self) -> float:
        return self.expires_at - self.clock()

    def check(self, what: str = "operation") -> None:
        if self.remaining() <= 0:
            raise DeadlineExceeded(f"Deadline exceeded before {what}")

    @contextmanager
    def bound(self) -> Iterator["Deadline"]:
        """Make this the current deadline so database calls are capped by it."""
        token = _current.set(self)
        try:
            yield self
        finally:
            _current.reset(token)
