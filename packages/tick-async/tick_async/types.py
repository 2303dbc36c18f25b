"""Error kinds and host protocol for tick-async."""
from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

TickCallback = Callable[[], None]


class AsyncError(Exception):
    """Base class for errors raised by tick-async."""


class InvalidArgument(AsyncError, TypeError):
    """Raised when a value of the wrong type reaches the scheduler or a signal."""

    def __init__(self, action: str, expected: str, value: object) -> None:
        self.action = action
        self.expected = expected
        self.type_name = type(value).__name__
        super().__init__(
            f"Attempt to {action} invalid value "
            f"(expected {expected}, got {self.type_name!r})"
        )


class NotYieldable(AsyncError, RuntimeError):
    """Raised when a blocking call is made outside of a worker."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"{action} can't be run on the root execution")


class ContextStateError(AsyncError, RuntimeError):
    """Raised when resuming a worker that is not suspended."""


@runtime_checkable
class Host(Protocol):
    """The minimum a host loop must provide to drive a Scheduler."""

    def now(self) -> float:
        """Monotonically non-decreasing elapsed time in seconds."""
        ...

    def register_tick_callback(self, fn: TickCallback) -> None:
        """Call fn exactly once per host tick."""
        ...
