"""Signal and Connection - ordered pub/sub with blocking wait-for-next-fire."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from tick_async.pool import current_worker, unpack
from tick_async.types import InvalidArgument

if TYPE_CHECKING:
    from tick_async.scheduler import Scheduler


def _check(value: object, cls: type, action: str) -> None:
    if not isinstance(value, cls):
        raise InvalidArgument(action, f'"{cls.__name__}"', value)


class Connection:
    """A subscription handle returned by Signal.connect and Signal.once.

    Connections form a doubly-linked list owned by their signal. A
    disconnected connection keeps its forward link so a fire traversal that
    is standing on it can still move on.
    """

    __slots__ = ("_signal", "_callback", "_connected", "_enabled", "_prev", "_next")

    def __init__(self, signal: Signal, callback: Callable[..., Any]) -> None:
        self._signal = signal
        self._callback = callback
        self._connected = True
        self._enabled = True
        self._prev: Connection | None = None
        self._next: Connection | None = None

    def __repr__(self) -> str:
        state = "connected" if self._connected else "disconnected"
        if self._connected and not self._enabled:
            state = "disabled"
        return f"<Connection {state} {self._callback!r}>"

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        _check(self, Connection, "enable")
        self._enabled = True

    def disable(self) -> None:
        _check(self, Connection, "disable")
        self._enabled = False

    def disconnect(self) -> None:
        """Remove from the signal's list. No-op if already disconnected."""
        _check(self, Connection, "disconnect")
        if not self._connected:
            return
        self._connected = False

        signal = self._signal
        if signal._back is self:
            signal._back = self._prev
        if signal._front is self:
            signal._front = self._next
        if self._next is not None:
            self._next._prev = self._prev
        if self._prev is not None:
            self._prev._next = self._next


class Signal:
    """Ordered set of subscriber callbacks.

    Each ``fire`` runs every connected, enabled callback on its own pooled
    worker in connect order, so a subscriber that suspends never blocks its
    siblings or the caller. Calling the signal is the same as ``fire``.
    """

    __slots__ = ("_scheduler", "_front", "_back")

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._front: Connection | None = None
        self._back: Connection | None = None

    def __repr__(self) -> str:
        return f"<Signal {len(self.connections())} connection(s)>"

    def __call__(self, *args: Any) -> None:
        self.fire(*args)

    def is_empty(self) -> bool:
        _check(self, Signal, "inspect")
        return self._front is None

    def connections(self) -> list[Connection]:
        """Live connections, front to back."""
        _check(self, Signal, "inspect")
        result = []
        item = self._front
        while item is not None:
            result.append(item)
            item = item._next
        return result

    def connect(self, callback: Callable[..., Any]) -> Connection:
        _check(self, Signal, "connect to")
        if not callable(callback):
            raise InvalidArgument("connect", '"callable"', callback)
        conn = Connection(self, callback)
        if self._front is None:
            self._front = conn
        if self._back is not None:
            self._back._next = conn
            conn._prev = self._back
        self._back = conn
        return conn

    def once(self, callback: Callable[..., Any]) -> Connection:
        """Connect for a single fire. The connection drops before callback runs."""
        _check(self, Signal, "connect to")
        if not callable(callback):
            raise InvalidArgument("connect", '"callable"', callback)

        def fire_once(*args: Any) -> None:
            conn.disconnect()
            callback(*args)

        conn = self.connect(fire_once)
        return conn

    def wait(self) -> Any:
        """Suspend the current worker until the next fire.

        Returns the fired arguments: none -> None, one -> the value,
        several -> a tuple. If the worker is resumed some other way first,
        the next fire only drops the leftover connection.
        """
        _check(self, Signal, "wait on")
        worker = current_worker("Signal.wait")
        generation = worker.generation

        def resume(*args: Any) -> None:
            conn.disconnect()
            if worker.is_suspended_at(generation):
                worker.resume(args)

        conn = self.connect(resume)
        return unpack(worker._suspend())

    def fire(self, *args: Any) -> None:
        """Dispatch to subscribers, following live links front to back.

        A failing subscriber does not stop the rest. Their exceptions are
        raised together as an ExceptionGroup after the walk, even when only
        one subscriber failed, so callers catch them with ``except*``.
        """
        _check(self, Signal, "fire")
        errors: list[Exception] = []
        item = self._front
        while item is not None:
            if item._connected and item._enabled:
                try:
                    self._scheduler.spawn(item._callback, *args)
                except Exception as exc:
                    errors.append(exc)
            item = item._next
        if errors:
            raise ExceptionGroup("errors raised by signal subscribers", errors)
