"""Worker pool - reusable greenlets that run one job at a time."""
from __future__ import annotations

import enum
import logging
from typing import Any, Callable

import greenlet

from tick_async.types import ContextStateError, NotYieldable

logger = logging.getLogger(__name__)


class WorkerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUSPENDED = "suspended"
    DEAD = "dead"


class Worker(greenlet.greenlet):
    """A pooled execution context.

    A worker runs ``(fn, args)`` jobs handed to it by its pool. Between jobs it
    parks itself back in the pool instead of exiting, so spawning work does not
    create a new greenlet every time. While a job runs, the worker may suspend
    (``suspend()``, ``wait()``, ``Signal.wait()``) and be resumed later by
    whoever holds it.

    Control always returns to the greenlet that last started or resumed the
    worker. An exception escaping a job kills the worker and is raised there.
    """

    def __init__(self, pool: WorkerPool) -> None:
        super().__init__()
        self._pool = pool
        self._state = WorkerState.IDLE
        self._generation = 0

    def __repr__(self) -> str:
        return f"<Worker {self.state.value} at {id(self):#x}>"

    @property
    def state(self) -> WorkerState:
        if self.dead:
            return WorkerState.DEAD
        return self._state

    @property
    def generation(self) -> int:
        """Bumped on every start and resume.

        A waiter that records it before suspending can later tell whether the
        worker is still parked in that same suspension.
        """
        return self._generation

    def is_suspended_at(self, generation: int) -> bool:
        """True while the worker is still parked in that particular suspension."""
        return self.state is WorkerState.SUSPENDED and self._generation == generation

    def run(self, job: tuple[Callable[..., Any], tuple[Any, ...]]) -> None:
        while True:
            fn, args = job
            fn(*args)
            if not self._pool.release(self):
                return
            job = self.parent.switch()

    def start(self, fn: Callable[..., Any], args: tuple[Any, ...]) -> None:
        """Hand an idle worker a job and run it up to its first suspension."""
        if self.state is not WorkerState.IDLE:
            raise ContextStateError(f"cannot start a {self.state.value} worker")
        self._state = WorkerState.RUNNING
        self._generation += 1
        self.parent = greenlet.getcurrent()
        self.switch((fn, args))

    def resume(self, args: tuple[Any, ...]) -> None:
        """Resume a suspended worker, delivering args to its suspension point."""
        if self.state is not WorkerState.SUSPENDED:
            raise ContextStateError(f"cannot resume a {self.state.value} worker")
        self._state = WorkerState.RUNNING
        self._generation += 1
        self.parent = greenlet.getcurrent()
        self.switch(args)

    def _suspend(self) -> tuple[Any, ...]:
        self._state = WorkerState.SUSPENDED
        return self.parent.switch()


class WorkerPool:
    """Free-list of idle workers.

    ``max_idle`` caps how many finished workers are parked for reuse. A worker
    finishing while the pool is full ends instead of parking.
    """

    def __init__(self, max_idle: int | None = None) -> None:
        self._idle: list[Worker] = []
        self._max_idle = max_idle
        self._created = 0

    def __len__(self) -> int:
        return len(self._idle)

    @property
    def created(self) -> int:
        """Number of workers this pool has ever created."""
        return self._created

    def acquire(self) -> Worker:
        if self._idle:
            return self._idle.pop()
        self._created += 1
        logger.debug("creating worker #%d", self._created)
        return Worker(self)

    def release(self, worker: Worker) -> bool:
        if self._max_idle is not None and len(self._idle) >= self._max_idle:
            logger.debug("worker pool full (%d idle), evicting worker", len(self._idle))
            return False
        worker._state = WorkerState.IDLE
        self._idle.append(worker)
        return True

    def dispatch(self, fn: Callable[..., Any], args: tuple[Any, ...]) -> None:
        """Run fn(*args) on a pooled worker right now."""
        self.acquire().start(fn, args)

    def clear(self) -> None:
        """Drop every idle worker."""
        self._idle.clear()


def running() -> Worker | None:
    """Return the worker currently executing, or None on the root execution."""
    current = greenlet.getcurrent()
    if isinstance(current, Worker):
        return current
    return None


def is_yieldable() -> bool:
    return running() is not None


def current_worker(action: str) -> Worker:
    worker = running()
    if worker is None:
        raise NotYieldable(action)
    return worker


def unpack(args: tuple[Any, ...]) -> Any:
    """Collapse resume arguments: none -> None, one -> value, many -> tuple."""
    if not args:
        return None
    if len(args) == 1:
        return args[0]
    return args


def suspend() -> Any:
    """Park the current worker until it is resumed with spawn or defer.

    Returns the arguments it was resumed with.
    """
    return unpack(current_worker("suspend")._suspend())
