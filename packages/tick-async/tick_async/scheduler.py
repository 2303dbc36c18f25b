"""Scheduler - immediate, deferred and timed resumption of pooled workers."""
from __future__ import annotations

import functools
import logging
import numbers
import time
from typing import Any, Callable

from tick_async.config import SchedulerConfig
from tick_async.pool import Worker, WorkerPool, current_worker, unpack
from tick_async.signals import Signal
from tick_async.types import Host, InvalidArgument

logger = logging.getLogger(__name__)

_Target = Callable[..., Any] | Worker


class Scheduler:
    """Owns a worker pool plus the deferred and timer lists drained by on_tick.

    ``clock`` is read once per tick to refresh the shared timestamp that
    timers are measured against. ``attach(host)`` replaces it with the host's
    own ``now`` and registers ``on_tick`` with the host.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        config: SchedulerConfig | None = None,
    ) -> None:
        self._config = config if config is not None else SchedulerConfig()
        self._pool = WorkerPool(self._config.max_idle_workers)
        self._clock = clock
        self._timestamp = clock()
        self._deferred: list[tuple[_Target, tuple[Any, ...]]] = []
        self._timers: list[tuple[Worker, int, float, float]] = []
        self._in_tick = False

    @property
    def config(self) -> SchedulerConfig:
        return self._config

    @property
    def pool(self) -> WorkerPool:
        return self._pool

    @property
    def timestamp(self) -> float:
        """Clock reading taken at the start of the most recent tick."""
        return self._timestamp

    def pending_deferred(self) -> int:
        return len(self._deferred)

    def pending_timers(self) -> int:
        return len(self._timers)

    # --- Dispatch ---

    def spawn(self, target: _Target, *args: Any) -> None:
        """Run a callable on a pooled worker now, or resume a suspended worker.

        The callable runs synchronously up to its first suspension point and
        its return value is discarded. Exceptions it raises propagate here.
        """
        if isinstance(target, Worker):
            target.resume(args)
        elif callable(target):
            self._pool.dispatch(target, args)
        else:
            raise InvalidArgument("spawn", '"callable" or "Worker"', target)

    def defer(self, target: _Target, *args: Any) -> None:
        """Like spawn, but runs on the next tick."""
        if not (isinstance(target, Worker) or callable(target)):
            raise InvalidArgument("defer", '"callable" or "Worker"', target)
        self._deferred.append((target, args))

    def wait(self, seconds: float) -> float:
        """Suspend the current worker for at least ``seconds`` of host time.

        Returns the elapsed time actually observed, which may overshoot by up
        to one tick interval. Even ``wait(0)`` resumes on the next tick at the
        earliest. The timer is dropped if the worker is resumed some other way
        first.
        """
        worker = current_worker("wait")
        if isinstance(seconds, bool) or not isinstance(seconds, numbers.Real):
            raise InvalidArgument("wait", '"number"', seconds)
        self._timers.append((worker, worker.generation, self._timestamp, float(seconds)))
        return unpack(worker._suspend())

    def wrap(self, fn: Callable[..., Any]) -> Callable[..., None]:
        """Return a reusable function that runs ``fn`` on a pooled worker per call."""
        if not callable(fn):
            raise InvalidArgument("wrap", '"callable"', fn)

        @functools.wraps(fn)
        def resumer(*args: Any) -> None:
            self._pool.dispatch(fn, args)

        return resumer

    def signal(self) -> Signal:
        """Create a Signal whose subscribers run on this scheduler's pool."""
        return Signal(self)

    # --- Tick driver ---

    def attach(self, host: Host) -> None:
        """Drive this scheduler from a host loop."""
        self._clock = host.now
        self._timestamp = host.now()
        host.register_tick_callback(self.on_tick)

    def on_tick(self) -> None:
        """Advance the timestamp, drain deferred calls, then resume due timers.

        Errors raised by resumed work do not interrupt the tick; they are
        raised together as an ExceptionGroup once the tick is done, even when
        there is only one. Catch them with ``except*``.
        """
        if self._in_tick:
            raise RuntimeError("on_tick is not reentrant")
        self._in_tick = True
        errors: list[Exception] = []
        try:
            self._timestamp = self._clock()
            self._run_deferred(errors)
            self._run_timers(errors)
        finally:
            self._in_tick = False
        if errors:
            logger.debug("tick finished with %d error(s)", len(errors))
            raise ExceptionGroup("errors raised during tick", errors)

    def _run_deferred(self, errors: list[Exception]) -> None:
        calls = self._deferred
        self._deferred = []
        for target, args in calls:
            try:
                self.spawn(target, *args)
            except Exception as exc:
                errors.append(exc)

    def _run_timers(self, errors: list[Exception]) -> None:
        # Timers appended by resumed workers wait for the next tick.
        i = 0
        remaining = len(self._timers)
        while i < remaining:
            worker, generation, start, duration = self._timers[i]
            if not worker.is_suspended_at(generation):
                del self._timers[i]
                remaining -= 1
                continue
            elapsed = self._timestamp - start
            if elapsed >= duration:
                del self._timers[i]
                remaining -= 1
                try:
                    worker.resume((elapsed,))
                except Exception as exc:
                    errors.append(exc)
            else:
                i += 1
