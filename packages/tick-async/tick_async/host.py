"""FrameLoop - a fixed-rate host loop that pumps tick callbacks."""
from __future__ import annotations

import time
from typing import Callable

from tick_async.types import TickCallback


class FrameLoop:
    """Minimal host for a Scheduler.

    Calls every registered tick callback once per tick, in registration order.
    ``now()`` reports ``tick_number * dt`` unless a ``clock`` function is given,
    so loops driven by ``step``/``run`` keep deterministic time.
    """

    def __init__(self, tps: int = 20, clock: Callable[[], float] | None = None) -> None:
        if tps <= 0:
            raise ValueError("tps must be positive")
        self._tps = tps
        self._dt = 1.0 / tps
        self._tick_number = 0
        self._clock = clock
        self._callbacks: list[TickCallback] = []
        self._start_hooks: list[TickCallback] = []
        self._stop_hooks: list[TickCallback] = []
        self._stop_requested = False

    @property
    def tps(self) -> int:
        return self._tps

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def tick_number(self) -> int:
        return self._tick_number

    def now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return self._tick_number * self._dt

    def register_tick_callback(self, fn: TickCallback) -> None:
        self._callbacks.append(fn)

    def on_start(self, hook: TickCallback) -> None:
        self._start_hooks.append(hook)

    def on_stop(self, hook: TickCallback) -> None:
        self._stop_hooks.append(hook)

    def stop(self) -> None:
        """Ask the loop to stop after the current tick."""
        self._stop_requested = True

    def _tick(self) -> None:
        self._tick_number += 1
        for fn in self._callbacks:
            fn()

    def step(self) -> None:
        self._stop_requested = False
        self._tick()

    def run(self, n: int) -> None:
        self._stop_requested = False
        for hook in self._start_hooks:
            hook()

        for _ in range(n):
            self._tick()
            if self._stop_requested:
                break

        for hook in self._stop_hooks:
            hook()

    def run_forever(self) -> None:
        self._stop_requested = False
        for hook in self._start_hooks:
            hook()

        while not self._stop_requested:
            start = time.monotonic()
            self._tick()
            if self._stop_requested:
                break
            sleep_time = self._dt - (time.monotonic() - start)
            if sleep_time > 0:
                time.sleep(sleep_time)

        for hook in self._stop_hooks:
            hook()
