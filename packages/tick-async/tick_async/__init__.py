"""tick-async - Pooled coroutines, timers and signals for tick-driven hosts.

The module-level functions operate on a process-wide default scheduler.
Hook it to a host loop with ``attach(host)`` or call ``on_tick()`` yourself
once per tick.
"""
from __future__ import annotations

from tick_async.config import SchedulerConfig
from tick_async.host import FrameLoop
from tick_async.pool import Worker, WorkerPool, WorkerState, is_yieldable, running, suspend
from tick_async.scheduler import Scheduler
from tick_async.signals import Connection, Signal
from tick_async.types import (
    AsyncError,
    ContextStateError,
    Host,
    InvalidArgument,
    NotYieldable,
)

default_scheduler = Scheduler()

spawn = default_scheduler.spawn
defer = default_scheduler.defer
wait = default_scheduler.wait
wrap = default_scheduler.wrap
signal = default_scheduler.signal
on_tick = default_scheduler.on_tick
attach = default_scheduler.attach

__all__ = [
    "Scheduler",
    "SchedulerConfig",
    "Signal",
    "Connection",
    "Worker",
    "WorkerPool",
    "WorkerState",
    "FrameLoop",
    "Host",
    "AsyncError",
    "InvalidArgument",
    "NotYieldable",
    "ContextStateError",
    "default_scheduler",
    "spawn",
    "defer",
    "wait",
    "wrap",
    "signal",
    "suspend",
    "running",
    "is_yieldable",
    "on_tick",
    "attach",
]
