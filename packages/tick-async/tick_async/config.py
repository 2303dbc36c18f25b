"""Scheduler configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SchedulerConfig:
    """Immutable configuration for a Scheduler.

    Attributes:
        max_idle_workers: Upper bound on parked workers kept for reuse.
            None keeps every finished worker.
    """

    max_idle_workers: int | None = None

    def __post_init__(self) -> None:
        if self.max_idle_workers is not None and self.max_idle_workers < 0:
            raise ValueError("max_idle_workers must be non-negative")
