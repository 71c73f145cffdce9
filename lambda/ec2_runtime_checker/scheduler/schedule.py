"""Tick schedules for the recurring loop.

A schedule owns its clock: ``now()`` reads it and ``advance(due, now)``
returns the next due time after ``due`` that is still in the future, plus
how many due times were skipped because a cycle overran them.
"""

from __future__ import annotations
import time
from typing import Callable

from croniter import croniter

from ..exceptions import ConfigError


class IntervalSchedule:
    """Fixed rate, measured on the monotonic clock."""

    def __init__(self, interval_seconds: float, clock: Callable[[], float] = time.monotonic):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.interval_seconds = interval_seconds
        self._clock = clock

    def now(self) -> float:
        return self._clock()

    def advance(self, due: float, now: float) -> tuple[float, int]:
        next_due = due + self.interval_seconds
        if now < next_due:
            return next_due, 0
        missed = int((now - next_due) // self.interval_seconds) + 1
        return next_due + missed * self.interval_seconds, missed

    def describe(self) -> str:
        return f"every {self.interval_seconds:g}s"


class CronSchedule:
    """Standard five-field cron expression, evaluated in UTC on the wall clock."""

    def __init__(self, expression: str, clock: Callable[[], float] = time.time):
        if not croniter.is_valid(expression):
            raise ConfigError(f"Invalid cron expression {expression!r}")
        self.expression = expression
        self._clock = clock

    def now(self) -> float:
        return self._clock()

    def next_after(self, timestamp: float) -> float:
        """First fire time strictly after timestamp (epoch seconds)."""
        return croniter(self.expression, timestamp).get_next(float)

    def advance(self, due: float, now: float) -> tuple[float, int]:
        fires = croniter(self.expression, due)
        next_due = fires.get_next(float)
        missed = 0
        while next_due <= now:
            missed += 1
            next_due = fires.get_next(float)
        return next_due, missed

    def describe(self) -> str:
        return f"cron {self.expression!r} (UTC)"
