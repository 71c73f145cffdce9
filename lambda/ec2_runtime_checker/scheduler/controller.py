"""Evaluation cycle orchestration and the recurring control loop."""

from __future__ import annotations
import enum
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from .ownership import ActiveOwnerSignal, AlwaysActiveOwner
from ..exceptions import RetrievalError
from ..models import Report
from ..utils import get_logger

logger = get_logger()


class CycleState(str, enum.Enum):
    IDLE = "IDLE"
    EVALUATING = "EVALUATING"
    REMEDIATING = "REMEDIATING"
    NOTIFYING = "NOTIFYING"


NO_VIOLATIONS = "NO_VIOLATIONS"
REMEDIATED = "REMEDIATED"
RETRIEVAL_FAILED = "RETRIEVAL_FAILED"


class Schedule(Protocol):
    def now(self) -> float: ...

    def advance(self, due: float, now: float) -> tuple[float, int]: ...

    def describe(self) -> str: ...


@dataclass
class CycleResult:
    """Outcome of one evaluation cycle."""

    status: str
    report: Report | None = None
    error: str | None = None
    duration_seconds: float = 0.0


class CycleController:
    """
    Runs evaluation cycles: evaluate, remediate, notify.

    At most one cycle runs per process; a trigger that arrives while a cycle
    is in progress is dropped. Once started, a cycle always runs to the end,
    so termination calls are never left half-issued.
    """

    def __init__(
        self,
        evaluator: Any,
        executor: Any,
        notifier: Any,
        dry_run: bool = True,
        owner_signal: ActiveOwnerSignal | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.evaluator = evaluator
        self.executor = executor
        self.notifier = notifier
        self.dry_run = dry_run
        self.owner_signal = owner_signal or AlwaysActiveOwner()
        self.state = CycleState.IDLE
        self._monotonic = monotonic
        self._cycle_lock = threading.Lock()

    def run_cycle(self) -> CycleResult | None:
        """Run one full cycle. Returns None if another cycle is running."""
        if not self._cycle_lock.acquire(blocking=False):
            logger.warning("Cycle already in progress, dropping trigger")
            return None
        try:
            return self._run_cycle()
        finally:
            self.state = CycleState.IDLE
            self._cycle_lock.release()

    def _run_cycle(self) -> CycleResult:
        start = self._monotonic()
        logger.info(
            "Checking for long-running instances...", extra={"dry_run": self.dry_run}
        )

        self.state = CycleState.EVALUATING
        try:
            violations = self.evaluator.find_violations()
        except RetrievalError as e:
            logger.error("Cycle aborted: instance retrieval failed", extra={"error": str(e)})
            return CycleResult(
                status=RETRIEVAL_FAILED,
                error=str(e),
                duration_seconds=self._monotonic() - start,
            )

        if not violations:
            logger.info("No long-running instances found")
            return CycleResult(
                status=NO_VIOLATIONS,
                report=Report(dry_run=self.dry_run),
                duration_seconds=self._monotonic() - start,
            )

        self.state = CycleState.REMEDIATING
        report = self.executor.remediate(violations, self.dry_run)

        self.state = CycleState.NOTIFYING
        self.notifier.notify(report)

        duration = self._monotonic() - start
        logger.info(
            f"Cycle complete in {duration:.1f}s: {report.total} violations",
            extra={
                "dry_run": self.dry_run,
                "violations": report.total,
                "terminated": report.terminated,
                "failed": report.failed,
                "simulated": report.simulated,
            },
        )
        return CycleResult(status=REMEDIATED, report=report, duration_seconds=duration)

    def tick(self) -> CycleResult | None:
        """Run a cycle if this replica is the active owner right now."""
        # Sampled once; losing ownership mid-cycle does not stop the cycle
        if not self.owner_signal.is_active_owner():
            logger.info("Not the active owner, skipping tick")
            return None
        return self.run_cycle()

    def run_forever(self, schedule: Schedule, stop_event: threading.Event) -> None:
        """
        Tick immediately, then whenever the schedule falls due, until
        stop_event is set.

        Ticks that fall due while a cycle is still running are dropped rather
        than queued. stop_event is only observed between cycles. An unexpected
        error in a cycle is logged and the next tick runs as scheduled.
        """
        logger.info("Scheduler started", extra={"schedule": schedule.describe()})
        due = schedule.now()

        while not stop_event.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Cycle failed unexpectedly, waiting for next tick")

            now = schedule.now()
            due, missed = schedule.advance(due, now)
            if missed:
                logger.warning(
                    "Cycle overran schedule, dropping missed ticks",
                    extra={"dropped_ticks": missed},
                )

            if stop_event.wait(due - now):
                break

        logger.info("Scheduler stopped")
