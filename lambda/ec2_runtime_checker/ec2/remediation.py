"""Termination of violating instances."""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any

from ..exceptions import TerminationError
from ..models import (
    FAILED,
    TERMINATED,
    WOULD_TERMINATE,
    RemediationOutcome,
    Report,
    Violation,
)
from ..utils import get_logger

logger = get_logger()


class RemediationExecutor:
    """Terminates violators, or simulates it in dry-run mode.

    A failure on one instance is recorded and the rest are still processed.
    """

    def __init__(self, provider: Any, max_workers: int = 1):
        self.provider = provider
        self.max_workers = max(1, max_workers)

    def remediate(self, violations: list[Violation], dry_run: bool) -> Report:
        """Build a report with one outcome per violation, in discovery order."""
        for violation in violations:
            logger.info(
                "Found long-running instance",
                extra={
                    "instance_id": violation.instance.instance_id,
                    "instance_type": violation.instance.instance_type,
                    "runtime_hours": round(violation.runtime_hours, 2),
                    "policy": violation.policy.describe(),
                },
            )

        if dry_run:
            outcomes = [self._simulate(violation) for violation in violations]
        elif self.max_workers > 1 and len(violations) > 1:
            outcomes = self._terminate_concurrently(violations)
        else:
            outcomes = [self._terminate(violation) for violation in violations]

        return Report(dry_run=dry_run, outcomes=outcomes)

    def _simulate(self, violation: Violation) -> RemediationOutcome:
        logger.info(
            "DRY RUN: Would terminate instance",
            extra={"dry_run": True, "instance_id": violation.instance.instance_id},
        )
        return RemediationOutcome.for_violation(violation, WOULD_TERMINATE)

    def _terminate(self, violation: Violation) -> RemediationOutcome:
        instance_id = violation.instance.instance_id
        logger.info("Terminating instance", extra={"instance_id": instance_id})
        try:
            self.provider.terminate(instance_id)
        except TerminationError as e:
            logger.error(
                "Failed to terminate instance",
                extra={"instance_id": instance_id, "error": e.reason},
            )
            return RemediationOutcome.for_violation(violation, FAILED, error=e.reason)
        except Exception as e:
            # Outcomes already recorded must still reach the report
            logger.exception(
                "Unexpected error terminating instance",
                extra={"instance_id": instance_id},
            )
            return RemediationOutcome.for_violation(violation, FAILED, error=str(e))

        logger.info("Successfully terminated instance", extra={"instance_id": instance_id})
        return RemediationOutcome.for_violation(violation, TERMINATED)

    def _terminate_concurrently(
        self, violations: list[Violation]
    ) -> list[RemediationOutcome]:
        # Calls complete out of order; restore discovery order afterwards
        results: list[tuple[int, RemediationOutcome]] = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self._terminate, violation): index
                for index, violation in enumerate(violations)
            }
            for future in as_completed(futures):
                results.append((futures[future], future.result()))

        results.sort(key=lambda item: item[0])
        return [outcome for _, outcome in results]
