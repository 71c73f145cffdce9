"""Remediation report data classes."""

from __future__ import annotations
import datetime
from dataclasses import dataclass, asdict, field
from typing import Any

from .instance import Violation

TERMINATED = "TERMINATED"
FAILED = "FAILED"
WOULD_TERMINATE = "WOULD_TERMINATE"


@dataclass
class RemediationOutcome:
    """Result of remediating a single violation."""

    instance_id: str
    instance_type: str
    name: str
    runtime_hours: float
    policy: str
    status: str
    error: str | None = None

    @classmethod
    def for_violation(
        cls, violation: Violation, status: str, error: str | None = None
    ) -> RemediationOutcome:
        instance = violation.instance
        return cls(
            instance_id=instance.instance_id,
            instance_type=instance.instance_type,
            name=instance.name,
            runtime_hours=violation.runtime_hours,
            policy=violation.policy.describe(),
            status=status,
            error=error,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["runtime_hours"] = round(self.runtime_hours, 2)
        return data


@dataclass
class Report:
    """Ordered record of one cycle's findings and termination outcomes."""

    dry_run: bool
    outcomes: list[RemediationOutcome] = field(default_factory=list)
    generated_at: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def terminated(self) -> int:
        return self._count(TERMINATED)

    @property
    def failed(self) -> int:
        return self._count(FAILED)

    @property
    def simulated(self) -> int:
        return self._count(WOULD_TERMINATE)

    def _count(self, status: str) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    def render(self) -> str:
        """Render the notification message body."""
        if not self.outcomes:
            return "No long-running instances found."

        lines = [
            f"Found {self.total} long-running instances:",
            f"Mode: {'DRY-RUN' if self.dry_run else 'LIVE'}",
            f"Timestamp: {self.generated_at.strftime('%Y-%m-%d %H:%M:%S UTC')}",
            "",
        ]

        for outcome in self.outcomes:
            lines.append(
                f"- ID: {outcome.instance_id}, Type: {outcome.instance_type}, "
                f"Runtime: {outcome.runtime_hours:.2f} hours"
            )
            if outcome.name:
                lines.append(f"  Name: {outcome.name}")
            lines.append(f"  Policy: {outcome.policy}")
            if outcome.status == TERMINATED:
                lines.append(f"  Successfully terminated instance {outcome.instance_id}")
            elif outcome.status == FAILED:
                lines.append(
                    f"  Failed to terminate instance {outcome.instance_id}: {outcome.error}"
                )
            else:
                lines.append(f"  DRY RUN: would terminate instance {outcome.instance_id}")

        lines.append("")
        if self.dry_run:
            lines.append(f"Summary: {self.total} found, {self.simulated} would be terminated")
        else:
            lines.append(
                f"Summary: {self.total} found, {self.terminated} terminated, "
                f"{self.failed} failed"
            )
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "dry_run": self.dry_run,
            "generated_at": self.generated_at.isoformat(),
            "total_violations": self.total,
            "terminated": self.terminated,
            "failed": self.failed,
            "simulated": self.simulated,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }
