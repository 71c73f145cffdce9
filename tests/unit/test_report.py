"""Unit tests for report rendering and serialization."""

from __future__ import annotations
import datetime
import json
import pytest

from ec2_runtime_checker.models import (
    FAILED,
    TERMINATED,
    WOULD_TERMINATE,
    RemediationOutcome,
    Report,
)

GENERATED_AT = datetime.datetime(2025, 1, 15, 12, 0, 0, tzinfo=datetime.timezone.utc)


def _outcome(instance_id, status, name="", error=None, runtime_hours=3.456):
    return RemediationOutcome(
        instance_id=instance_id,
        instance_type="t3.micro",
        name=name,
        runtime_hours=runtime_hours,
        policy="all instances max 1h",
        status=status,
        error=error,
    )


class TestReportCounts:
    """Test per-status counters."""

    def test_counts_by_status(self):
        report = Report(
            dry_run=False,
            outcomes=[
                _outcome("i-1", TERMINATED),
                _outcome("i-2", FAILED, error="boom"),
                _outcome("i-3", TERMINATED),
            ],
        )
        assert report.total == 3
        assert report.terminated == 2
        assert report.failed == 1
        assert report.simulated == 0

    def test_empty_report(self):
        report = Report(dry_run=True)
        assert report.total == 0
        assert report.render() == "No long-running instances found."


class TestRender:
    """Test the notification message body."""

    def test_live_report_lists_each_outcome(self):
        """
        GIVEN a live report with one success and one failure
        WHEN rendered
        THEN each instance, its runtime and its outcome appear in order
        """
        report = Report(
            dry_run=False,
            generated_at=GENERATED_AT,
            outcomes=[
                _outcome("i-1", TERMINATED, name="dev-1"),
                _outcome("i-2", FAILED, error="UnauthorizedOperation"),
            ],
        )

        message = report.render()
        lines = message.splitlines()

        assert lines[0] == "Found 2 long-running instances:"
        assert lines[1] == "Mode: LIVE"
        assert lines[2] == "Timestamp: 2025-01-15 12:00:00 UTC"
        assert "- ID: i-1, Type: t3.micro, Runtime: 3.46 hours" in lines
        assert "  Name: dev-1" in lines
        assert "  Successfully terminated instance i-1" in lines
        assert "  Failed to terminate instance i-2: UnauthorizedOperation" in lines
        assert message.index("i-1") < message.index("i-2")
        assert lines[-1] == "Summary: 2 found, 1 terminated, 1 failed"

    def test_dry_run_report(self):
        report = Report(dry_run=True, outcomes=[_outcome("i-1", WOULD_TERMINATE)])

        message = report.render()

        assert "Mode: DRY-RUN" in message
        assert "  DRY RUN: would terminate instance i-1" in message
        assert message.endswith("Summary: 1 found, 1 would be terminated")

    def test_name_line_omitted_without_name(self):
        report = Report(dry_run=True, outcomes=[_outcome("i-1", WOULD_TERMINATE)])
        assert "Name:" not in report.render()


class TestSerialization:
    """Test JSON-ready dictionaries."""

    def test_report_to_dict(self):
        report = Report(
            dry_run=False,
            generated_at=GENERATED_AT,
            outcomes=[_outcome("i-1", TERMINATED)],
        )

        data = report.to_dict()

        assert data["dry_run"] is False
        assert data["generated_at"] == "2025-01-15T12:00:00+00:00"
        assert data["total_violations"] == 1
        assert data["terminated"] == 1
        assert data["outcomes"][0]["instance_id"] == "i-1"
        assert data["outcomes"][0]["runtime_hours"] == 3.46
        json.dumps(data)

    @pytest.mark.parametrize("status", [TERMINATED, FAILED, WOULD_TERMINATE])
    def test_outcome_to_dict_keeps_status(self, status):
        assert _outcome("i-1", status).to_dict()["status"] == status
