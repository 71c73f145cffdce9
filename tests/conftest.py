"""Pytest configuration and shared fixtures for EC2 runtime checker tests."""

from __future__ import annotations
import datetime
import pytest
from typing import Any

import freezegun

from ec2_runtime_checker.exceptions import RetrievalError, TerminationError
from ec2_runtime_checker.models import Instance, Policy

# kubernetes lazily imports pydantic client models on attribute access; keep
# freezegun from walking (and so importing) them while datetime is patched.
freezegun.configure(extend_ignore_list=["kubernetes"])

NOW = datetime.datetime(2025, 1, 15, 12, 0, 0, tzinfo=datetime.timezone.utc)


class InstanceBuilder:
    """Builder pattern for creating test EC2 instances.

    build() returns the DescribeInstances record, build_instance() the
    Instance model built from it.
    """

    def __init__(self):
        self._instance = {
            "InstanceId": "i-test123456",
            "InstanceType": "t3.micro",
            "State": {"Name": "running"},
            "LaunchTime": NOW,
            "Tags": [],
        }

    def with_instance_id(self, instance_id: str) -> InstanceBuilder:
        """Set instance ID."""
        self._instance["InstanceId"] = instance_id
        return self

    def with_type(self, instance_type: str) -> InstanceBuilder:
        """Set instance type."""
        self._instance["InstanceType"] = instance_type
        return self

    def with_name(self, name: str) -> InstanceBuilder:
        """Set Name tag."""
        self._add_tag("Name", name)
        return self

    def with_launch_time(self, launch_time: datetime.datetime | None) -> InstanceBuilder:
        """Set launch time (None to simulate a missing value)."""
        if launch_time is None:
            self._instance.pop("LaunchTime", None)
        else:
            self._instance["LaunchTime"] = launch_time
        return self

    def running_for(self, **delta) -> InstanceBuilder:
        """Set launch time relative to NOW, e.g. running_for(hours=3)."""
        self._instance["LaunchTime"] = NOW - datetime.timedelta(**delta)
        return self

    def with_tag(self, key: str, value: str) -> InstanceBuilder:
        """Add custom tag."""
        self._add_tag(key, value)
        return self

    def _add_tag(self, key: str, value: str):
        self._instance["Tags"].append({"Key": key, "Value": value})

    def build(self) -> dict[str, Any]:
        """Build and return the instance dictionary."""
        return self._instance

    def build_instance(self) -> Instance:
        """Build and return the Instance model."""
        return Instance.from_ec2(self._instance)


class FakeProvider:
    """In-memory inventory provider recording every call."""

    def __init__(self, pages=None, fail_on_page=None, failing_ids=()):
        self.pages = pages or []
        self.fail_on_page = fail_on_page
        self.failing_ids = set(failing_ids)
        self.list_calls = []
        self.terminated = []

    def list_running_instances(self, filters):
        self.list_calls.append(filters)
        for index, page in enumerate(self.pages):
            if self.fail_on_page == index:
                raise RetrievalError(f"page {index} failed")
            yield list(page)

    def terminate(self, instance_id):
        self.terminated.append(instance_id)
        if instance_id in self.failing_ids:
            raise TerminationError(instance_id, "UnauthorizedOperation")


# Shared fixtures


@pytest.fixture
def instance_builder():
    """Fixture that returns a new InstanceBuilder."""
    return InstanceBuilder()


@pytest.fixture
def make_instance():
    """Factory for Instance models.

    Example:
        make_instance("i-1", hours=5, name="dev-1", tags={"Team": "backend"})
    """

    def _make(
        instance_id: str = "i-test123456",
        hours: float = 1.0,
        instance_type: str = "t3.micro",
        name: str | None = None,
        tags: dict[str, str] | None = None,
    ) -> Instance:
        builder = (
            InstanceBuilder()
            .with_instance_id(instance_id)
            .with_type(instance_type)
            .running_for(hours=hours)
        )
        if name is not None:
            builder.with_name(name)
        for key, value in (tags or {}).items():
            builder.with_tag(key, value)
        return builder.build_instance()

    return _make


@pytest.fixture
def make_policy():
    """Factory for Policy records with an optional selector set."""

    def _make(max_runtime_hours: float = 2.0, **selectors) -> Policy:
        return Policy(max_runtime_hours=max_runtime_hours, **selectors)

    return _make


@pytest.fixture
def now():
    """Fixed evaluation time used by builders and clocks."""
    return NOW


@pytest.fixture
def fixed_clock():
    """Clock returning NOW."""
    return lambda: NOW


@pytest.fixture
def fake_provider():
    """Factory for FakeProvider."""

    def _create(**kwargs):
        return FakeProvider(**kwargs)

    return _create
