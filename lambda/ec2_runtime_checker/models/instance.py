"""Instance snapshot and Violation data classes."""

from __future__ import annotations
import datetime
from dataclasses import dataclass, field
from typing import Any

from .policy import Policy
from ..utils import convert_tags_to_dict


@dataclass(frozen=True)
class Instance:
    """Read-only view of an EC2 instance for one evaluation cycle."""

    instance_id: str
    instance_type: str
    launch_time: datetime.datetime | None
    tags: dict[str, str] = field(default_factory=dict)
    state: str = "running"

    @classmethod
    def from_ec2(cls, data: dict[str, Any]) -> Instance:
        """Build from a DescribeInstances instance record."""
        return cls(
            instance_id=data["InstanceId"],
            instance_type=data.get("InstanceType", ""),
            launch_time=data.get("LaunchTime"),
            tags=convert_tags_to_dict(data.get("Tags")),
            state=data.get("State", {}).get("Name", ""),
        )

    @property
    def name(self) -> str:
        """Value of the Name tag, or empty string."""
        return self.tags.get("Name", "")

    def runtime(self, now: datetime.datetime) -> datetime.timedelta:
        """Time since launch. Callers must check launch_time first."""
        if self.launch_time is None:
            raise ValueError(f"Instance {self.instance_id} has no launch time")
        return now - self.launch_time


@dataclass(frozen=True)
class Violation:
    """An instance whose runtime exceeds the limit of the policy it matched."""

    instance: Instance
    policy: Policy
    runtime: datetime.timedelta

    @property
    def runtime_hours(self) -> float:
        return self.runtime / datetime.timedelta(hours=1)
