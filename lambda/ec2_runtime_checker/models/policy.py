"""Policy data class."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Policy:
    """Selects instances by type/name/tags and sets their runtime limit.

    Empty selector fields match anything, so a policy with no selectors
    applies to every running instance.
    """

    max_runtime_hours: float
    instance_type: str = ""
    name: str = ""
    tags: dict[str, str] = field(default_factory=dict)

    def describe(self) -> str:
        """Short human-readable form used in reports and logs."""
        parts = []
        if self.instance_type:
            parts.append(f"type={self.instance_type}")
        if self.name:
            parts.append(f"name={self.name}")
        if self.tags:
            tags = ",".join(f"{k}={v}" for k, v in sorted(self.tags.items()))
            parts.append(f"tags={tags}")
        if not parts:
            parts.append("all instances")
        parts.append(f"max {self.max_runtime_hours:g}h")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the configuration file format."""
        data: dict[str, Any] = {"maxRuntimeHours": self.max_runtime_hours}
        if self.instance_type:
            data["instanceType"] = self.instance_type
        if self.name:
            data["name"] = self.name
        if self.tags:
            data["tags"] = dict(self.tags)
        return data
