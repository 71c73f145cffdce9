"""AWS helper functions."""

from __future__ import annotations
from typing import Any


def convert_tags_to_dict(tags: list[dict[str, Any]] | None) -> dict[str, str]:
    """Convert AWS tag list to dictionary.

    Tags with a missing key or value are skipped.
    """
    if not tags:
        return {}
    return {
        tag["Key"]: tag["Value"]
        for tag in tags
        if tag.get("Key") is not None and tag.get("Value") is not None
    }


def filter_clause(name: str, values: list[str]) -> dict[str, Any]:
    """Build a single EC2 Filters entry."""
    return {"Name": name, "Values": list(values)}
