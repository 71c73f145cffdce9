"""Server-side DescribeInstances filters derived from the policy set."""

from __future__ import annotations
from typing import Any

from ..models import Policy
from ..utils import filter_clause


def _distinct(values) -> list[str]:
    # Keeps first-seen order so the filters are deterministic
    return list(dict.fromkeys(values))


def build_filters(
    policies: tuple[Policy, ...] | list[Policy], vpc_id: str = ""
) -> list[dict[str, Any]]:
    """
    Build EC2 filters that over-approximate the set of matching instances.

    EC2 ANDs separate filters and ORs the values inside one filter, so a
    clause is only added when every policy constrains that attribute.
    Anything narrower could drop instances that some policy would match.
    Tag conjunction within a policy is re-checked client-side.
    """
    filters = [filter_clause("instance-state-name", ["running"])]

    # Instance types: only when no policy accepts every type
    if policies and all(policy.instance_type for policy in policies):
        filters.append(
            filter_clause(
                "instance-type",
                _distinct(policy.instance_type for policy in policies),
            )
        )

    if vpc_id:
        filters.append(filter_clause("vpc-id", [vpc_id]))

    # Tags: one clause per key that every policy requires
    tag_keys = _distinct(key for policy in policies for key in policy.tags)
    for key in tag_keys:
        if not all(key in policy.tags for policy in policies):
            continue
        filters.append(
            filter_clause(
                f"tag:{key}",
                _distinct(policy.tags[key] for policy in policies),
            )
        )

    return filters
