"""Policy matching for a single instance."""

from __future__ import annotations

from ..models import Instance, Policy
from ..utils import glob_match


def matches(instance: Instance, policy: Policy) -> bool:
    """
    Check if an instance satisfies every selector of a policy.

    Cheapest checks run first. Pure and total: never raises.
    Note: VPC scoping is handled by the server-side filter, not here.
    """
    # Check instance type (if specified)
    if policy.instance_type and instance.instance_type != policy.instance_type:
        return False

    # Check Name tag (supports wildcard matching with *)
    if policy.name and not glob_match(policy.name, instance.name):
        return False

    # Check tags (all specified tags must match)
    if policy.tags:
        for key, value in policy.tags.items():
            if key not in instance.tags or instance.tags[key] != value:
                return False

    return True


def first_matching_policy(
    instance: Instance, policies: tuple[Policy, ...] | list[Policy]
) -> Policy | None:
    """Return the first policy the instance matches, in configured order."""
    for policy in policies:
        if matches(instance, policy):
            return policy
    return None
