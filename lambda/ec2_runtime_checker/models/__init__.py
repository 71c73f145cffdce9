"""Data models for the EC2 runtime checker."""

from .policy import Policy
from .instance import Instance, Violation
from .report import Report, RemediationOutcome, TERMINATED, FAILED, WOULD_TERMINATE
from .config import Config, load_policies, load_policy_file

__all__ = [
    "Policy",
    "Instance",
    "Violation",
    "Report",
    "RemediationOutcome",
    "TERMINATED",
    "FAILED",
    "WOULD_TERMINATE",
    "Config",
    "load_policies",
    "load_policy_file",
]
