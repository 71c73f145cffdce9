"""EC2 instance evaluation and remediation."""

from .filters import build_filters
from .matching import matches, first_matching_policy
from .inventory import Ec2InventoryProvider
from .evaluator import ComplianceEvaluator
from .remediation import RemediationExecutor

__all__ = [
    "build_filters",
    "matches",
    "first_matching_policy",
    "Ec2InventoryProvider",
    "ComplianceEvaluator",
    "RemediationExecutor",
]
