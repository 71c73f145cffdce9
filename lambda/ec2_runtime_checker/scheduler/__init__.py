"""Cycle control and active-owner gating."""

from .controller import (
    CycleController,
    CycleResult,
    CycleState,
    NO_VIOLATIONS,
    REMEDIATED,
    RETRIEVAL_FAILED,
    Schedule,
)
from .ownership import ActiveOwnerSignal, AlwaysActiveOwner, ActiveOwnerFlag

__all__ = [
    "CycleController",
    "CycleResult",
    "CycleState",
    "NO_VIOLATIONS",
    "REMEDIATED",
    "RETRIEVAL_FAILED",
    "Schedule",
    "ActiveOwnerSignal",
    "AlwaysActiveOwner",
    "ActiveOwnerFlag",
]
