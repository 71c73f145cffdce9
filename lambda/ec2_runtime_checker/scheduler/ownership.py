"""Active-owner signals gating the recurring loop.

The election itself (e.g. a Kubernetes Lease) lives outside this package;
the controller only asks whether this replica may run a cycle right now.
"""

from __future__ import annotations
import threading
from typing import Protocol

from ..utils import get_logger

logger = get_logger()


class ActiveOwnerSignal(Protocol):
    def is_active_owner(self) -> bool: ...


class AlwaysActiveOwner:
    """Single-replica deployments: this process is always the owner."""

    def is_active_owner(self) -> bool:
        return True


class ActiveOwnerFlag:
    """Thread-safe ownership flag flipped by an external election client.

    Wire acquire() to the client's "started leading" callback and release()
    to "stopped leading". Starts as not owning.
    """

    def __init__(self, identity: str = "", active: bool = False):
        self.identity = identity
        self._active = threading.Event()
        if active:
            self._active.set()

    def acquire(self) -> None:
        if not self._active.is_set():
            logger.info("Became active owner", extra={"identity": self.identity})
        self._active.set()

    def release(self) -> None:
        if self._active.is_set():
            logger.info("Lost active ownership", extra={"identity": self.identity})
        self._active.clear()

    def is_active_owner(self) -> bool:
        return self._active.is_set()
