"""Kubernetes leader election driving an ActiveOwnerFlag.

Only the CLI's recurring mode imports this module; the Lambda never needs
the Kubernetes client.
"""

from __future__ import annotations
import threading

from kubernetes import config as k8s_config
from kubernetes.config.config_exception import ConfigException
from kubernetes.leaderelection import electionconfig, leaderelection
from kubernetes.leaderelection.resourcelock.configmaplock import ConfigMapLock

from .ownership import ActiveOwnerFlag
from ..utils import get_logger

logger = get_logger()

LEASE_DURATION_SECONDS = 15
RENEW_DEADLINE_SECONDS = 10
RETRY_PERIOD_SECONDS = 2


def load_kube_config() -> None:
    """In-cluster service account first, local kubeconfig otherwise."""
    try:
        k8s_config.load_incluster_config()
    except ConfigException:
        k8s_config.load_kube_config()


class KubernetesLeaderElector:
    """
    Runs leader election in a background thread and mirrors the result into
    an ActiveOwnerFlag.

    After losing leadership the elector campaigns again, so a replica that
    was briefly partitioned can become owner later. The lease is not
    released on shutdown; other replicas take over once it expires.
    """

    def __init__(
        self,
        flag: ActiveOwnerFlag,
        lease_name: str,
        namespace: str,
        identity: str,
        stop_event: threading.Event,
    ):
        self.flag = flag
        self.lease_name = lease_name
        self.namespace = namespace
        self.identity = identity
        self.stop_event = stop_event
        self._thread: threading.Thread | None = None

    def election_config(self) -> electionconfig.Config:
        lock = ConfigMapLock(self.lease_name, self.namespace, self.identity)
        return electionconfig.Config(
            lock=lock,
            lease_duration=LEASE_DURATION_SECONDS,
            renew_deadline=RENEW_DEADLINE_SECONDS,
            retry_period=RETRY_PERIOD_SECONDS,
            onstarted_leading=self.flag.acquire,
            onstopped_leading=self.flag.release,
        )

    def start(self) -> threading.Thread:
        load_kube_config()
        logger.info(
            "Starting leader election",
            extra={
                "lease_name": self.lease_name,
                "namespace": self.namespace,
                "identity": self.identity,
            },
        )
        self._thread = threading.Thread(
            target=self._campaign, name="leader-election", daemon=True
        )
        self._thread.start()
        return self._thread

    def _campaign(self) -> None:
        while not self.stop_event.is_set():
            try:
                leaderelection.LeaderElection(self.election_config()).run()
            except Exception:
                logger.exception("Leader election failed, retrying")
            # run() returns once leadership is lost
            self.flag.release()
            self.stop_event.wait(RETRY_PERIOD_SECONDS)
