"""Runtime compliance evaluation."""

from __future__ import annotations
import datetime
from typing import Any, Callable, Iterable

from .filters import build_filters
from .matching import first_matching_policy
from ..models import Instance, Policy, Violation
from ..utils import get_logger

logger = get_logger()


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class ComplianceEvaluator:
    """Finds running instances that exceed the runtime of their policy."""

    def __init__(
        self,
        policies: tuple[Policy, ...] | list[Policy],
        provider: Any,
        vpc_id: str = "",
        clock: Callable[[], datetime.datetime] = utc_now,
    ):
        self.policies = tuple(policies)
        self.provider = provider
        self.vpc_id = vpc_id
        self.clock = clock

    def check_instance(self, instance: Instance) -> Violation | None:
        """
        Check one instance against the policies in configured order.

        Only the first matching policy is applied, even if a later one would
        have a stricter limit. Instances matching no policy are ignored.
        """
        policy = first_matching_policy(instance, self.policies)
        if policy is None:
            return None

        if instance.launch_time is None:
            logger.error(
                "Instance has no launch time, skipping",
                extra={"instance_id": instance.instance_id},
            )
            return None

        violation = Violation(
            instance=instance, policy=policy, runtime=instance.runtime(self.clock())
        )
        # Strict: an instance exactly at the limit is still compliant
        if violation.runtime_hours > policy.max_runtime_hours:
            return violation
        return None

    def evaluate(self, instances: Iterable[Instance]) -> list[Violation]:
        """Return violations in the order instances were given."""
        violations = []
        for instance in instances:
            violation = self.check_instance(instance)
            if violation:
                violations.append(violation)
        return violations

    def find_violations(self) -> list[Violation]:
        """
        Query EC2 page by page and evaluate every returned instance.

        Pages are fetched sequentially. RetrievalError from any page
        propagates and nothing collected so far is returned.
        """
        filters = build_filters(self.policies, self.vpc_id)
        logger.debug("Describe instances filters", extra={"filters": filters})

        violations: list[Violation] = []
        scanned = 0
        for page in self.provider.list_running_instances(filters):
            scanned += len(page)
            violations.extend(self.evaluate(page))

        logger.info(
            f"Instance scan complete: {scanned} scanned, {len(violations)} violations",
            extra={"instances_scanned": scanned, "violations": len(violations)},
        )
        return violations
