"""Main Lambda handler and component wiring for the EC2 runtime checker."""

from __future__ import annotations
import json
from typing import Any

from aws_lambda_powertools import Metrics
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from .ec2 import ComplianceEvaluator, Ec2InventoryProvider, RemediationExecutor
from .models import Config
from .scheduler import (
    ActiveOwnerSignal,
    CycleController,
    CycleResult,
    RETRIEVAL_FAILED,
)
from .sns import SnsNotifier
from .utils import get_logger

logger = get_logger()
metrics = Metrics(namespace="EC2RuntimeChecker", service="ec2-runtime-checker")


def build_controller(
    config: Config,
    ec2_client: Any = None,
    sns_client: Any = None,
    owner_signal: ActiveOwnerSignal | None = None,
) -> CycleController:
    """Wire the provider, evaluator, executor and notifier for a config."""
    provider = Ec2InventoryProvider(ec2_client, region=config.aws_region)
    evaluator = ComplianceEvaluator(
        config.policies, provider, vpc_id=config.vpc_id
    )
    executor = RemediationExecutor(
        provider, max_workers=config.termination_concurrency
    )
    notifier = SnsNotifier(
        config.sns_topic_arn, sns_client=sns_client, region=config.aws_region
    )
    return CycleController(
        evaluator,
        executor,
        notifier,
        dry_run=config.dry_run,
        owner_signal=owner_signal,
    )


def result_to_response(result: CycleResult | None, dry_run: bool) -> dict[str, Any]:
    """Convert a cycle result to a Lambda response."""
    if result is None:
        return {
            "statusCode": 409,
            "body": json.dumps({"dry_run": dry_run, "status": "SKIPPED"}),
        }

    if result.status == RETRIEVAL_FAILED:
        return {
            "statusCode": 502,
            "body": json.dumps(
                {"dry_run": dry_run, "status": result.status, "error": result.error}
            ),
        }

    body: dict[str, Any] = {"status": result.status}
    body.update(result.report.to_dict())
    return {"statusCode": 200, "body": json.dumps(body)}


@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Run a single check. Invalid configuration raises and fails the invocation."""
    config = Config.from_env()
    logger.info(
        "Starting EC2 runtime check",
        extra={
            "dry_run": config.dry_run,
            "policies": len(config.policies),
            "vpc_id": config.vpc_id or None,
        },
    )

    result = build_controller(config).run_cycle()

    if result is not None and result.report is not None:
        report = result.report
        metrics.add_metric(name="ViolationsFound", unit=MetricUnit.Count, value=report.total)
        metrics.add_metric(
            name="InstancesTerminated", unit=MetricUnit.Count, value=report.terminated
        )
        metrics.add_metric(
            name="TerminationFailures", unit=MetricUnit.Count, value=report.failed
        )
    elif result is not None:
        metrics.add_metric(name="RetrievalFailures", unit=MetricUnit.Count, value=1)

    return result_to_response(result, config.dry_run)
