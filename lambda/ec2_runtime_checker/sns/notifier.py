"""SNS notification of cycle reports."""

from __future__ import annotations
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import NotificationError
from ..models import Report
from ..utils import get_logger

logger = get_logger()

SUBJECT = "Long-Running EC2 Instances Alert"


class SnsNotifier:
    """Publishes the rendered report to an SNS topic.

    With no topic configured every call is a logged no-op. Delivery errors
    are logged and never reach the caller.
    """

    def __init__(self, topic_arn: str = "", sns_client: Any = None, region: str = ""):
        self.topic_arn = topic_arn
        self._sns = sns_client
        self._region = region

    @property
    def sns(self) -> Any:
        if self._sns is None:
            self._sns = (
                boto3.client("sns", region_name=self._region)
                if self._region
                else boto3.client("sns")
            )
        return self._sns

    def notify(self, report: Report) -> bool:
        """Send the report. Returns True if it was published."""
        if not self.topic_arn:
            logger.info("SNS_TOPIC_ARN not set, skipping notification")
            return False

        try:
            self.publish(report)
        except NotificationError as e:
            logger.error("Failed to publish to SNS", extra={"error": str(e)})
            return False

        logger.info(
            f"Sent SNS notification for {report.total} instances",
            extra={"topic_arn": self.topic_arn, "violations": report.total},
        )
        return True

    def publish(self, report: Report) -> None:
        try:
            self.sns.publish(
                TopicArn=self.topic_arn,
                Subject=SUBJECT,
                Message=report.render(),
            )
        except (ClientError, BotoCoreError) as e:
            raise NotificationError(str(e)) from e
