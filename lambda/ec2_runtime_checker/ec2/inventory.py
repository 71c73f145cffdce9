"""EC2 instance listing and termination."""

from __future__ import annotations
from typing import Any, Iterator

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import RetrievalError, TerminationError
from ..models import Instance
from ..utils import get_logger

logger = get_logger()


class Ec2InventoryProvider:
    """Reads running instances from EC2 and terminates them one at a time."""

    def __init__(self, ec2_client: Any = None, region: str = ""):
        if ec2_client is None:
            ec2_client = (
                boto3.client("ec2", region_name=region) if region else boto3.client("ec2")
            )
        self.ec2 = ec2_client

    def list_running_instances(
        self, filters: list[dict[str, Any]]
    ) -> Iterator[list[Instance]]:
        """
        Yield one list of instances per DescribeInstances page.

        Each call starts a fresh pagination. Any page failure raises
        RetrievalError; the caller must not use what it collected so far.
        """
        paginator = self.ec2.get_paginator("describe_instances")
        pages = paginator.paginate(Filters=filters)
        page_number = 0

        try:
            for page in pages:
                page_number += 1
                instances = [
                    Instance.from_ec2(instance)
                    for reservation in page.get("Reservations", [])
                    for instance in reservation.get("Instances", [])
                ]
                logger.debug(
                    "Fetched instances page",
                    extra={"page": page_number, "instances": len(instances)},
                )
                yield instances
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Failed to describe instances",
                extra={"page": page_number + 1, "error": str(e)},
            )
            raise RetrievalError(f"Failed to describe instances: {e}") from e

    def terminate(self, instance_id: str) -> None:
        """Terminate a single instance, raising TerminationError on failure."""
        try:
            self.ec2.terminate_instances(InstanceIds=[instance_id])
        except (ClientError, BotoCoreError) as e:
            raise TerminationError(instance_id, str(e)) from e
