"""Configuration from environment variables and the policy file."""

from __future__ import annotations
import json
import math
import os
from dataclasses import dataclass
from typing import Any, Mapping

from .policy import Policy
from ..exceptions import ConfigError
from ..utils import validate_name_pattern

DEFAULT_SCHEDULE_RATE_MINUTES = 15.0
DEFAULT_TERMINATION_CONCURRENCY = 1
DEFAULT_LEASE_NAME = "ec2-checker-leader"


def _dry_run_enabled(value: str) -> bool:
    # Anything but an explicit "false" keeps the safe no-op mode
    return value.strip().lower() != "false"


def _flag_enabled(value: str) -> bool:
    return value.strip().lower() in ("true", "1")


def load_policies(raw: Any) -> tuple[Policy, ...]:
    """Validate decoded policy JSON and convert it to Policy records.

    Order is preserved: the first policy an instance matches is the one
    applied to it.
    """
    if not isinstance(raw, list):
        raise ConfigError("Policy configuration must be a JSON array")
    if not raw:
        raise ConfigError("Policy configuration is empty")

    return tuple(_load_policy(index, record) for index, record in enumerate(raw))


def _load_policy(index: int, record: Any) -> Policy:
    where = f"policy #{index}"
    if not isinstance(record, dict):
        raise ConfigError(f"{where}: expected an object, got {type(record).__name__}")

    if "maxRuntimeHours" not in record:
        raise ConfigError(f"{where}: maxRuntimeHours is required")
    threshold = record["maxRuntimeHours"]
    # bool is an int subclass, reject it explicitly
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise ConfigError(f"{where}: maxRuntimeHours must be a number")
    if not math.isfinite(threshold):
        raise ConfigError(f"{where}: maxRuntimeHours must be finite")

    instance_type = record.get("instanceType") or ""
    if not isinstance(instance_type, str):
        raise ConfigError(f"{where}: instanceType must be a string")

    name = record.get("name") or ""
    if not isinstance(name, str):
        raise ConfigError(f"{where}: name must be a string")
    try:
        validate_name_pattern(name)
    except ConfigError as e:
        raise ConfigError(f"{where}: {e}") from e

    tags = record.get("tags") or {}
    if not isinstance(tags, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in tags.items()
    ):
        raise ConfigError(f"{where}: tags must be a mapping of strings to strings")

    return Policy(
        max_runtime_hours=float(threshold),
        instance_type=instance_type,
        name=name,
        tags=dict(tags),
    )


def load_policy_file(path: str) -> tuple[Policy, ...]:
    """Read and validate the policy file at path."""
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as e:
        raise ConfigError(f"Failed to open config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e
    return load_policies(raw)


@dataclass(frozen=True)
class Config:
    """Process configuration, resolved once at startup."""

    policies: tuple[Policy, ...]
    aws_region: str = ""
    sns_topic_arn: str = ""
    dry_run: bool = True
    vpc_id: str = ""
    schedule_rate_minutes: float = DEFAULT_SCHEDULE_RATE_MINUTES
    termination_concurrency: int = DEFAULT_TERMINATION_CONCURRENCY
    schedule: str = ""
    leader_election_enabled: bool = False
    pod_name: str = ""
    pod_namespace: str = ""
    lease_name: str = DEFAULT_LEASE_NAME

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Build configuration from environment variables.

        Policies come from the file at CONFIG_PATH, or from inline JSON in
        POLICIES_JSON when no path is set. DRY_RUN defaults to true; only the
        value "false" enables termination. SCHEDULE is kept as given and
        parsed when the recurring loop starts.
        """
        env = os.environ if environ is None else environ

        config_path = env.get("CONFIG_PATH", "")
        policies_json = env.get("POLICIES_JSON", "")
        if config_path:
            policies = load_policy_file(config_path)
        elif policies_json:
            try:
                policies = load_policies(json.loads(policies_json))
            except json.JSONDecodeError as e:
                raise ConfigError(f"Failed to parse POLICIES_JSON: {e}") from e
        else:
            raise ConfigError("CONFIG_PATH or POLICIES_JSON must be set")

        try:
            schedule_rate = float(
                env.get("SCHEDULE_RATE_MINUTES", str(DEFAULT_SCHEDULE_RATE_MINUTES))
            )
        except ValueError as e:
            raise ConfigError(f"Invalid SCHEDULE_RATE_MINUTES: {e}") from e
        if not math.isfinite(schedule_rate) or schedule_rate <= 0:
            raise ConfigError("SCHEDULE_RATE_MINUTES must be a positive number")

        try:
            concurrency = int(
                env.get("TERMINATION_CONCURRENCY", str(DEFAULT_TERMINATION_CONCURRENCY))
            )
        except ValueError as e:
            raise ConfigError(f"Invalid TERMINATION_CONCURRENCY: {e}") from e
        if concurrency < 1:
            raise ConfigError("TERMINATION_CONCURRENCY must be at least 1")

        leader_election = _flag_enabled(env.get("LEADER_ELECTION_ENABLED", "false"))
        pod_name = env.get("POD_NAME", "")
        pod_namespace = env.get("POD_NAMESPACE", "")
        if leader_election and not (pod_name and pod_namespace):
            raise ConfigError("POD_NAME and POD_NAMESPACE are required for leader election")

        return cls(
            policies=policies,
            aws_region=env.get("AWS_REGION", ""),
            sns_topic_arn=env.get("SNS_TOPIC_ARN", ""),
            dry_run=_dry_run_enabled(env.get("DRY_RUN", "true")),
            vpc_id=env.get("VPC_ID", ""),
            schedule_rate_minutes=schedule_rate,
            termination_concurrency=concurrency,
            schedule=env.get("SCHEDULE", "").strip(),
            leader_election_enabled=leader_election,
            pod_name=pod_name,
            pod_namespace=pod_namespace,
            lease_name=env.get("LEASE_NAME", "") or DEFAULT_LEASE_NAME,
        )
