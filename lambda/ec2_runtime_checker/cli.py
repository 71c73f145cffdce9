"""Command line entry point: one-shot check or recurring loop."""

from __future__ import annotations
import argparse
import dataclasses
import signal
import sys
import threading

from .exceptions import ConfigError
from .handler import build_controller
from .models import Config
from .scheduler import RETRIEVAL_FAILED, ActiveOwnerFlag
from .scheduler.election import KubernetesLeaderElector
from .scheduler.schedule import CronSchedule, IntervalSchedule
from .utils import get_logger

logger = get_logger()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="ec2-runtime-checker",
        description="Find and terminate EC2 instances running longer than policy allows",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["run", "cron"],
        default="run",
        help="run: single check (default); cron: check on SCHEDULE, or every SCHEDULE_RATE_MINUTES",
    )
    dry_run = parser.add_mutually_exclusive_group()
    dry_run.add_argument(
        "--dry-run", dest="dry_run", action="store_true", default=None,
        help="Only report, never terminate (overrides DRY_RUN)",
    )
    dry_run.add_argument(
        "--no-dry-run", dest="dry_run", action="store_false",
        help="Terminate violating instances (overrides DRY_RUN)",
    )
    return parser.parse_args(argv)


def run_once(config: Config) -> int:
    logger.info("Starting single run...")
    result = build_controller(config).run_cycle()
    if result is not None and result.status == RETRIEVAL_FAILED:
        return 1
    return 0


def build_schedule(config: Config):
    """Cron expression from SCHEDULE, otherwise the SCHEDULE_RATE_MINUTES interval."""
    if config.schedule:
        return CronSchedule(config.schedule)
    return IntervalSchedule(config.schedule_rate_minutes * 60)


def start_leader_election(config: Config, stop_event: threading.Event) -> ActiveOwnerFlag:
    flag = ActiveOwnerFlag(identity=config.pod_name)
    KubernetesLeaderElector(
        flag,
        lease_name=config.lease_name,
        namespace=config.pod_namespace,
        identity=config.pod_name,
        stop_event=stop_event,
    ).start()
    return flag


def run_cron(config: Config, stop_event: threading.Event | None = None, owner_signal=None) -> int:
    """Run cycles on the configured schedule until SIGINT/SIGTERM."""
    stop_event = stop_event or threading.Event()
    schedule = build_schedule(config)

    def _stop(signum, frame):
        logger.info("Received shutdown signal", extra={"signal": signum})
        stop_event.set()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)

    logger.info(
        "Starting in cron mode...",
        extra={
            "schedule": schedule.describe(),
            "leader_election": config.leader_election_enabled,
        },
    )
    if owner_signal is None and config.leader_election_enabled:
        owner_signal = start_leader_election(config, stop_event)
    controller = build_controller(config, owner_signal=owner_signal)
    controller.run_forever(schedule, stop_event)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        config = Config.from_env()
    except ConfigError as e:
        logger.error("Failed to load config", extra={"error": str(e)})
        return 1

    if args.dry_run is not None:
        config = dataclasses.replace(config, dry_run=args.dry_run)

    if args.mode == "cron":
        try:
            return run_cron(config)
        except ConfigError as e:
            logger.error("Invalid schedule", extra={"error": str(e)})
            return 1
    return run_once(config)


if __name__ == "__main__":
    sys.exit(main())
