"""Logging configuration using AWS Lambda Powertools."""

import os

from aws_lambda_powertools import Logger

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Structured JSON logging; Lambda context is injected by the handler decorator
logger = Logger(
    service="ec2-runtime-checker",
    level=LOG_LEVEL,
)


def get_logger():
    """Get the configured logger instance.

    Returns Powertools Logger with:
    - Structured JSON logging (same format in Lambda and in the CLI)
    - Automatic Lambda context when invoked through the handler
    """
    return logger
