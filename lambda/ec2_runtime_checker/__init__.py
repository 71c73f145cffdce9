"""EC2 Runtime Checker: terminate instances that outlive their policy."""

from .handler import lambda_handler

__version__ = "1.0.0"
__description__ = "Policy-driven EC2 runtime limits with SNS reporting"

__all__ = ["lambda_handler"]
