"""Utility functions for the EC2 runtime checker."""

from .aws_helpers import convert_tags_to_dict, filter_clause
from .logging_config import get_logger
from .patterns import glob_match, validate_name_pattern

__all__ = [
    "convert_tags_to_dict",
    "filter_clause",
    "get_logger",
    "glob_match",
    "validate_name_pattern",
]
