"""Operator notifications."""

from .notifier import SnsNotifier, SUBJECT

__all__ = ["SnsNotifier", "SUBJECT"]
