"""Error types raised by the runtime checker."""


class RuntimeCheckerError(Exception):
    """Base class for all runtime checker errors."""


class ConfigError(RuntimeCheckerError):
    """Invalid configuration. Fatal at startup, no cycle is run."""


class RetrievalError(RuntimeCheckerError):
    """Listing instances failed. Aborts the current cycle only."""


class TerminationError(RuntimeCheckerError):
    """A single instance could not be terminated."""

    def __init__(self, instance_id: str, message: str):
        super().__init__(f"Failed to terminate instance {instance_id}: {message}")
        self.instance_id = instance_id
        self.reason = message


class NotificationError(RuntimeCheckerError):
    """Publishing the report failed. Logged and swallowed by the notifier."""
