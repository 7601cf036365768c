"""Artifact storage errors."""

from .base import CommitActivityError


class StorageError(CommitActivityError):
    """Raised when the filesystem fails while listing or reading artifacts.

    ``reason`` may mention local paths; it is kept in details and never
    sent to HTTP clients.
    """

    def __init__(self, operation: str, reason: str):
        super().__init__(f"Unable to {operation}", details={"reason": reason})
        self.operation = operation
        self.reason = reason
