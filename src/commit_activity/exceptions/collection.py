"""Collection errors: credentials, missing resources, upstream failures."""

from typing import Optional

from .base import CommitActivityError


class CollectionError(CommitActivityError):
    """Base class for errors that abort a collection run."""

    pass


class AuthenticationError(CollectionError):
    """Raised when the credential is missing or rejected by the remote API."""

    def __init__(self, reason: str):
        super().__init__("Authentication failed", details={"reason": reason})
        self.reason = reason


class NotFoundError(CollectionError):
    """Raised when a repository, data directory or artifact does not exist."""

    def __init__(self, kind: str, name: str):
        super().__init__(f"{kind} not found: {name}", details={"kind": kind, "name": name})
        self.kind = kind
        self.name = name


class UpstreamError(CollectionError):
    """Raised when the remote API fails or answers with a non-success status."""

    def __init__(self, reason: str, status_code: Optional[int] = None):
        details = {"reason": reason}
        if status_code is not None:
            details["status"] = str(status_code)

        super().__init__("Upstream request failed", details=details)
        self.reason = reason
        self.status_code = status_code
