"""Exception hierarchy for Commit Activity."""

from .base import CommitActivityError
from .collection import (
    AuthenticationError,
    CollectionError,
    NotFoundError,
    UpstreamError,
)
from .config import ConfigurationError, InvalidConfigError
from .documents import ArtifactParseError, InvalidDocumentError, InvalidInputError
from .storage import StorageError

__all__ = [
    "CommitActivityError",
    "CollectionError",
    "AuthenticationError",
    "NotFoundError",
    "UpstreamError",
    "InvalidInputError",
    "InvalidDocumentError",
    "ArtifactParseError",
    "StorageError",
    "ConfigurationError",
    "InvalidConfigError",
]
