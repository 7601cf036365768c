"""Input and document validation errors."""

from typing import Any, Optional

from .base import CommitActivityError


class InvalidInputError(CommitActivityError):
    """Raised for rejected arguments: unsafe filenames, bad dates, bad groups."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            f"Invalid {field}: {value!r}",
            details={"field": field, "reason": reason},
        )
        self.field = field
        self.value = value
        self.reason = reason


class InvalidDocumentError(CommitActivityError):
    """Raised when a time-series document does not have the expected shape."""

    def __init__(self, reason: str, source: Optional[str] = None):
        details = {"reason": reason}
        if source:
            details["source"] = source

        super().__init__("Invalid time-series document", details=details)
        self.reason = reason
        self.source = source


class ArtifactParseError(InvalidDocumentError):
    """Raised when an artifact file does not contain valid JSON."""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"Invalid JSON file: {reason}", source=filename)
        self.filename = filename
