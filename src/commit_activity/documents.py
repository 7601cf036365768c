"""Time-series documents: the artifact written by the collector.

A document serializes as::

    {
      "data": [
        {"interval": "2024-01", "month": "2024-01",
         "Alice_commits": 3, "Alice_edits": 120},
        ...
      ],
      "authors": ["Alice"],
      "config": {"interval": "month", "startDate": "2024-01-01", "endDate": "2024-03-31"}
    }

``month`` duplicates ``interval`` for readers of the first artifact format.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from .exceptions import InvalidDocumentError

INTERVAL_KEY = "interval"
LEGACY_INTERVAL_KEY = "month"
LABEL_KEYS = (INTERVAL_KEY, LEGACY_INTERVAL_KEY)

DataPoint = dict[str, Any]


def commits_key(author: str) -> str:
    return f"{author}_commits"


def edits_key(author: str) -> str:
    return f"{author}_edits"


def interval_of(point: Mapping[str, Any]) -> Optional[str]:
    """Interval label of a data point, preferring the current key."""
    label = point.get(INTERVAL_KEY) or point.get(LEGACY_INTERVAL_KEY)
    return label if isinstance(label, str) and label else None


def make_point(label: str) -> DataPoint:
    return {INTERVAL_KEY: label, LEGACY_INTERVAL_KEY: label}


@dataclass(frozen=True, eq=False)
class TimeSeriesDocument:
    """Per-interval commit and edit counts for a set of authors.

    Documents are treated as immutable once built; transformations return
    new documents. Two documents are equal when they hold the same author
    set, data points and config, whatever their subclass. Documents are
    not hashable.
    """

    authors: list[str]
    data_points: list[DataPoint]
    config: dict[str, Any] = field(default_factory=dict)

    __hash__ = None  # type: ignore[assignment]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeSeriesDocument):
            return NotImplemented
        return (
            set(self.authors) == set(other.authors)
            and self.data_points == other.data_points
            and self.config == other.config
        )

    @property
    def intervals(self) -> list[str]:
        return [interval_of(p) or "" for p in self.data_points]

    @property
    def granularity(self) -> Optional[str]:
        return self.config.get("interval")

    def series(self, author: str, metric: str = "commits") -> list[int]:
        """Counts for one author across all intervals (0 where absent)."""
        key = commits_key(author) if metric == "commits" else edits_key(author)
        return [int(p.get(key, 0)) for p in self.data_points]

    def is_dense(self) -> bool:
        """True when every point carries exactly both count keys per author."""
        expected = {commits_key(a) for a in self.authors} | {edits_key(a) for a in self.authors}
        for point in self.data_points:
            counts = {k for k in point if k not in LABEL_KEYS}
            if counts != expected:
                return False
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [dict(p) for p in self.data_points],
            "authors": list(self.authors),
            "config": dict(self.config),
        }

    @classmethod
    def from_dict(cls, data: Any, source: Optional[str] = None) -> TimeSeriesDocument:
        """Validate and copy a decoded JSON document.

        Accepts the point list under ``data`` or ``dataPoints``. Count
        values must be non-negative integers; missing count keys are
        allowed and read as zero.

        Raises:
            InvalidDocumentError: If the document does not have the
                expected shape. Nothing is returned in that case.
        """
        if not isinstance(data, Mapping):
            raise InvalidDocumentError("document must be a JSON object", source)

        if "authors" not in data:
            raise InvalidDocumentError("missing 'authors'", source)
        authors = data["authors"]
        if not isinstance(authors, list) or not all(isinstance(a, str) for a in authors):
            raise InvalidDocumentError("'authors' must be a list of strings", source)
        if len(set(authors)) != len(authors):
            raise InvalidDocumentError("'authors' contains duplicates", source)

        if "data" in data:
            points = data["data"]
        elif "dataPoints" in data:
            points = data["dataPoints"]
        else:
            raise InvalidDocumentError("missing 'data'", source)
        if not isinstance(points, list):
            raise InvalidDocumentError("'data' must be a list", source)

        config = data.get("config", {})
        if not isinstance(config, Mapping):
            raise InvalidDocumentError("'config' must be an object", source)

        return cls(
            authors=list(authors),
            data_points=[_validated_point(p, i, source) for i, p in enumerate(points)],
            config=dict(config),
        )


@dataclass(frozen=True, eq=False)
class ReconciledDocument(TimeSeriesDocument):
    """A document re-aggregated by author reconciliation.

    ``source`` points back at the document it was derived from. It is not
    part of equality, repr or serialization.
    """

    source: Optional[TimeSeriesDocument] = field(default=None, compare=False, repr=False)


def _validated_point(point: Any, index: int, source: Optional[str]) -> DataPoint:
    if not isinstance(point, Mapping):
        raise InvalidDocumentError(f"data point {index} is not an object", source)
    if interval_of(point) is None:
        raise InvalidDocumentError(f"data point {index} has no interval label", source)
    for key, value in point.items():
        if key in LABEL_KEYS:
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidDocumentError(
                f"data point {index} has invalid count for '{key}'", source
            )
    return dict(point)
