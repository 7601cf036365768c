"""Commit collection from GitLab into time-series artifacts."""

from .bucketize import bucketize
from .collector import CollectionResult, StatsCollector
from .gitlab import GitLabClient, parse_locator
from .models import CommitRecord, ProjectLocator

__all__ = [
    "CommitRecord",
    "ProjectLocator",
    "GitLabClient",
    "StatsCollector",
    "CollectionResult",
    "bucketize",
    "parse_locator",
]
