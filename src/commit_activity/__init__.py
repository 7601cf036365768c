"""
Commit Activity - per-author commit statistics from GitLab

Collects commits and edits per author over time into JSON artifacts,
serves them to a dashboard, and reconciles author-name variants into
canonical identities.
"""

__version__ = "0.2.0"

from .documents import ReconciledDocument, TimeSeriesDocument
from .intervals import DateRange, Granularity
from .reconciler import author_totals, reconcile

__all__ = [
    "TimeSeriesDocument",
    "ReconciledDocument",
    "DateRange",
    "Granularity",
    "reconcile",  # Main entry point for identity merging
    "author_totals",
]
