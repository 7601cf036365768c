"""Bucket commits into a dense per-interval, per-author matrix."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from ..documents import TimeSeriesDocument, commits_key, edits_key, make_point
from ..intervals import DateRange, Granularity, interval_label, interval_labels
from ..logging_config import get_logger
from .models import CommitRecord

logger = get_logger(__name__)


def bucketize(
    commits: Iterable[CommitRecord],
    date_range: DateRange,
    granularity: Granularity,
) -> TimeSeriesDocument:
    """Accumulate commit and edit counts per author and interval.

    Every interval of *date_range* is present, including empty ones, and
    every author with at least one commit in range has both counts at
    every interval. Commits whose bucket lies outside the range are
    skipped. A commit is bucketed by the calendar date of its own
    timestamp.
    """
    labels = interval_labels(date_range, granularity)
    in_range = set(labels)

    commit_counts: dict[str, dict[str, int]] = {}
    edit_counts: dict[str, dict[str, int]] = {}
    skipped = 0

    for commit in commits:
        label = interval_label(commit.committed_at.date(), granularity)
        if label not in in_range:
            skipped += 1
            continue
        if commit.author not in commit_counts:
            commit_counts[commit.author] = defaultdict(int)
            edit_counts[commit.author] = defaultdict(int)
        commit_counts[commit.author][label] += 1
        edit_counts[commit.author][label] += commit.edits

    if skipped:
        logger.debug("Skipped %d commit(s) outside %s..%s", skipped, date_range.start, date_range.end)

    authors = list(commit_counts)
    data_points = []
    for label in labels:
        point = make_point(label)
        for author in authors:
            point[commits_key(author)] = commit_counts[author].get(label, 0)
            point[edits_key(author)] = edit_counts[author].get(label, 0)
        data_points.append(point)

    return TimeSeriesDocument(
        authors=authors,
        data_points=data_points,
        config={
            "interval": granularity.value,
            "startDate": date_range.start.isoformat(),
            "endDate": date_range.end.isoformat(),
        },
    )
