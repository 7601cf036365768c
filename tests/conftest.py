"""Shared test fixtures for Commit Activity tests."""

import pytest

from commit_activity.documents import TimeSeriesDocument


def make_document(authors, rows, interval="month"):
    """Build a document from ``[(label, {author: (commits, edits)})]``.

    Authors missing from a row get zero counts so the result is dense.
    """
    data = []
    for label, counts in rows:
        point = {"interval": label, "month": label}
        for author in authors:
            commits, edits = counts.get(author, (0, 0))
            point[f"{author}_commits"] = commits
            point[f"{author}_edits"] = edits
        data.append(point)
    labels = [label for label, _ in rows]
    return TimeSeriesDocument(
        authors=list(authors),
        data_points=data,
        config={
            "interval": interval,
            "startDate": labels[0] if labels else "",
            "endDate": labels[-1] if labels else "",
        },
    )


@pytest.fixture
def team_document():
    """Three months of activity with an alias pair and a bot."""
    return make_document(
        ["Alice", "alice.smith", "Bob", "ci-bot"],
        [
            ("2024-01", {"Alice": (3, 40), "alice.smith": (1, 5), "Bob": (2, 10)}),
            ("2024-02", {"alice.smith": (4, 60), "ci-bot": (9, 900)}),
            ("2024-03", {"Alice": (1, 1), "Bob": (5, 50), "ci-bot": (1, 2)}),
        ],
    )


@pytest.fixture
def commit_payloads():
    """GitLab ``repository/commits`` entries, newest first."""
    return [
        {
            "id": "c3",
            "author_name": "Bob",
            "committed_date": "2024-02-10T09:00:00.000+00:00",
            "stats": {"additions": 7, "deletions": 3, "total": 10},
        },
        {
            "id": "c2",
            "author_name": "Alice",
            "committed_date": "2024-01-20T18:30:00.000+02:00",
            "stats": {"additions": 20, "deletions": 5, "total": 25},
        },
        {
            "id": "c1",
            "author_name": "Alice",
            "committed_date": "2024-01-02T08:00:00.000+00:00",
        },
    ]
