"""Tests for bucketing commits into a dense time series."""

import datetime as dt

from commit_activity.collector.bucketize import bucketize
from commit_activity.collector.models import CommitRecord
from commit_activity.intervals import DateRange, Granularity

UTC = dt.timezone.utc


def make_commit(author: str, when: str, additions: int = 0, deletions: int = 0) -> CommitRecord:
    """Create a test commit from an ISO timestamp."""
    return CommitRecord(
        author=author,
        committed_at=dt.datetime.fromisoformat(when),
        additions=additions,
        deletions=deletions,
    )


JANUARY = DateRange(dt.date(2024, 1, 1), dt.date(2024, 1, 31))


class TestBucketize:
    def test_counts_commits_and_edits(self):
        commits = [
            make_commit("Alice", "2024-01-02T10:00:00+00:00", 10, 2),
            make_commit("Alice", "2024-01-02T11:00:00+00:00", 1, 1),
            make_commit("Bob", "2024-01-03T09:00:00+00:00", 0, 4),
        ]

        doc = bucketize(commits, JANUARY, Granularity.DAY)
        point = doc.data_points[1]

        assert point["interval"] == "2024-01-02"
        assert point["Alice_commits"] == 2
        assert point["Alice_edits"] == 14
        assert point["Bob_commits"] == 0

    def test_dense_matrix_with_empty_intervals(self):
        commits = [make_commit("Alice", "2024-01-15T10:00:00+00:00", 3, 0)]

        doc = bucketize(commits, JANUARY, Granularity.DAY)

        assert len(doc.data_points) == 31
        assert doc.is_dense()
        assert doc.series("Alice") == [0] * 14 + [1] + [0] * 16

    def test_no_commits_still_covers_range(self):
        doc = bucketize([], JANUARY, Granularity.WEEK)

        assert doc.authors == []
        assert doc.intervals == ["2024-W01", "2024-W02", "2024-W03", "2024-W04", "2024-W05"]
        assert doc.is_dense()

    def test_weekly_buckets(self):
        commits = [
            make_commit("Alice", "2024-01-08T00:00:00+00:00"),  # Monday, W02
            make_commit("Alice", "2024-01-14T23:59:00+00:00"),  # Sunday, W02
            make_commit("Alice", "2024-01-15T00:00:00+00:00"),  # Monday, W03
        ]

        doc = bucketize(commits, JANUARY, Granularity.WEEK)

        assert doc.series("Alice") == [0, 2, 1, 0, 0]

    def test_bucketed_by_commit_local_date(self):
        commits = [make_commit("Alice", "2024-01-31T23:30:00-05:00")]
        date_range = DateRange(dt.date(2024, 1, 1), dt.date(2024, 2, 29))

        doc = bucketize(commits, date_range, Granularity.MONTH)

        assert doc.series("Alice") == [1, 0]

    def test_out_of_range_commits_are_skipped(self):
        commits = [
            make_commit("Alice", "2024-01-05T10:00:00+00:00"),
            make_commit("Mallory", "2023-12-31T10:00:00+00:00"),
        ]

        doc = bucketize(commits, JANUARY, Granularity.DAY)

        assert doc.authors == ["Alice"]

    def test_authors_in_first_seen_order(self):
        commits = [
            make_commit("Zed", "2024-01-20T10:00:00+00:00"),
            make_commit("Amy", "2024-01-10T10:00:00+00:00"),
            make_commit("Zed", "2024-01-05T10:00:00+00:00"),
        ]
        assert bucketize(commits, JANUARY, Granularity.MONTH).authors == ["Zed", "Amy"]

    def test_config_records_request(self):
        doc = bucketize([], JANUARY, Granularity.MONTH)
        assert doc.config == {"interval": "month", "startDate": "2024-01-01", "endDate": "2024-01-31"}
        assert doc.data_points == [{"interval": "2024-01", "month": "2024-01"}]


class TestCommitRecord:
    def test_from_api_reads_stats(self, commit_payloads):
        record = CommitRecord.from_api(commit_payloads[1])

        assert record.author == "Alice"
        assert record.edits == 25
        assert record.committed_at.date() == dt.date(2024, 1, 20)
        assert record.committed_at.utcoffset() == dt.timedelta(hours=2)

    def test_missing_stats_count_as_zero(self, commit_payloads):
        record = CommitRecord.from_api(commit_payloads[2])
        assert record.additions == 0
        assert record.deletions == 0
