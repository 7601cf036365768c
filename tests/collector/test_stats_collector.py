"""Tests for the end-to-end collection run."""

import datetime as dt
import json

import httpx
import pytest

from commit_activity.collector import StatsCollector
from commit_activity.config import CollectorConfig
from commit_activity.exceptions import AuthenticationError, UpstreamError
from commit_activity.intervals import DateRange, Granularity

RANGE = DateRange(dt.date(2024, 1, 1), dt.date(2024, 2, 29))


def gitlab_handler(commit_payloads, hosts=None, fail_commits=False):
    def handler(request: httpx.Request) -> httpx.Response:
        if hosts is not None:
            hosts.append(request.url.host)
        if not request.url.path.endswith("/repository/commits"):
            return httpx.Response(200, json={"id": 7})
        if fail_commits:
            return httpx.Response(500, text="boom")
        if request.url.params["per_page"] == "1":
            return httpx.Response(200, json=[], headers={"X-Total": str(len(commit_payloads))})
        page = int(request.url.params["page"])
        return httpx.Response(200, json=commit_payloads if page == 1 else [])

    return handler


def make_collector(tmp_path, handler, **config):
    settings = CollectorConfig(token="t0k3n", output_dir=str(tmp_path / "data"), **config)
    return StatsCollector(settings, transport=httpx.MockTransport(handler), sleep=lambda s: None)


class TestStatsCollector:
    def test_writes_artifact(self, tmp_path, commit_payloads):
        collector = make_collector(tmp_path, gitlab_handler(commit_payloads))

        result = collector.collect("https://gitlab.com/group/webapp", RANGE, Granularity.MONTH)

        assert result.path == tmp_path / "data" / "webapp_2024-01-01_to_2024-02-29_month.json"
        assert result.commit_count == 3
        assert result.interval_count == 2

        saved = json.loads(result.path.read_text())
        assert saved["authors"] == ["Bob", "Alice"]
        assert saved["config"] == {
            "interval": "month",
            "startDate": "2024-01-01",
            "endDate": "2024-02-29",
        }
        assert saved["data"] == [
            {
                "interval": "2024-01",
                "month": "2024-01",
                "Bob_commits": 0,
                "Bob_edits": 0,
                "Alice_commits": 2,
                "Alice_edits": 25,
            },
            {
                "interval": "2024-02",
                "month": "2024-02",
                "Bob_commits": 1,
                "Bob_edits": 10,
                "Alice_commits": 0,
                "Alice_edits": 0,
            },
        ]

    def test_rerun_overwrites(self, tmp_path, commit_payloads):
        collector = make_collector(tmp_path, gitlab_handler(commit_payloads))

        first = collector.collect("group/webapp", RANGE, Granularity.WEEK)
        second = collector.collect("group/webapp", RANGE, Granularity.WEEK)

        assert first.path == second.path
        assert [p.name for p in (tmp_path / "data").iterdir()] == [first.path.name]

    def test_failure_writes_nothing(self, tmp_path, commit_payloads):
        collector = make_collector(tmp_path, gitlab_handler(commit_payloads, fail_commits=True))

        with pytest.raises(UpstreamError):
            collector.collect("group/webapp", RANGE, Granularity.DAY)

        assert not (tmp_path / "data").exists()

    def test_missing_token(self, tmp_path):
        settings = CollectorConfig(output_dir=str(tmp_path))
        with pytest.raises(AuthenticationError):
            StatsCollector(settings).collect("group/webapp", RANGE, Granularity.DAY)

    def test_self_hosted_instance(self, tmp_path, commit_payloads):
        hosts: list[str] = []
        collector = make_collector(tmp_path, gitlab_handler(commit_payloads, hosts=hosts))

        collector.collect("https://git.example.org/team/webapp", RANGE, Granularity.MONTH)

        assert set(hosts) == {"git.example.org"}
