"""Stats collection: fetch, bucket and persist one artifact."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import httpx

from ..config import CollectorConfig
from ..documents import TimeSeriesDocument
from ..intervals import DateRange, Granularity
from ..logging_config import get_logger
from ..storage import ArtifactStore, artifact_filename
from .bucketize import bucketize
from .gitlab import GitLabClient, ProgressCallback, parse_locator

logger = get_logger(__name__)


@dataclass(frozen=True)
class CollectionResult:
    document: TimeSeriesDocument
    path: Path
    commit_count: int

    @property
    def interval_count(self) -> int:
        return len(self.document.data_points)


class StatsCollector:
    """Collect commit statistics for one repository into an artifact.

    All settings, including the access token, come from *config*; nothing
    is read from the environment while collecting. Errors propagate and
    leave no artifact behind.
    """

    def __init__(
        self,
        config: CollectorConfig,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.config = config
        self._transport = transport
        self._sleep = sleep

    def collect(
        self,
        locator: str,
        date_range: DateRange,
        granularity: Granularity,
        progress: Optional[ProgressCallback] = None,
    ) -> CollectionResult:
        """Fetch, bucket and write the artifact for *locator*.

        Raises:
            InvalidInputError: If *locator* is not a repository URL or path
            AuthenticationError: If the token is missing or rejected
            NotFoundError: If the project does not exist
            UpstreamError: If any API request fails
        """
        project = parse_locator(locator, self.config.gitlab_url)
        logger.info(
            "Collecting %s from %s to %s by %s",
            project.path,
            date_range.start,
            date_range.end,
            granularity.value,
        )

        kwargs = {}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        with GitLabClient(
            project.gitlab_url,
            self.config.token,
            page_size=self.config.page_size,
            page_delay=self.config.page_delay_seconds,
            timeout=self.config.timeout_seconds,
            transport=self._transport,
            **kwargs,
        ) as client:
            project_id = client.resolve_project_id(project.path)
            commits = client.fetch_commits(project_id, date_range, progress=progress)

        document = bucketize(commits, date_range, granularity)
        store = ArtifactStore(self.config.output_path)
        filename = artifact_filename(project.repo_name, date_range, granularity)
        path = store.write_artifact(filename, document)

        logger.info(
            "Processed %d commits from %d authors into %s",
            len(commits),
            len(document.authors),
            path,
        )
        return CollectionResult(document=document, path=path, commit_count=len(commits))
