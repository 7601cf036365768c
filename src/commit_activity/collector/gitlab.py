"""HTTP client for the GitLab REST API (v4).

Only the two endpoints the collector needs are wrapped:

- GET /projects/{path}                      -> project id
- GET /projects/{id}/repository/commits     -> paginated commits with stats
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional
from urllib.parse import quote, urlparse

import httpx

from ..exceptions import (
    AuthenticationError,
    InvalidInputError,
    NotFoundError,
    UpstreamError,
)
from ..intervals import DateRange
from ..logging_config import get_logger
from .models import CommitRecord, ProjectLocator

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int, Optional[int]], None]


def parse_locator(locator: str, default_gitlab_url: str = "https://gitlab.com") -> ProjectLocator:
    """Parse a repository URL or a bare ``namespace/name`` path.

    Examples:
        >>> parse_locator("https://gitlab.com/group/sub/repo.git")
        ProjectLocator(gitlab_url='https://gitlab.com', path='group/sub/repo')
        >>> parse_locator("group/repo").path
        'group/repo'
    """
    raw = (locator or "").strip()
    if "://" in raw:
        parsed = urlparse(raw)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidInputError("repository", locator, "expected an http(s) URL")
        base = f"{parsed.scheme}://{parsed.netloc}"
        path = parsed.path
    else:
        base = default_gitlab_url.rstrip("/")
        path = raw

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    if path.count("/") < 1 or any(not part for part in path.split("/")):
        raise InvalidInputError("repository", locator, "expected namespace/name")
    return ProjectLocator(gitlab_url=base, path=path)


class GitLabClient:
    """Sequential, rate-limited GitLab client.

    Example usage:
        with GitLabClient("https://gitlab.com", token) as client:
            project_id = client.resolve_project_id("group/repo")
            commits = client.fetch_commits(project_id, date_range)
    """

    DEFAULT_TIMEOUT = 30.0  # seconds
    DEFAULT_PAGE_SIZE = 100
    DEFAULT_PAGE_DELAY = 0.5  # seconds

    def __init__(
        self,
        gitlab_url: str,
        token: Optional[str],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_delay: float = DEFAULT_PAGE_DELAY,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the client.

        Args:
            gitlab_url: Instance base URL, e.g. ``https://gitlab.com``
            token: Personal access token; required
            page_size: Commits per page
            page_delay: Seconds to wait between page requests
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
            sleep: Delay function between pages
        """
        if not token:
            raise AuthenticationError("no access token configured (set GITLAB_TOKEN)")
        self.api_base = gitlab_url.rstrip("/") + "/api/v4"
        self.page_size = page_size
        self.page_delay = page_delay
        self._sleep = sleep
        self._client = httpx.Client(
            base_url=self.api_base,
            headers={"PRIVATE-TOKEN": token},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitLabClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def resolve_project_id(self, project_path: str) -> int:
        """Look up the numeric id of ``namespace/name``.

        Raises:
            AuthenticationError: The token was rejected (401/403)
            NotFoundError: The project does not exist or is not visible
            UpstreamError: Any other failure
        """
        logger.info("Fetching project id for %s", project_path)
        response = self._get(f"/projects/{quote(project_path, safe='')}")
        if response.status_code == 404:
            raise NotFoundError("Project", project_path)
        self._raise_for_status(response)
        try:
            return int(response.json()["id"])
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamError(f"unexpected project payload: {e}", response.status_code)

    def count_commits(self, project_id: int, date_range: DateRange) -> Optional[int]:
        """Total commit count from the ``X-Total`` header, if GitLab sends it."""
        response = self._get(
            f"/projects/{project_id}/repository/commits",
            params={**self._range_params(date_range), "per_page": 1, "page": 1},
        )
        self._raise_for_status(response)
        total = response.headers.get("x-total")
        return int(total) if total and total.isdigit() else None

    def fetch_commits(
        self,
        project_id: int,
        date_range: DateRange,
        progress: Optional[ProgressCallback] = None,
    ) -> list[CommitRecord]:
        """Fetch every commit in *date_range*, one page at a time.

        Stops at the first empty page and sleeps ``page_delay`` between
        pages. Any failure aborts the whole fetch.

        Args:
            project_id: Numeric project id
            date_range: Inclusive date range
            progress: Called as ``progress(page, collected, total)``

        Raises:
            UpstreamError: On any non-success response or transport error
        """
        total = self.count_commits(project_id, date_range)
        commits: list[CommitRecord] = []
        page = 1
        while True:
            if progress is not None:
                progress(page, len(commits), total)
            logger.debug("Fetching commits page %d (%d collected)", page, len(commits))
            response = self._get(
                f"/projects/{project_id}/repository/commits",
                params={
                    **self._range_params(date_range),
                    "per_page": self.page_size,
                    "page": page,
                    "all": "true",
                    "with_stats": "true",
                },
            )
            self._raise_for_status(response)
            batch = self._json_list(response)
            if not batch:
                break
            commits.extend(CommitRecord.from_api(item) for item in batch)
            page += 1
            self._sleep(self.page_delay)

        logger.info("Fetched %d commits in %d page(s)", len(commits), page - 1)
        return commits

    def _get(self, url: str, params: Optional[dict[str, Any]] = None) -> httpx.Response:
        try:
            return self._client.get(url, params=params)
        except httpx.TimeoutException as exc:
            raise UpstreamError(f"request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"unable to reach {self.api_base}: {exc}") from exc

    @staticmethod
    def _range_params(date_range: DateRange) -> dict[str, Any]:
        return {"since": date_range.since, "until": date_range.until}

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.status_code in (401, 403):
            raise AuthenticationError(f"GitLab answered HTTP {response.status_code}")
        if not response.is_success:
            raise UpstreamError(
                f"GitLab answered HTTP {response.status_code}", response.status_code
            )

    @staticmethod
    def _json_list(response: httpx.Response) -> list[dict[str, Any]]:
        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"invalid JSON from GitLab: {e}", response.status_code)
        if not isinstance(data, list):
            raise UpstreamError("expected a list of commits", response.status_code)
        return data
