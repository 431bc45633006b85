"""
GitHub REST API client for GitHub Pulse Overview.

Lists the pull requests of each repository with one request per
repository. Requests for several repositories run concurrently; results
come back in the order the repositories were given.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

import requests

from . import __version__


logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_WORKERS = 8


@dataclass
class PullRequestRecord:
    """The fields of a GitHub pull request the summary needs."""
    number: int
    title: str
    url: str
    created_at: str | None
    updated_at: str | None
    merged_at: str | None = None
    closed_at: str | None = None


@dataclass
class RepoPulls:
    """Pull requests of one repository, or the error that prevented fetching them."""
    repo: str
    pulls: list[PullRequestRecord] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class GitHubAPIError(Exception):
    """Error from GitHub API."""
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def split_repo(repo: str) -> tuple[str, str]:
    """Split "owner/name" into its two parts."""
    owner, _, name = repo.partition("/")
    return owner, name


class GitHubClient:
    """GitHub REST API client."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = GITHUB_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

        if self.token:
            self.session.headers["Authorization"] = f"Bearer {self.token}"

        self.session.headers["Accept"] = "application/vnd.github+json"
        self.session.headers["X-GitHub-Api-Version"] = GITHUB_API_VERSION
        self.session.headers["User-Agent"] = f"github-pulse-overview/{__version__}"

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> requests.Response:
        """Make an API request, raising GitHubAPIError on failure."""
        url = f"{self.base_url}{endpoint}"

        try:
            response = self.session.request(method, url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise GitHubAPIError(f"Request failed: {e}")

        if response.status_code >= 400:
            message = response.text
            try:
                message = response.json().get("message", message)
            except (ValueError, AttributeError):
                pass
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {message}",
                response.status_code,
            )

        return response

    def list_pulls(self, repo: str, state: str = "all") -> list[PullRequestRecord]:
        """
        List pull requests for a repository.

        Args:
            repo: Full repository name (owner/repo)
            state: PR state filter (open, closed, all)

        Returns:
            List of PullRequestRecord objects, first page only
        """
        owner, name = split_repo(repo)
        endpoint = f"/repos/{owner}/{name}/pulls"

        logger.debug("Fetching pull requests for %s", repo)
        response = self._request("GET", endpoint, params={"state": state})
        try:
            items = response.json()
        except ValueError as e:
            raise GitHubAPIError(f"Unexpected response for {repo}: body is not JSON ({e})", response.status_code)

        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise GitHubAPIError(
                f"Unexpected response for {repo}: expected a list of pull requests",
                response.status_code,
            )
        logger.debug("Fetched %d pull requests for %s", len(items), repo)

        return [self._parse_pr(item) for item in items]

    def _parse_pr(self, data: dict[str, Any]) -> PullRequestRecord:
        """Parse raw PR data into a PullRequestRecord."""
        return PullRequestRecord(
            number=data.get("number", 0),
            title=data.get("title", ""),
            url=data.get("html_url", ""),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            merged_at=data.get("merged_at"),
            closed_at=data.get("closed_at"),
        )


def fetch_all_pulls(
    client: GitHubClient,
    repos: list[str],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[RepoPulls]:
    """
    Fetch pull requests of every repository concurrently.

    A failure only affects its own repository: the error is stored on
    that repository's RepoPulls and the others are still returned.

    Returns:
        One RepoPulls per repository, in the order of ``repos``
    """
    if not repos:
        return []

    results: list[RepoPulls] = []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(repos)))) as executor:
        futures = [executor.submit(client.list_pulls, repo) for repo in repos]

        for repo, future in zip(repos, futures):
            try:
                results.append(RepoPulls(repo=repo, pulls=future.result()))
            except GitHubAPIError as e:
                logger.debug("Fetching %s failed: %s", repo, e)
                results.append(RepoPulls(repo=repo, error=e))

    return results
