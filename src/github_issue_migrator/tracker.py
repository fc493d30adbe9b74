"""
Issue tracker adapter around a PyGithub repository.

Every read returns plain models (see models.py) and every write goes through
the RateLimitGuard, so callers never deal with PyGithub objects or abuse rate
limits directly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Literal

from . import github_utils as ghu
from .models import Comment, Issue, RateLimitStatus
from .pagination import iter_paginated_list
from .rate_limit import RateLimitGuard

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from github import Github
    from github.Issue import Issue as GithubIssue
    from github.Repository import Repository

    from .config import RepoConfig

logger: logging.Logger = logging.getLogger(__name__)


class IssueTracker:
    """Issues and comments of one repository, accessed with one credential."""

    repo_config: RepoConfig

    def __init__(
        self,
        client: Github,
        repo: Repository,
        repo_config: RepoConfig,
        *,
        guard: RateLimitGuard | None = None,
    ) -> None:
        self._client = client
        self._repo = repo
        self.repo_config = repo_config
        self._guard = guard or RateLimitGuard()
        self._gh_issues: dict[int, GithubIssue] = {}

    @classmethod
    def connect(
        cls,
        repo_config: RepoConfig,
        *,
        token: str | None = None,
        per_page: int,
        guard: RateLimitGuard | None = None,
    ) -> IssueTracker:
        """Build a tracker for the repository, authenticating with ``token`` or the repository's own token."""
        client = ghu.get_client(token or repo_config.token, base_url=repo_config.api_url, per_page=per_page)
        return cls(client, ghu.get_repo(client, repo_config), repo_config, guard=guard)

    @property
    def full_name(self) -> str:
        return self.repo_config.full_name

    def get_issue(self, number: int) -> Issue:
        return Issue.from_github(self._repo.get_issue(number))

    def iter_issues(
        self,
        *,
        state: Literal["open", "closed", "all"] = "open",
        labels: Sequence[str] | None = None,
    ) -> Iterator[Issue]:
        """Yield issues (and pull requests, which GitHub lists as issues) oldest first.

        Multiple labels are combined with AND by GitHub.
        """
        kwargs: dict[str, Any] = {"state": state, "sort": "created", "direction": "asc"}
        if labels:
            kwargs["labels"] = list(labels)
        for gh_issue in iter_paginated_list(self._repo.get_issues(**kwargs)):
            yield Issue.from_github(gh_issue)

    def _get_gh_issue(self, number: int) -> GithubIssue:
        """PyGithub issue object, fetched at most once per tracker."""
        gh_issue = self._gh_issues.get(number)
        if gh_issue is None:
            gh_issue = self._gh_issues[number] = self._repo.get_issue(number)
        return gh_issue

    def iter_comments(self, number: int) -> Iterator[Comment]:
        """Yield the comments of an issue in creation order."""
        gh_issue = self._get_gh_issue(number)
        for gh_comment in iter_paginated_list(gh_issue.get_comments()):
            yield Comment.from_github(gh_comment)

    def create_issue(self, *, title: str, body: str, labels: Sequence[str], assignees: Sequence[str]) -> Issue:
        gh_issue = self._guard.call(
            self._repo.create_issue,
            title=title,
            body=body,
            labels=list(labels),
            assignees=list(assignees),
        )
        self._gh_issues[gh_issue.number] = gh_issue
        logger.debug(f"Created issue {self.full_name}#{gh_issue.number}")
        return Issue.from_github(gh_issue)

    def create_comment(self, number: int, body: str) -> None:
        gh_issue = self._get_gh_issue(number)
        _ = self._guard.call(gh_issue.create_comment, body)
        logger.debug(f"Commented on {self.full_name}#{number}")

    def close_issue(self, number: int) -> None:
        gh_issue = self._get_gh_issue(number)
        self._guard.call(gh_issue.edit, state="closed")
        logger.debug(f"Closed {self.full_name}#{number}")

    def rate_limit_status(self) -> RateLimitStatus:
        return ghu.get_rate_limit_status(self._client)
