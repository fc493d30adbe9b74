"""Data models for issues and comments exchanged with the GitHub API.

These are plain snapshots of the remote objects. Nothing is persisted; the
tracker adapter builds them from PyGithub objects and the migrator only reads
them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    import github.Issue
    import github.IssueComment


@dataclass
class Issue:
    """An issue as read from (or created in) a repository."""

    number: int
    title: str
    body: str
    state: Literal["open", "closed"]
    author: str
    created_at: datetime | None = None
    html_url: str = ""
    labels: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)
    is_pull_request: bool = False

    @classmethod
    def from_github(cls, gh_issue: github.Issue.Issue) -> Issue:
        return cls(
            number=gh_issue.number,
            title=gh_issue.title,
            body=gh_issue.body or "",
            state="closed" if gh_issue.state == "closed" else "open",
            author=gh_issue.user.login,
            created_at=gh_issue.created_at,
            html_url=gh_issue.html_url,
            labels=[label.name for label in gh_issue.labels],
            assignees=[assignee.login for assignee in gh_issue.assignees],
            is_pull_request=gh_issue.pull_request is not None,
        )


@dataclass
class Comment:
    """A comment on an issue."""

    body: str
    author: str
    created_at: datetime | None = None
    html_url: str = ""

    @classmethod
    def from_github(cls, gh_comment: github.IssueComment.IssueComment) -> Comment:
        return cls(
            body=gh_comment.body or "",
            author=gh_comment.user.login,
            created_at=gh_comment.created_at,
            html_url=gh_comment.html_url,
        )


@dataclass(frozen=True)
class RateLimitStatus:
    """Core API rate limit as last reported by GitHub."""

    limit: int
    remaining: int
    reset: datetime | None


@dataclass(frozen=True)
class MigrationOutcome:
    """A successfully migrated issue."""

    source: Issue
    destination: Issue
