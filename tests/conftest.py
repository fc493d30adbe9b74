"""
Pytest configuration and shared fixtures.

FakeTracker stands in for IssueTracker in migrator and CLI tests: it keeps
issues and comments in memory and records every write in a shared ``calls``
list, so tests can assert on the exact order of API operations across the
source, destination and per-user trackers.
"""

from __future__ import annotations

import datetime as dt
import itertools
from dataclasses import replace
from typing import TYPE_CHECKING, Any

import pytest
from github import GithubException

from github_issue_migrator.config import RepoConfig
from github_issue_migrator.migrator import MigrationContext
from github_issue_migrator.models import Comment, Issue, RateLimitStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

CREATED_AT = dt.datetime(2024, 1, 15, 10, 30, 45, tzinfo=dt.UTC)

Call = tuple[str, str, int, Any]


def _make_issue(number: int, **overrides: Any) -> Issue:
    values: dict[str, Any] = {
        "number": number,
        "title": f"Issue {number}",
        "body": f"Body of issue {number}",
        "state": "open",
        "author": "alice",
        "created_at": CREATED_AT,
        "html_url": f"https://github.com/acme/old-repo/issues/{number}",
    }
    values.update(overrides)
    return Issue(**values)


def _make_comment(body: str, author: str = "bob", **overrides: Any) -> Comment:
    values: dict[str, Any] = {
        "body": body,
        "author": author,
        "created_at": CREATED_AT,
        "html_url": "https://github.com/acme/old-repo/issues/1#issuecomment-1",
    }
    values.update(overrides)
    return Comment(**values)


class FakeTracker:
    """In-memory tracker recording writes as (operation, identity, number, detail)."""

    def __init__(self, repo_config: RepoConfig, calls: list[Call], identity: str | None = None) -> None:
        self.repo_config = repo_config
        self.identity = identity or repo_config.full_name
        self.calls = calls
        self.issues: dict[int, Issue] = {}
        self.comments: dict[int, list[Comment]] = {}
        self.fail_on: set[str] = set()
        self._numbers = itertools.count(100)

    @property
    def full_name(self) -> str:
        return self.repo_config.full_name

    def as_user(self, username: str) -> FakeTracker:
        """Another credential on the same repository, sharing its state."""
        user_tracker = FakeTracker(self.repo_config, self.calls, identity=f"{self.full_name} as {username}")
        user_tracker.issues = self.issues
        user_tracker.comments = self.comments
        user_tracker.fail_on = self.fail_on
        user_tracker._numbers = self._numbers
        return user_tracker

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise GithubException(500, {"message": f"{operation} failed"}, None)

    def add_issue(self, issue: Issue, comments: Sequence[Comment] = ()) -> None:
        self.issues[issue.number] = issue
        self.comments[issue.number] = list(comments)

    def get_issue(self, number: int) -> Issue:
        if number not in self.issues:
            raise GithubException(404, {"message": "Not Found"}, None)
        return self.issues[number]

    def iter_issues(self, *, state: str = "open", labels: Sequence[str] | None = None) -> Iterator[Issue]:
        self.calls.append(("iter_issues", self.identity, 0, (state, list(labels or []))))
        for issue in list(self.issues.values()):
            if state != "all" and issue.state != state:
                continue
            if labels and not set(labels) <= set(issue.labels):
                continue
            yield issue

    def iter_comments(self, number: int) -> Iterator[Comment]:
        yield from self.comments.get(number, [])

    def create_issue(self, *, title: str, body: str, labels: Sequence[str], assignees: Sequence[str]) -> Issue:
        self._maybe_fail("create_issue")
        number = next(self._numbers)
        issue = Issue(
            number=number,
            title=title,
            body=body,
            state="open",
            author=self.identity,
            html_url=f"https://github.com/{self.full_name}/issues/{number}",
            labels=list(labels),
            assignees=list(assignees),
        )
        self.issues[number] = issue
        self.comments[number] = []
        self.calls.append(("create_issue", self.identity, number, title))
        return issue

    def create_comment(self, number: int, body: str) -> None:
        self._maybe_fail("create_comment")
        self.comments.setdefault(number, []).append(_make_comment(body, author=self.identity))
        self.calls.append(("create_comment", self.identity, number, body))

    def close_issue(self, number: int) -> None:
        self._maybe_fail("close_issue")
        self.issues[number] = replace(self.issues[number], state="closed")
        self.calls.append(("close_issue", self.identity, number, None))

    def rate_limit_status(self) -> RateLimitStatus:
        return RateLimitStatus(limit=5000, remaining=4999, reset=None)


@pytest.fixture
def make_issue() -> Callable[..., Issue]:
    return _make_issue


@pytest.fixture
def make_comment() -> Callable[..., Comment]:
    return _make_comment


@pytest.fixture
def source_config() -> RepoConfig:
    return RepoConfig(owner="acme", name="old-repo", token="source-token")  # noqa: S106


@pytest.fixture
def destination_config() -> RepoConfig:
    return RepoConfig(owner="acme", name="new-repo", token="destination-token")  # noqa: S106


@pytest.fixture
def calls() -> list[Call]:
    """Write log shared by all fake trackers of a test."""
    return []


@pytest.fixture
def source(source_config: RepoConfig, calls: list[Call]) -> FakeTracker:
    return FakeTracker(source_config, calls)


@pytest.fixture
def destination(destination_config: RepoConfig, calls: list[Call]) -> FakeTracker:
    return FakeTracker(destination_config, calls)


@pytest.fixture
def context(source: FakeTracker, destination: FakeTracker) -> MigrationContext:
    """Context where only "carol" has a personal token."""
    return MigrationContext(
        source=source,  # pyright: ignore[reportArgumentType]
        destination=destination,  # pyright: ignore[reportArgumentType]
        user_destinations={"carol": destination.as_user("carol")},  # pyright: ignore[reportArgumentType]
    )
