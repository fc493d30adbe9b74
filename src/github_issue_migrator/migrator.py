"""
Migration of issues and their comments between two GitHub repositories.

Per-issue flow
--------------
1. Build the destination body and pick the posting credential
2. Create the destination issue with a "[<source name>] " title prefix
3. Replay the source comments, oldest first, on the new issue
4. Comment on the source issue with a link to the new one
5. Close the source issue
6. Close the destination issue if the source issue was closed

Issues are migrated strictly one after another. A batch stops at the first
issue that fails, leaving the remaining issues untouched.

Error Handling
--------------
Any error part-way through an issue leaves it partially migrated: the
destination issue may exist with some of its comments, while the source issue
is neither back-linked nor closed. Nothing is rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from github import GithubException
from rich.console import Console

from .issue_builder import get_body_and_target
from .models import MigrationOutcome
from .rate_limit import RateLimitGuard
from .tracker import IssueTracker

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from .config import MigrationConfig
    from .models import Comment, Issue

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationContext:
    """Trackers used by a migration run."""

    source: IssueTracker
    destination: IssueTracker
    user_destinations: Mapping[str, IssueTracker] = field(default_factory=dict)
    """Destination trackers authenticated as known source authors, by username."""

    @classmethod
    def from_config(cls, config: MigrationConfig, *, guard: RateLimitGuard | None = None) -> MigrationContext:
        guard = guard or RateLimitGuard()
        source = IssueTracker.connect(config.source, per_page=config.per_page, guard=guard)
        destination = IssueTracker.connect(config.destination, per_page=config.per_page, guard=guard)
        user_destinations = {
            user.username: IssueTracker.connect(
                config.destination, token=user.token, per_page=config.per_page, guard=guard
            )
            for user in config.users
        }
        return cls(source=source, destination=destination, user_destinations=user_destinations)


@dataclass
class BatchResult:
    """Result of migrating a list of issues."""

    migrated: list[MigrationOutcome] = field(default_factory=list)
    failed: Issue | None = None
    remaining: list[Issue] = field(default_factory=list)
    """Issues not attempted because the batch stopped at ``failed``."""

    @property
    def success(self) -> bool:
        return self.failed is None


class IssueMigrator:
    """Moves issues from the source tracker to the destination tracker."""

    def __init__(self, context: MigrationContext, *, console: Console | None = None) -> None:
        self.context = context
        self.console = console or Console()

    @property
    def source_name(self) -> str:
        return self.context.source.full_name

    @property
    def destination_name(self) -> str:
        return self.context.destination.full_name

    def destination_title(self, issue: Issue) -> str:
        return f"[{self.context.source.repo_config.name}] {issue.title}"

    def find_issues_by_labels(self, labels: Sequence[str]) -> list[Issue]:
        """Open issues carrying all of the labels, pull requests excluded."""
        return [
            issue
            for issue in self.context.source.iter_issues(state="open", labels=labels)
            if not issue.is_pull_request
        ]

    def find_all_issues(self) -> list[Issue]:
        """Every open and closed issue, pull requests excluded, sorted by number."""
        issues = [issue for issue in self.context.source.iter_issues(state="all") if not issue.is_pull_request]
        issues.sort(key=lambda issue: issue.number)
        return issues

    def migrate_comment(self, destination_number: int, comment: Comment) -> None:
        target = get_body_and_target(comment, self.context)
        target.tracker.create_comment(destination_number, target.body)
        logger.debug(f"Migrated comment by {comment.author} to {self.destination_name}#{destination_number}")

    def _log_rate_limit(self, tracker: IssueTracker) -> None:
        try:
            status = tracker.rate_limit_status()
        except GithubException as e:
            # Enterprise instances without rate limiting answer 404
            logger.debug(f"Rate limit status unavailable: {e}")
            return
        logger.debug(f"Rate limit: {status.remaining}/{status.limit} remaining, resets at {status.reset}")

    def _migrate_issue(self, issue: Issue) -> Issue:
        target = get_body_and_target(issue, self.context)

        self._log_rate_limit(target.tracker)

        new_issue = target.tracker.create_issue(
            title=self.destination_title(issue),
            body=target.body,
            labels=issue.labels,
            assignees=issue.assignees,
        )
        logger.info(f"Created {self.destination_name}#{new_issue.number} for {self.source_name}#{issue.number}")

        comment_count = 0
        for comment in self.context.source.iter_comments(issue.number):
            self.migrate_comment(new_issue.number, comment)
            comment_count += 1
        logger.info(f"Migrated {comment_count} comments of {self.source_name}#{issue.number}")

        self.context.source.create_comment(
            issue.number, f"Issue migrated to {self.destination_name}#{new_issue.number}"
        )
        self.context.source.close_issue(issue.number)

        if issue.state == "closed":
            self.context.destination.close_issue(new_issue.number)
            new_issue.state = "closed"

        return new_issue

    def migrate_issue(self, issue: Issue) -> MigrationOutcome | None:
        """Migrate one issue with its comments.

        Returns None if any error stopped the migration; the error is logged
        and reported, and the issue may be partially migrated.
        """
        try:
            new_issue = self._migrate_issue(issue)
        except Exception as e:
            logger.exception(f"Failed to migrate issue {self.source_name}#{issue.number}")
            self.console.print(
                f"😱 Something went wrong while migrating issue #{issue.number}: {e}",
                style="red",
                markup=False,
            )
            return None

        self.console.print()
        self.console.print(
            f"🍭  Successfully migrated issue from [bold]{self.source_name}#{issue.number}[/bold]"
            f" to [bold]{self.destination_name}#{new_issue.number}[/bold]"
        )
        self.console.print()
        return MigrationOutcome(source=issue, destination=new_issue)

    def migrate_batch(self, issues: Iterable[Issue]) -> BatchResult:
        """Migrate issues one after another, stopping at the first failure."""
        result = BatchResult()
        pending = list(issues)
        for index, issue in enumerate(pending):
            outcome = self.migrate_issue(issue)
            if outcome is None:
                result.failed = issue
                result.remaining = pending[index + 1 :]
                logger.error(
                    f"Stopping batch at {self.source_name}#{issue.number}; {len(result.remaining)} issues not migrated"
                )
                break
            result.migrated.append(outcome)
        return result
