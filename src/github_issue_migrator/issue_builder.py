"""Build destination issue and comment bodies from source items."""

from __future__ import annotations

import datetime as dt
import re
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from .migrator import MigrationContext
    from .models import Comment, Issue
    from .tracker import IssueTracker

# A bare "#123" preceded by start/whitespace and followed by whitespace/end
_ISSUE_REFERENCE_PATTERN = re.compile(r"(^|\s)#(\d+)(\s|$)")


class PostTarget(NamedTuple):
    """Where and how a migrated item is posted."""

    body: str
    tracker: IssueTracker
    keep_user: bool
    """True when posted with the original author's own credential."""


def format_timestamp(timestamp: dt.datetime | None) -> str:
    """Format a timestamp in a human-readable form.

    Returns e.g. "2024-01-15 10:30:45Z" for UTC and "2024-01-15 10:30:45+05:30"
    for other timezones. Naive timestamps are taken as UTC.
    """
    if timestamp is None:
        return "an unknown time"
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=dt.UTC)
    formatted = timestamp.isoformat(sep=" ", timespec="seconds")
    return formatted.replace("+00:00", "Z")


def fixup_repo_links(markdown_text: str, issues_url: str) -> str:
    """Turn the first bare issue reference into a link to the source repository.

    Only the first "#123" is rewritten; later ones are left as they are.
    """
    return _ISSUE_REFERENCE_PATTERN.sub(
        lambda m: f"{m.group(1)}{issues_url}/{m.group(2)}{m.group(3)}",
        markdown_text,
        count=1,
    )


def attribution_footer(item: Issue | Comment, *, keep_user: bool) -> str:
    posted_at = format_timestamp(item.created_at)
    if keep_user:
        return f"*Originally posted at {posted_at} {item.html_url}*"
    return f"*Originally posted by @{item.author} at {posted_at} {item.html_url}*"


def build_body(item: Issue | Comment, issues_url: str, *, keep_user: bool) -> str:
    """Rewritten body of the item followed by exactly one attribution footer."""
    body = fixup_repo_links(item.body, issues_url)
    return "\n".join([body, "", attribution_footer(item, keep_user=keep_user)])


def get_body_and_target(item: Issue | Comment, context: MigrationContext) -> PostTarget:
    """Decide which credential posts the item and build its body accordingly.

    Authors with a configured token post as themselves, so their footer does
    not mention them. Everyone else is posted by the destination credential
    with an @-mention of the original author.
    """
    issues_url = context.source.repo_config.issues_url
    user_tracker = context.user_destinations.get(item.author)
    if user_tracker is not None:
        return PostTarget(build_body(item, issues_url, keep_user=True), user_tracker, keep_user=True)
    return PostTarget(build_body(item, issues_url, keep_user=False), context.destination, keep_user=False)
