from __future__ import annotations

import datetime as dt
import logging
from typing import TYPE_CHECKING

from github import Auth, Github

from .models import RateLimitStatus

if TYPE_CHECKING:
    from github.Repository import Repository

    from .config import RepoConfig

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)


def get_client(token: str, *, base_url: str, per_page: int) -> Github:
    """Get a GitHub client for the token.

    PyGithub's built-in retry is disabled; abuse rate limits are handled by
    RateLimitGuard so that there is a single retry layer.
    """
    return Github(auth=Auth.Token(token), base_url=base_url, per_page=per_page, retry=None)


def get_repo(client: Github, repo_config: RepoConfig) -> Repository:
    """Get a lazy handle on the repository; no request is made until it is used."""
    return client.get_repo(repo_config.full_name, lazy=True)


def get_rate_limit_status(client: Github) -> RateLimitStatus:
    """Read the core rate limit, fetching it from GitHub if no response has reported it yet."""
    remaining, limit = client.rate_limiting
    reset_epoch = client.rate_limiting_resettime
    reset = dt.datetime.fromtimestamp(reset_epoch, tz=dt.UTC) if reset_epoch else None
    return RateLimitStatus(limit=limit, remaining=remaining, reset=reset)
