"""
Recovery from GitHub's abuse (secondary) rate limit on write calls.

GitHub answers too many content-creating requests in a short time with a 403
whose payload points at the abuse/secondary rate limit documentation. Other
403s (missing permissions, primary limit on a read) carry different
documentation URLs and are not retried here.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Final, TypeVar

from github import GithubException

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)

T = TypeVar("T")

COOLDOWN_SECONDS: Final[float] = 65.0
_FORBIDDEN: Final[int] = 403
_ABUSE_DOCUMENTATION_MARKERS: Final[tuple[str, ...]] = ("abuse-rate-limits", "secondary-rate-limits")


def is_abuse_rate_limit(exc: Exception) -> bool:
    """Check if an exception is GitHub's abuse/secondary rate limit response."""
    if not isinstance(exc, GithubException) or exc.status != _FORBIDDEN:
        return False
    if not isinstance(exc.data, dict):
        return False
    documentation_url: object = exc.data.get("documentation_url")  # pyright: ignore[reportUnknownMemberType]
    if not isinstance(documentation_url, str):
        return False
    return any(marker in documentation_url for marker in _ABUSE_DOCUMENTATION_MARKERS)


class RateLimitGuard:
    """Re-issues a call after a fixed cooldown whenever it hits the abuse rate limit.

    There is no retry limit: a real abuse rate limit always clears eventually.
    """

    cooldown: float

    def __init__(self, cooldown: float = COOLDOWN_SECONDS, sleep: Callable[[float], None] = time.sleep) -> None:
        self.cooldown = cooldown
        self._sleep = sleep

    def call(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        attempt = 1
        while True:
            try:
                return func(*args, **kwargs)
            except GithubException as e:
                if not is_abuse_rate_limit(e):
                    raise
                logger.warning(
                    f"Hit GitHub abuse rate limit (attempt {attempt}), waiting {self.cooldown:.0f}s before retrying"
                )
                self._sleep(self.cooldown)
                attempt += 1
