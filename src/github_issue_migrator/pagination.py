"""
Page-by-page iteration over GitHub list endpoints.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from github.PaginatedList import PaginatedList

logger: logging.Logger = logging.getLogger(__name__)

T = TypeVar("T")


def iter_pages(fetch_page: Callable[[int], Sequence[T]]) -> Iterator[T]:
    """Yield every item of a paged collection, fetching pages lazily.

    Pages are numbered from 1. Iteration stops at the first empty page, so an
    endpoint that never returns one is iterated forever. Every call starts over
    at page 1.
    """
    page = 1
    while True:
        items = fetch_page(page)
        if not items:
            logger.debug(f"Page {page} is empty, stopping")
            return
        logger.debug(f"Fetched page {page} with {len(items)} items")
        yield from items
        page += 1


def iter_paginated_list(paginated: PaginatedList[T]) -> Iterator[T]:
    """Iterate a PyGithub PaginatedList one explicit page request at a time."""
    # PaginatedList.get_page() is 0-based
    return iter_pages(lambda page: paginated.get_page(page - 1))
