from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CursorPage:
    data: list[dict[str, Any]] = field(default_factory=list)
    next_cursor: str | None = None


PageFetcher = Callable[[str | None], CursorPage]


def fetch_cursor_page(fetch: PageFetcher, page: int) -> CursorPage:
    """Walk cursors sequentially until the requested 1-based page.

    `fetch` receives `None` for the first page and the previous response's
    `next_cursor` afterwards. If the cursor runs out before `page` is reached
    the last available page is returned.
    """
    if page < 1:
        msg = "page must be >= 1"
        raise ValueError(msg)

    response = fetch(None)
    current = 1
    while current < page:
        if not response.next_cursor:
            logger.info("Cursor exhausted at page=%d before requested page=%d", current, page)
            break
        response = fetch(response.next_cursor)
        current += 1
    return response


def iter_cursor_pages(fetch: PageFetcher) -> Iterator[CursorPage]:
    cursor: str | None = None
    fetched = 0
    while True:
        response = fetch(cursor)
        fetched += 1
        logger.debug("Fetched page=%d size=%d", fetched, len(response.data))
        yield response
        if not response.next_cursor:
            return
        cursor = response.next_cursor


__all__ = ["CursorPage", "PageFetcher", "fetch_cursor_page", "iter_cursor_pages"]
