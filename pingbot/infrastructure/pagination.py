import logging
from typing import Any, Awaitable, Callable, List

logger = logging.getLogger(__name__)

PER_PAGE = 100

PageFetcher = Callable[[int, int], Awaitable[List[Any]]]


async def fetch_all_pages(fetch_page: PageFetcher, page_size: int = PER_PAGE) -> List[Any]:
    """
    Requests pages 1, 2, ... until a page comes back short.

    The loop keeps going only while every page so far was full, so a listing
    whose size is an exact multiple of ``page_size`` costs one extra request
    that returns an empty page. Any error from ``fetch_page`` propagates and
    the pages gathered so far are dropped.

    Args:
        fetch_page: Awaitable taking ``(page, per_page)`` and returning one batch of items.
        page_size (int): Number of items requested per page.

    Returns:
        List[Any]: Every item across all pages, in page order.
    """
    if page_size < 1:
        raise ValueError("page_size must be positive.")

    items: List[Any] = []
    page = 0
    while len(items) == page * page_size:
        page += 1
        batch = await fetch_page(page, page_size)
        items.extend(batch)
        logger.debug(f"Page {page} returned {len(batch)} items ({len(items)} so far).")
    return items
