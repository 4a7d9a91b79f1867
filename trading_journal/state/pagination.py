"""Page arithmetic shared by the paged list views."""

from __future__ import annotations

import math
from typing import Union

ELLIPSIS = "..."

PageItem = Union[int, str]


def total_pages(total_count: int, page_size: int) -> int:
    if page_size <= 0 or total_count <= 0:
        return 0
    return math.ceil(total_count / page_size)


def clamp_page(page: int, pages: int) -> int:
    """Return page 1 when ``page`` is past the last page, else ``page``."""

    if page < 1:
        return 1
    if pages > 0 and page > pages:
        return 1
    return page


def pagination_items(current_page: int, pages: int, siblings: int = 1) -> list[PageItem]:
    """Page numbers to render, with ``"..."`` standing in for skipped runs.

    The first and last page are always present, plus ``siblings`` pages on each
    side of the current one. A gap of exactly one page shows that page instead
    of an ellipsis.
    """

    if pages <= 1:
        return []
    if pages <= 7:
        return list(range(1, pages + 1))

    left = max(current_page - siblings, 1)
    right = min(current_page + siblings, pages)

    items: list[PageItem] = [1]
    if left > 2:
        items.append(ELLIPSIS)
    elif left == 2:
        items.append(2)
    items.extend(page for page in range(left, right + 1) if page not in (1, pages))
    if right < pages - 1:
        items.append(ELLIPSIS)
    elif right == pages - 1:
        items.append(pages - 1)
    items.append(pages)

    deduped: list[PageItem] = []
    for item in items:
        if item == ELLIPSIS or item not in deduped:
            deduped.append(item)
    return deduped


__all__ = ["ELLIPSIS", "PageItem", "total_pages", "clamp_page", "pagination_items"]
