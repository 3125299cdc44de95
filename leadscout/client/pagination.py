from __future__ import annotations

import math
from typing import List, Sequence, TypeVar

T = TypeVar("T")

RESULTS_PER_PAGE = 20


def total_pages(count: int, per_page: int = RESULTS_PER_PAGE) -> int:
    return math.ceil(count / per_page) if count > 0 else 0


def page_slice(items: Sequence[T], page: int, per_page: int = RESULTS_PER_PAGE) -> List[T]:
    """Items shown on 1-based `page`."""
    start = (page - 1) * per_page
    return list(items[start:start + per_page])


def clamp_page(page: int, count: int, per_page: int = RESULTS_PER_PAGE) -> int:
    """
    Keeps `page` valid after the item count changed: pulled back to the new
    last page, or reset to 1 when nothing is left. Never below 1.
    """
    pages = total_pages(count, per_page)
    if pages == 0:
        return 1
    return max(1, min(page, pages))
