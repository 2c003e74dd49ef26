"""Page-number layout for paginated lists."""

from typing import Literal

ELLIPSIS = "ellipsis"
MAX_PAGES_WITHOUT_ELLIPSIS = 7

PageItem = int | Literal["ellipsis"]


def page_items(current_page: int, total_pages: int) -> list[PageItem]:
    """Return the page buttons to show, with ellipsis markers for gaps."""
    if total_pages <= MAX_PAGES_WITHOUT_ELLIPSIS:
        return list(range(1, total_pages + 1))
    items: list[PageItem] = [1]
    if current_page > 3:  # noqa: PLR2004
        items.append(ELLIPSIS)
    start = max(2, current_page - 1)
    end = min(total_pages - 1, current_page + 1)
    items.extend(range(start, end + 1))
    if current_page < total_pages - 2:
        items.append(ELLIPSIS)
    items.append(total_pages)
    return items


def can_go_prev(current_page: int) -> bool:
    return current_page > 1


def can_go_next(current_page: int, total_pages: int | None) -> bool:
    """Return False while the page count is unknown or on the last page."""
    if total_pages is None:
        return False
    return current_page != total_pages and total_pages > 0
