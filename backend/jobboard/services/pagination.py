"""Page link window for listing pages."""
from typing import List

PAGE_LINKS_PER_PAGE = 10
# How far back from the current page the window starts
PAGE_LINK_SHIFT = PAGE_LINKS_PER_PAGE // 2 + 1


def last_page(total_count: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return total_count // page_size + 1


def page_links(total_count: int, page_size: int, current_page: int) -> List[int]:
    """
    Page numbers to link from `current_page`.

    At most PAGE_LINKS_PER_PAGE numbers, starting PAGE_LINK_SHIFT pages before
    the current one and never past the last page.
    """
    end = last_page(total_count, page_size)
    first = max(1, current_page - PAGE_LINK_SHIFT)
    return list(range(first, min(end, first + PAGE_LINKS_PER_PAGE - 1) + 1))
