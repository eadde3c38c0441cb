from __future__ import annotations


DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def normalize_page(page: int, page_size: int) -> tuple[int, int, int]:
    """잘못된 page/page_size 를 기본값으로 보정하고 (page, page_size, skip) 을 반환한다."""

    if page <= 0:
        page = 1
    if page_size <= 0 or page_size > MAX_PAGE_SIZE:
        page_size = DEFAULT_PAGE_SIZE
    return page, page_size, (page - 1) * page_size
