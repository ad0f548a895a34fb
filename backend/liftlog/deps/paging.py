from fastapi import Query

from liftlog.settings import get_settings

def page_params(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
) -> tuple[int, int]:
    """1-based page number and a page size clamped to MAX_PAGE_SIZE."""
    s = get_settings()
    limit = min(limit or s.DEFAULT_PAGE_SIZE, s.MAX_PAGE_SIZE)
    return page, limit
