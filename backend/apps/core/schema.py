"""Shared GraphQL types."""
import strawberry


@strawberry.type
class PageInfo:
    """Pagination details for list queries."""

    total_count: int
    page: int
    page_size: int
    has_next_page: bool
    has_previous_page: bool


def paginate(queryset, page: int, page_size: int):
    """Slice a queryset for the given 1-based page and return (items, PageInfo)."""
    page = max(page, 1)
    page_size = max(min(page_size, 200), 1)
    total_count = queryset.count()
    offset = (page - 1) * page_size
    items = list(queryset[offset : offset + page_size])
    return items, PageInfo(
        total_count=total_count,
        page=page,
        page_size=page_size,
        has_next_page=offset + page_size < total_count,
        has_previous_page=page > 1,
    )
