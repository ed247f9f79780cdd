from typing import Any, Sequence

from fast_paginate.constants import ALL_ROWS, DEFAULT_PAGE_NAME
from fast_paginate.storage.pagination.paginator import (
    LengthAwarePaginator,
    PaginatorOptions,
)
from fast_paginate.storage.pagination.resolvers import resolve_page


class LengthAwarePaginationStrategy:
    """
    Count the matching rows, then fetch one page with LIMIT / OFFSET.

    Pros:
    - Shows total rows and last page
    - Allows jumping to any page

    Cons:
    - Extra COUNT query on every call
    - Large offsets make the database walk every skipped row

    The page query is skipped when the count is zero.

    Example:
        ```python
        strategy = LengthAwarePaginationStrategy(page=2)
        paginator = await strategy.paginate(QueryBuilder(session, User), 20, ["*"])

        print(f"Page {paginator.current_page} of {paginator.last_page}")
        ```
    """

    def __init__(self, page_name: str = DEFAULT_PAGE_NAME, page: int | None = None):
        self.page_name = page_name
        self.page = page

    async def paginate(
        self, query: Any, per_page: int, columns: Sequence[Any]
    ) -> LengthAwarePaginator:
        current_page = resolve_page(self.page)
        total = await query.count()

        if total == 0:
            items = []
        elif per_page == ALL_ROWS:
            items = await query.clone().get(columns)
        else:
            items = await query.clone().for_page(current_page, per_page).get(columns)

        return LengthAwarePaginator(
            items,
            total,
            per_page,
            current_page,
            PaginatorOptions(page_name=self.page_name),
        )
