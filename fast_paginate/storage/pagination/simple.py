from typing import Any, Sequence

from fast_paginate.constants import ALL_ROWS, DEFAULT_PAGE_NAME
from fast_paginate.storage.pagination.paginator import (
    PaginatorOptions,
    SimplePaginator,
)
from fast_paginate.storage.pagination.resolvers import resolve_page


class SimplePaginationStrategy:
    """
    Fetch one page plus one row, without counting.

    The extra row only tells whether a next page exists; SimplePaginator
    drops it from the page items.
    """

    def __init__(self, page_name: str = DEFAULT_PAGE_NAME, page: int | None = None):
        self.page_name = page_name
        self.page = page

    async def paginate(
        self, query: Any, per_page: int, columns: Sequence[Any]
    ) -> SimplePaginator:
        current_page = resolve_page(self.page)

        if per_page == ALL_ROWS:
            items = await query.clone().get(columns)
        else:
            page_query = query.clone().for_page(current_page, per_page)
            items = await page_query.limit(per_page + 1).get(columns)

        return SimplePaginator(
            items,
            per_page,
            current_page,
            PaginatorOptions(page_name=self.page_name),
        )
