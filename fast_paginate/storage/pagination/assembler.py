"""
Builds the final paginator from the outer rows and the inner page metadata.
"""

from typing import Any, Protocol, Sequence

from fast_paginate.constants import PAGINATE, SIMPLE_PAGINATE
from fast_paginate.storage.pagination.forker import KeyPage
from fast_paginate.storage.pagination.length_aware import (
    LengthAwarePaginationStrategy,
)
from fast_paginate.storage.pagination.paginator import (
    LengthAwarePaginator,
    SimplePaginator,
)
from fast_paginate.storage.pagination.protocol import PaginationStrategy
from fast_paginate.storage.pagination.simple import SimplePaginationStrategy


class PaginationAssembly(Protocol):
    """What a pagination mode contributes to a fast pagination call."""

    mode: str

    def strategy(self, page_name: str, page: int | None) -> PaginationStrategy:
        """Primitive that paginates the inner query."""
        ...

    def assemble(self, items: list[Any], inner: Any) -> Any:
        """Final paginator built from outer items and the inner paginator."""
        ...


class LengthAwareAssembly:
    mode = PAGINATE

    def strategy(
        self, page_name: str, page: int | None
    ) -> LengthAwarePaginationStrategy:
        return LengthAwarePaginationStrategy(page_name, page)

    def assemble(
        self, items: list[Any], inner: LengthAwarePaginator
    ) -> LengthAwarePaginator:
        return LengthAwarePaginator(
            items, inner.total, inner.per_page, inner.current_page, inner.options
        )


class SimpleAssembly:
    mode = SIMPLE_PAGINATE

    def strategy(self, page_name: str, page: int | None) -> SimplePaginationStrategy:
        return SimplePaginationStrategy(page_name, page)

    def assemble(self, items: list[Any], inner: SimplePaginator) -> SimplePaginator:
        return SimplePaginator(
            items, inner.per_page, inner.current_page, inner.options
        ).has_more_pages_when(inner.has_more_pages)


async def assemble(
    query: Any,
    per_page: int,
    columns: Sequence[Any],
    key_page: KeyPage,
    assembly: PaginationAssembly,
) -> Any:
    """
    Fetch the page's full rows and wrap them in the final paginator.

    The outer query already carries the key filter, so it is fetched as the
    first page of a simple pagination: one LIMIT, no OFFSET, no COUNT.

    Args:
        query: Outer QueryBuilder restricted to the page's keys.
        per_page: Resolved page size.
        columns: Caller's select list.
        key_page: Result of the inner query.
        assembly: Mode-specific assembly.

    Returns:
        Paginator of the requested mode.
    """
    outer = await SimplePaginationStrategy(
        key_page.paginator.options.page_name, 1
    ).paginate(query, per_page, columns)
    return assembly.assemble(outer.items, key_page.paginator)
