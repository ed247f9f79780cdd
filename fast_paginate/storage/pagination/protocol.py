"""
Protocol for pagination primitives.

Standard pagination and the inner / outer steps of fast pagination all run
through a strategy, so the length-aware and simple modes share one call
shape.
"""

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class PaginationStrategy(Protocol):
    """
    Protocol for pagination strategies.

    Attributes:
        page_name: Query-string parameter holding the page number.
        page: Requested page, or None for the first page.
    """

    page_name: str
    page: int | None

    async def paginate(
        self, query: Any, per_page: int, columns: Sequence[Any]
    ) -> Any:
        """
        Paginate a query.

        Args:
            query: QueryBuilder to paginate. It is not modified.
            per_page: Resolved page size (-1 for every row).
            columns: Select list used when the query has none of its own.

        Returns:
            A LengthAwarePaginator or SimplePaginator.
        """
        ...
