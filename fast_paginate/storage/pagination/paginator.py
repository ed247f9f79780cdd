"""
Paginator objects returned by every pagination call.

Both paginators behave like a read-only sequence of their items and expose
the metadata needed to render page links. Fast pagination returns exactly the
same classes as standard pagination, so callers cannot tell them apart.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any, Iterator
from urllib.parse import urlencode

from fast_paginate.constants import ALL_ROWS, DEFAULT_PAGE_NAME
from fast_paginate.schemas.response import MetadataModel, PaginatedResponseModel


@dataclass(frozen=True)
class PaginatorOptions:
    """
    URL-building context of a paginator.

    Attributes:
        path: Base path of page URLs.
        page_name: Query-string parameter holding the page number.
        query: Extra query-string parameters kept on every page URL.
    """

    path: str = "/"
    page_name: str = DEFAULT_PAGE_NAME
    query: dict[str, Any] = field(default_factory=dict)


class _Paginator:
    """Behaviour shared by both paginator kinds."""

    items: list[Any]
    per_page: int
    current_page: int
    options: PaginatorOptions

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Any:
        return self.items[index]

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def on_first_page(self) -> bool:
        return self.current_page <= 1

    @property
    def has_more_pages(self) -> bool:
        raise NotImplementedError

    @property
    def first_item(self) -> int | None:
        """1-based position of the first item in the whole result, or None."""
        if not self.items:
            return None
        if self.per_page == ALL_ROWS:
            return 1
        return (self.current_page - 1) * self.per_page + 1

    @property
    def last_item(self) -> int | None:
        if not self.items:
            return None
        return self.first_item + self.count - 1

    def url(self, page: int) -> str:
        """
        Build the URL of a page.

        Args:
            page: Page number; values below 1 link to the first page.

        Returns:
            ``path?<query>&<page_name>=<page>``.
        """
        params = {**self.options.query, self.options.page_name: max(page, 1)}
        separator = "&" if "?" in self.options.path else "?"
        return f"{self.options.path}{separator}{urlencode(params)}"

    @property
    def next_page_url(self) -> str | None:
        if not self.has_more_pages:
            return None
        return self.url(self.current_page + 1)

    @property
    def previous_page_url(self) -> str | None:
        if self.on_first_page:
            return None
        return self.url(self.current_page - 1)

    def with_path(self, path: str) -> "_Paginator":
        self.options = replace(self.options, path=path)
        return self

    def appends(self, **query: Any) -> "_Paginator":
        """Keep extra query-string parameters on page URLs."""
        self.options = replace(self.options, query={**self.options.query, **query})
        return self

    @property
    def meta(self) -> MetadataModel:
        raise NotImplementedError

    def to_response(self) -> PaginatedResponseModel:
        return PaginatedResponseModel(items=list(self.items), meta=self.meta)


class LengthAwarePaginator(_Paginator):
    """
    Page of results that knows the total number of rows.

    Attributes:
        items: Rows (or model instances) of the current page.
        total: Number of rows the query matches.
        per_page: Page size, or -1 when every row is on one page.
        current_page: 1-based page number.
        options: URL-building context.
    """

    def __init__(
        self,
        items: list[Any],
        total: int,
        per_page: int,
        current_page: int = 1,
        options: PaginatorOptions | None = None,
    ):
        self.items = list(items)
        self.total = total
        self.per_page = per_page
        self.current_page = current_page
        self.options = options or PaginatorOptions()

    @property
    def last_page(self) -> int:
        if self.per_page == ALL_ROWS:
            return 1
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page

    @property
    def meta(self) -> MetadataModel:
        return MetadataModel(
            page=self.current_page,
            per_page=self.per_page,
            total=self.total,
            pages=self.last_page if self.total > 0 else 0,
            has_more=self.has_more_pages,
            next_page_url=self.next_page_url,
            prev_page_url=self.previous_page_url,
        )

    def __repr__(self) -> str:
        return (
            f"LengthAwarePaginator(count={self.count}, total={self.total}, "
            f"per_page={self.per_page}, current_page={self.current_page})"
        )


class SimplePaginator(_Paginator):
    """
    Page of results that only knows whether another page follows.

    Built from up to ``per_page + 1`` rows: the extra row, when present,
    marks that more pages exist and is dropped from ``items``.
    """

    def __init__(
        self,
        items: list[Any],
        per_page: int,
        current_page: int = 1,
        options: PaginatorOptions | None = None,
    ):
        items = list(items)
        self.per_page = per_page
        self.current_page = current_page
        self.options = options or PaginatorOptions()
        if per_page == ALL_ROWS:
            self.items = items
            self._has_more = False
        else:
            self.items = items[:per_page]
            self._has_more = len(items) > per_page

    @property
    def has_more_pages(self) -> bool:
        return self._has_more

    def has_more_pages_when(self, value: bool = True) -> "SimplePaginator":
        """Override whether another page follows."""
        self._has_more = value
        return self

    @property
    def meta(self) -> MetadataModel:
        return MetadataModel(
            page=self.current_page,
            per_page=self.per_page,
            has_more=self.has_more_pages,
            next_page_url=self.next_page_url,
            prev_page_url=self.previous_page_url,
        )

    def __repr__(self) -> str:
        return (
            f"SimplePaginator(count={self.count}, per_page={self.per_page}, "
            f"current_page={self.current_page}, has_more={self._has_more})"
        )
