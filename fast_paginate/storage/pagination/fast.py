"""
Deferred-join pagination entry points.

A fast pagination call first paginates a key-only copy of the query, then
fetches full rows for exactly those keys with ``WHERE key IN (...)``. Large
offsets then only walk the primary-key index instead of whole rows.

Queries that cannot be rewritten (grouped, HAVING, UNION, every row
requested, parameterized order aliases, or the feature switched off) are
paginated by the standard primitive instead, without raising.

Example:
    ```python
    from fast_paginate.storage.pagination.fast import fast_paginate

    query = QueryBuilder(session, User).order_by("name").with_("posts")
    paginator = await fast_paginate(query, per_page=20, page=3)
    paginator.total, [user.name for user in paginator]
    ```
"""

from typing import Any, Mapping, Sequence

from fast_paginate.constants import DEFAULT_PAGE_NAME, PAGINATE, SIMPLE_PAGINATE
from fast_paginate.logging import logger
from fast_paginate.schemas.options import PaginationOptions
from fast_paginate.storage.pagination.assembler import assemble
from fast_paginate.storage.pagination.columns import (
    Incompatible,
    incompatibility_reason,
    select_inner_columns,
)
from fast_paginate.storage.pagination.constraints import (
    apply_key_filter,
    clear_constraints,
)
from fast_paginate.storage.pagination.factory import select_assembly
from fast_paginate.storage.pagination.forker import fork_and_paginate_keys
from fast_paginate.storage.pagination.paginator import (
    LengthAwarePaginator,
    SimplePaginator,
)
from fast_paginate.storage.pagination.resolvers import resolve_per_page
from fast_paginate.storage.query import ALL_COLUMNS
from fast_paginate.utils.metrics import (
    fast_paginate_duration_seconds,
    fast_paginate_fallbacks_total,
    fast_paginate_requests_total,
)

PaginationOptionsInput = PaginationOptions | Mapping[str, Any] | None


async def _fast_paginate(
    mode: str,
    query: Any,
    per_page: int | None,
    columns: Sequence[Any],
    page_name: str,
    page: int | None,
    options: PaginationOptionsInput,
) -> Any:
    per_page = resolve_per_page(per_page)
    options = PaginationOptions.coerce(options)
    assembly = select_assembly(mode)
    strategy = assembly.strategy(page_name, page)

    with fast_paginate_duration_seconds.labels(mode=mode).time():
        reason = incompatibility_reason(query, per_page)
        if reason is None:
            inner_columns = select_inner_columns(query)
            if isinstance(inner_columns, Incompatible):
                reason = inner_columns.reason

        if reason is not None:
            logger.debug(
                f"Fast pagination of {query.model.__name__} falls back to "
                f"{mode}: {reason}"
            )
            fast_paginate_fallbacks_total.labels(reason=reason).inc()
            fast_paginate_requests_total.labels(mode=mode, outcome="fallback").inc()
            return await strategy.paginate(query, per_page, columns)

        key_page = await fork_and_paginate_keys(
            query, inner_columns.columns, strategy, per_page
        )

        outer = clear_constraints(query.clone(), options)
        apply_key_filter(outer, query.entity, key_page.keys)

        result = await assemble(outer, per_page, columns, key_page, assembly)
        fast_paginate_requests_total.labels(mode=mode, outcome="deferred").inc()
        return result


async def fast_paginate(
    query: Any,
    per_page: int | None = None,
    columns: Sequence[Any] = (ALL_COLUMNS,),
    page_name: str = DEFAULT_PAGE_NAME,
    page: int | None = None,
    options: PaginationOptionsInput = None,
) -> LengthAwarePaginator:
    """
    Length-aware pagination through a deferred join.

    Args:
        query: QueryBuilder to paginate. It is not modified.
        per_page: Page size; defaults to DEFAULT_PAGE_SIZE, capped at
            MAX_PAGE_SIZE, -1 for every row.
        columns: Select list used when the query has none of its own.
        page_name: Query-string parameter holding the page number.
        page: Page to fetch; defaults to the first page.
        options: PaginationOptions (or a mapping of its flags) controlling
            which constraints the outer query keeps.

    Returns:
        LengthAwarePaginator identical to what standard pagination returns.

    Raises:
        ValidationError: If per_page is zero or negative (other than -1).
    """
    return await _fast_paginate(
        PAGINATE, query, per_page, columns, page_name, page, options
    )


async def fast_simple_paginate(
    query: Any,
    per_page: int | None = None,
    columns: Sequence[Any] = (ALL_COLUMNS,),
    page_name: str = DEFAULT_PAGE_NAME,
    page: int | None = None,
    options: PaginationOptionsInput = None,
) -> SimplePaginator:
    """Simple pagination through a deferred join; see fast_paginate()."""
    return await _fast_paginate(
        SIMPLE_PAGINATE, query, per_page, columns, page_name, page, options
    )


simple_fast_paginate = fast_simple_paginate
