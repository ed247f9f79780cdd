from dataclasses import dataclass
from typing import Any, Sequence

from fast_paginate.storage.pagination.protocol import PaginationStrategy
from fast_paginate.storage.query import ALL_COLUMNS


@dataclass(frozen=True)
class KeyPage:
    """
    Primary keys of one page, as the inner query returned them.

    Attributes:
        keys: Key values in inner-query order; never re-ordered or
            de-duplicated.
        paginator: Paginator of the inner query, holding the page metadata.
    """

    keys: list[Any]
    paginator: Any


async def fork_and_paginate_keys(
    query: Any,
    columns: Sequence[Any],
    strategy: PaginationStrategy,
    per_page: int,
) -> KeyPage:
    """
    Paginate a key-only copy of ``query``.

    The copy selects ``columns`` (primary key first) without eager loads, so
    the database only reads the index entries needed to find the page.

    Args:
        query: QueryBuilder being paginated. It is not modified.
        columns: Inner select list from select_inner_columns().
        strategy: Primitive matching the requested mode.
        per_page: Resolved page size.

    Returns:
        KeyPage with the page's keys and the inner paginator.
    """
    inner = query.clone().set_select(columns).without_eager_loads().as_rows()
    paginator = await strategy.paginate(inner, per_page, [ALL_COLUMNS])
    return KeyPage([row[0] for row in paginator.items], paginator)
