"""
Rewrite of the outer query once the page's keys are known.

The key filter already narrows the outer query to the page, so the original
WHERE criteria only need to stay when joins could still multiply rows or the
caller asked to keep them.
"""

from typing import Any

from fast_paginate.schemas.options import PaginationOptions
from fast_paginate.storage.query import EntityDescriptor


def clear_constraints(query: Any, options: PaginationOptions) -> Any:
    """
    Drop joins and WHERE criteria the key filter makes redundant.

    Joins are dropped only when ``should_omit_joins`` is set. WHERE criteria
    are kept when ``should_preserve_wheres`` is set; otherwise they are
    dropped when ``should_omit_wheres`` is set or no joins remain.

    Args:
        query: Outer QueryBuilder, modified in place.
        options: Caller's pagination options.

    Returns:
        The same query.
    """
    if options.should_omit_joins and query.joins:
        query.clear_joins()

    if not options.should_preserve_wheres and (
        options.should_omit_wheres or not query.joins
    ):
        query.clear_wheres()

    return query


def apply_key_filter(
    query: Any, entity: EntityDescriptor, keys: list[Any]
) -> Any:
    """
    Restrict the outer query to ``keys``.

    Integer keys are inlined as literals; other key types are bound as
    parameters.
    """
    if entity.has_integer_key:
        return query.where_integer_in_raw(entity.qualified_key, keys)
    return query.where_in(entity.qualified_key, keys)
