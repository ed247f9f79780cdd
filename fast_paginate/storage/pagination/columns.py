"""
Select list of the inner (key-only) query.

The inner query selects the primary key plus any aliased select expression
that an ORDER BY clause refers to, since ordering by an alias fails when the
alias is not selected. Every other column is left to the outer query.
"""

from dataclasses import dataclass
from typing import Any

from fast_paginate.constants import (
    ALL_ROWS,
    FALLBACK_ALL_ROWS,
    FALLBACK_DISABLED,
    FALLBACK_GROUP_BY,
    FALLBACK_HAVING,
    FALLBACK_PARAMETERIZED_COLUMN,
    FALLBACK_UNION,
)
from fast_paginate.settings import app_settings


@dataclass(frozen=True)
class InnerColumns:
    """Columns to select in the inner query, primary key first."""

    columns: tuple[Any, ...]


@dataclass(frozen=True)
class Incompatible:
    """The query cannot be paginated with a deferred join."""

    reason: str


def incompatibility_reason(query: Any, per_page: int) -> str | None:
    """
    Reason a query must use standard pagination, checked before the select
    list is inspected.

    Args:
        query: QueryBuilder being paginated.
        per_page: Resolved page size.

    Returns:
        A fallback reason constant, or None when the query can be rewritten.
    """
    if not app_settings.FAST_PAGINATE_ENABLED:
        return FALLBACK_DISABLED
    if query.havings:
        return FALLBACK_HAVING
    if query.groups:
        return FALLBACK_GROUP_BY
    if query.unions:
        return FALLBACK_UNION
    if per_page == ALL_ROWS:
        return FALLBACK_ALL_ROWS
    return None


def _order_column_names(query: Any) -> list[str]:
    names = []
    for order in query.orders:
        name = query.grammar.column_name(order.column)
        if name is not None:
            names.append(name)
    return names


def _orders_depend_on(query: Any, column: Any, order_names: list[str]) -> bool:
    grammar = query.grammar
    label = grammar.label_name(column)
    if label is not None:
        return label in order_names
    rendered = grammar.render_column(column)
    return any(grammar.aliases(rendered, name) for name in order_names)


def select_inner_columns(query: Any) -> InnerColumns | Incompatible:
    """
    Pick the inner query's select list.

    Args:
        query: QueryBuilder being paginated.

    Returns:
        InnerColumns with the qualified primary key followed by every
        selected alias the ordering depends on, de-duplicated by rendered
        SQL. Incompatible when one of those aliases binds parameters, since
        the outer query would lose track of them.
    """
    grammar = query.grammar
    order_names = _order_column_names(query)

    kept = []
    if order_names:
        for column in query.columns:
            if _orders_depend_on(query, column, order_names):
                if grammar.has_parameters(column):
                    return Incompatible(FALLBACK_PARAMETERIZED_COLUMN)
                kept.append(column)

    columns = []
    seen = set()
    for column in [query.entity.qualified_key, *kept]:
        rendered = grammar.render_column(column)
        if rendered not in seen:
            seen.add(rendered)
            columns.append(column)
    return InnerColumns(tuple(columns))
