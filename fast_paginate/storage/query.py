"""
Typed query descriptor for SQLModel queries.

``QueryBuilder`` keeps every clause of a query in an explicit, typed list
(select columns, order clauses, where criteria, joins, groups, havings,
unions, eager loads) and only turns them into a SQLAlchemy statement when it
executes. Keeping the clauses apart is what lets pagination clone a query,
swap its select list, and later clear its WHERE / JOIN constraints without
reaching into SQLAlchemy internals.

Example:
    ```python
    from fast_paginate.storage.query import QueryBuilder

    async with async_session() as session:
        query = (
            QueryBuilder(session, User)
            .where(User.active.is_(True))
            .order_by("name")
            .with_("posts")
        )
        paginator = await query.fast_paginate(20, page=2)
    ```
"""

import copy
from dataclasses import dataclass, field
from types import UnionType
from typing import Any, Generic, Iterable, Sequence, Type, Union, get_args, get_origin

from sqlalchemy import (
    Integer,
    func,
    inspect,
    literal_column,
    select,
    text,
    union,
    union_all,
)
from sqlalchemy.orm import ColumnProperty, RelationshipProperty, load_only, selectinload
from sqlalchemy.sql.elements import ColumnElement, Grouping

from fast_paginate.constants import (
    BINDING_CATEGORIES,
    DEFAULT_PAGE_NAME,
    INTEGER_KEY_TYPES,
)
from fast_paginate.exceptions import QueryBuilderError
from fast_paginate.logging import logger
from fast_paginate.schemas.generic_typing import GenericSQLModelType
from fast_paginate.storage.grammar import Grammar

ALL_COLUMNS = "*"


def _key_type_name(model: type, key_column: Any) -> str:
    """
    Name the Python type of a non-integer primary key.

    The SQLModel field annotation is preferred (``Optional`` stripped);
    column types such as ``AutoString`` report ``object`` as their Python
    type.
    """
    field_info = getattr(model, "model_fields", {}).get(key_column.name)
    if field_info is not None:
        annotation = field_info.annotation
        if get_origin(annotation) in (Union, UnionType):
            members = [arg for arg in get_args(annotation) if arg is not type(None)]
            annotation = members[0] if len(members) == 1 else None
        if isinstance(annotation, type):
            return annotation.__name__

    try:
        python_type = key_column.type.python_type
    except NotImplementedError:
        return "str"
    return "str" if python_type is object else python_type.__name__


@dataclass(frozen=True)
class EntityDescriptor:
    """
    Primary-key facts about the model a query selects.

    Attributes:
        key_name: Primary key column name.
        key_type: ``"int"`` for integer keys, otherwise the key's Python
            type name (``"str"``, ``"UUID"`` ...).
        table_name: Name of the model's table.
    """

    key_name: str
    key_type: str
    table_name: str
    model: Any = field(compare=False, repr=False)

    @classmethod
    def from_model(cls, model: type) -> "EntityDescriptor":
        """
        Describe a mapped model.

        A model can force its key type with a ``__key_type__`` class
        attribute. Composite keys are described by their first column.

        Args:
            model: SQLModel table class.

        Returns:
            EntityDescriptor for the model.
        """
        key_column = inspect(model).primary_key[0]
        key_type = getattr(model, "__key_type__", None)
        if key_type is None:
            if isinstance(key_column.type, Integer):
                key_type = "int"
            else:
                key_type = _key_type_name(model, key_column)
        return cls(
            key_name=key_column.name,
            key_type=key_type,
            table_name=key_column.table.name,
            model=model,
        )

    @property
    def qualified_key(self) -> str:
        return f"{self.table_name}.{self.key_name}"

    @property
    def has_integer_key(self) -> bool:
        return self.key_type.lower() in INTEGER_KEY_TYPES


@dataclass(frozen=True)
class OrderClause:
    """One ORDER BY entry. Raw orders carry SQL text instead of a column."""

    column: Any
    direction: str = "asc"
    raw: Any = None


@dataclass(frozen=True)
class JoinClause:
    target: Any
    onclause: Any = None
    is_outer: bool = False


@dataclass(frozen=True)
class UnionClause:
    query: "QueryBuilder[Any]"
    all: bool = False


class QueryBuilder(Generic[GenericSQLModelType]):
    """
    Mutable, typed description of a SELECT over one SQLModel class.

    Mutators change the builder in place and return it so calls can be
    chained; ``clone()`` gives an independent copy.

    Attributes:
        session: Async session statements are executed on.
        model: The SQLModel class being queried.
        entity: Primary-key description of ``model``.
        columns: Select list; empty means every model column.
        orders: ORDER BY clauses in order.
        wheres: WHERE criteria, AND-ed together.
        joins: JOIN clauses in order.
        groups: GROUP BY columns.
        havings: HAVING criteria.
        unions: Queries combined with this one by UNION.
        eager_loads: Loader options applied when rows hydrate into models.
        bindings: Values bound by raw clauses, keyed by clause category.
    """

    def __init__(
        self,
        session: Any,
        model: Type[GenericSQLModelType],
        *,
        grammar: Grammar | None = None,
    ):
        """
        Initialize an empty query over ``model``.

        Args:
            session: SQLModel async session for executing the query.
            model: The SQLModel table class to query.
            grammar: Grammar used to render columns. Defaults to the grammar
                of the session's bind.
        """
        self.session = session
        self.model = model
        self.entity = EntityDescriptor.from_model(model)
        self._grammar = grammar
        self.columns: list[Any] = []
        self.orders: list[OrderClause] = []
        self.wheres: list[Any] = []
        self.joins: list[JoinClause] = []
        self.groups: list[Any] = []
        self.havings: list[Any] = []
        self.unions: list[UnionClause] = []
        self.eager_loads: list[Any] = []
        self.bindings: dict[str, dict[str, Any]] = {
            category: {} for category in BINDING_CATEGORIES
        }
        self.limit_value: int | None = None
        self.offset_value: int | None = None
        self.rows_only = False

    @property
    def grammar(self) -> Grammar:
        if self._grammar is None:
            self._grammar = Grammar.for_session(self.session, self.model)
        return self._grammar

    # ------------------------------------------------------------------
    # Select list
    # ------------------------------------------------------------------

    def select(self, *columns: Any) -> "QueryBuilder[GenericSQLModelType]":
        """Replace the select list."""
        return self.set_select(columns)

    def set_select(self, columns: Iterable[Any]) -> "QueryBuilder[GenericSQLModelType]":
        self.columns = list(columns)
        return self

    def add_select(self, *columns: Any) -> "QueryBuilder[GenericSQLModelType]":
        self.columns.extend(columns)
        return self

    def select_raw(self, expression: str) -> "QueryBuilder[GenericSQLModelType]":
        """Add a raw SQL column such as ``"count(*) as total"``."""
        self.columns.append(literal_column(expression))
        return self

    # ------------------------------------------------------------------
    # Where
    # ------------------------------------------------------------------

    def where(self, *criteria: Any) -> "QueryBuilder[GenericSQLModelType]":
        self.wheres.extend(criteria)
        return self

    def where_raw(self, sql: str, **params: Any) -> "QueryBuilder[GenericSQLModelType]":
        """
        Add a raw WHERE condition with named parameters.

        Example:
            >>> query.where_raw("name like :pattern", pattern="Person 1%")
        """
        self.wheres.append(text(sql).bindparams(**params))
        self.bindings["where"].update(params)
        return self

    def where_in(self, column: Any, values: Iterable[Any]) -> "QueryBuilder[GenericSQLModelType]":
        """Add ``column IN (...)`` with one bound parameter per value."""
        self.wheres.append(self.resolve_column(column).in_(list(values)))
        return self

    def where_integer_in_raw(
        self, column: Any, values: Iterable[Any]
    ) -> "QueryBuilder[GenericSQLModelType]":
        """
        Add ``column IN (...)`` with the values inlined as integer literals.

        Values are cast with ``int()`` first, so nothing but digits reaches
        the SQL text.
        """
        literals = [literal_column(str(int(value))) for value in values]
        self.wheres.append(self.resolve_column(column).in_(literals))
        return self

    def clear_wheres(self) -> "QueryBuilder[GenericSQLModelType]":
        """Remove every WHERE criterion and its bindings."""
        self.wheres = []
        self.bindings["where"] = {}
        return self

    # ------------------------------------------------------------------
    # Joins
    # ------------------------------------------------------------------

    def join(
        self, target: Any, onclause: Any = None, *, is_outer: bool = False
    ) -> "QueryBuilder[GenericSQLModelType]":
        self.joins.append(JoinClause(target, onclause, is_outer))
        return self

    def outer_join(self, target: Any, onclause: Any = None) -> "QueryBuilder[GenericSQLModelType]":
        return self.join(target, onclause, is_outer=True)

    def join_raw(
        self, target: Any, on: str, *, is_outer: bool = False, **params: Any
    ) -> "QueryBuilder[GenericSQLModelType]":
        """Join ``target`` on a raw SQL condition with named parameters."""
        self.joins.append(
            JoinClause(target, Grouping(text(on).bindparams(**params)), is_outer)
        )
        self.bindings["join"].update(params)
        return self

    def clear_joins(self) -> "QueryBuilder[GenericSQLModelType]":
        """Remove every join and its bindings."""
        self.joins = []
        self.bindings["join"] = {}
        return self

    # ------------------------------------------------------------------
    # Ordering, grouping, unions
    # ------------------------------------------------------------------

    def order_by(self, column: Any, direction: str = "asc") -> "QueryBuilder[GenericSQLModelType]":
        direction = direction.lower()
        if direction not in ("asc", "desc"):
            raise QueryBuilderError(
                f"Order direction must be 'asc' or 'desc', got '{direction}'"
            )
        self.orders.append(OrderClause(column, direction))
        return self

    def order_by_desc(self, column: Any) -> "QueryBuilder[GenericSQLModelType]":
        return self.order_by(column, "desc")

    def order_by_raw(self, sql: str) -> "QueryBuilder[GenericSQLModelType]":
        self.orders.append(OrderClause(None, raw=text(sql)))
        return self

    def group_by(self, *columns: Any) -> "QueryBuilder[GenericSQLModelType]":
        self.groups.extend(columns)
        return self

    def having(self, *criteria: Any) -> "QueryBuilder[GenericSQLModelType]":
        self.havings.extend(criteria)
        return self

    def having_raw(self, sql: str, **params: Any) -> "QueryBuilder[GenericSQLModelType]":
        self.havings.append(text(sql).bindparams(**params))
        self.bindings["having"].update(params)
        return self

    def union(self, query: "QueryBuilder[Any]") -> "QueryBuilder[GenericSQLModelType]":
        self.unions.append(UnionClause(query))
        return self

    def union_all(self, query: "QueryBuilder[Any]") -> "QueryBuilder[GenericSQLModelType]":
        self.unions.append(UnionClause(query, all=True))
        return self

    # ------------------------------------------------------------------
    # Eager loading
    # ------------------------------------------------------------------

    def with_(self, *relations: Any) -> "QueryBuilder[GenericSQLModelType]":
        """
        Eager load relationships on the hydrated models.

        Relations are names (dotted for nested relations, e.g.
        ``"posts.comments"``) loaded with ``selectinload``, or ready-made
        loader options.
        """
        for relation in relations:
            if not isinstance(relation, str):
                self.eager_loads.append(relation)
                continue
            option = self._selectin_chain(relation)
            if option is not None:
                self.eager_loads.append(option)
        return self

    def _selectin_chain(self, relation: str) -> Any:
        option = None
        current = self.model
        for name in relation.split("."):
            attribute = getattr(current, name, None)
            if not isinstance(getattr(attribute, "property", None), RelationshipProperty):
                logger.warning(
                    f"Relationship '{name}' not found on {current.__name__}"
                )
                return None
            option = (
                selectinload(attribute)
                if option is None
                else option.selectinload(attribute)
            )
            current = attribute.property.mapper.class_
        return option

    def set_eager_loads(self, loads: Iterable[Any]) -> "QueryBuilder[GenericSQLModelType]":
        self.eager_loads = list(loads)
        return self

    def without_eager_loads(self) -> "QueryBuilder[GenericSQLModelType]":
        return self.set_eager_loads([])

    # ------------------------------------------------------------------
    # Limits
    # ------------------------------------------------------------------

    def limit(self, value: int | None) -> "QueryBuilder[GenericSQLModelType]":
        self.limit_value = value
        return self

    def offset(self, value: int | None) -> "QueryBuilder[GenericSQLModelType]":
        self.offset_value = value
        return self

    def for_page(self, page: int, per_page: int) -> "QueryBuilder[GenericSQLModelType]":
        """Limit the query to one page of ``per_page`` rows."""
        return self.offset((page - 1) * per_page).limit(per_page)

    # ------------------------------------------------------------------
    # Copying
    # ------------------------------------------------------------------

    def clone(self) -> "QueryBuilder[GenericSQLModelType]":
        """
        Copy the builder.

        Clause lists, union members and bindings are copied, so mutating
        the clone never affects this builder. SQLAlchemy clause objects are
        immutable and are shared.
        """
        cloned = copy.copy(self)
        cloned.columns = list(self.columns)
        cloned.orders = list(self.orders)
        cloned.wheres = list(self.wheres)
        cloned.joins = list(self.joins)
        cloned.groups = list(self.groups)
        cloned.havings = list(self.havings)
        cloned.unions = [
            UnionClause(member.query.clone(), member.all) for member in self.unions
        ]
        cloned.eager_loads = list(self.eager_loads)
        cloned.bindings = {
            category: dict(values) for category, values in self.bindings.items()
        }
        return cloned

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def resolve_column(self, column: Any) -> Any:
        """
        Turn a column argument into a SQLAlchemy expression.

        Strings naming a column of the model (optionally qualified with its
        table) resolve to that column; any other string is used as raw SQL.

        Raises:
            QueryBuilderError: If the argument is neither a string nor a
                SQL expression.
        """
        if isinstance(column, str):
            table = self.model.__table__
            name = column
            if "." in column:
                table_name, name = column.rsplit(".", 1)
                if table_name != table.name:
                    return literal_column(column)
            if name in table.c:
                return table.c[name]
            return literal_column(column)
        if isinstance(column, ColumnElement) or hasattr(column, "__clause_element__"):
            return column
        raise QueryBuilderError(
            f"Cannot use {column!r} as a column of {self.model.__name__}"
        )

    def _model_attribute(self, column: Any) -> Any:
        """The model attribute a select entry names, or None."""
        if isinstance(column, str):
            name = column
            if "." in column:
                table_name, name = column.rsplit(".", 1)
                if table_name != self.entity.table_name:
                    return None
            if name in self.model.__table__.c:
                return getattr(self.model, name)
            return None
        parent = getattr(column, "class_", None)
        if parent is self.model and isinstance(
            getattr(column, "property", None), ColumnProperty
        ):
            return column
        return None

    def as_rows(self) -> "QueryBuilder[GenericSQLModelType]":
        """Return result rows instead of model instances when executed."""
        self.rows_only = True
        return self

    def selected_columns(self, columns: Sequence[Any] | None = None) -> list[Any]:
        """The select list, falling back to ``columns`` and then ``*``."""
        return self.columns or list(columns or [ALL_COLUMNS])

    def hydrates_models(self, columns: Sequence[Any] | None = None) -> bool:
        """Whether executing the query yields model instances."""
        if self.rows_only:
            return False
        return all(
            _is_all_columns(column) or self._model_attribute(column) is not None
            for column in self.selected_columns(columns)
        )

    def to_statement(self, columns: Sequence[Any] | None = None) -> Any:
        """
        Build the SQLAlchemy statement for this query.

        Args:
            columns: Select list used when the builder has none of its own.

        Returns:
            A Select, or a CompoundSelect / FromStatement when unions are
            present.
        """
        selected = self.selected_columns(columns)
        hydrate = self.hydrates_models(columns)

        if hydrate:
            stmt = select(self.model)
            if not any(_is_all_columns(column) for column in selected):
                attributes = [self._model_attribute(column) for column in selected]
                stmt = stmt.options(load_only(*attributes))
            if self.eager_loads:
                stmt = stmt.options(*self.eager_loads)
        else:
            stmt = select(
                *[
                    self.model if _is_all_columns(column) else self.resolve_column(column)
                    for column in selected
                ]
            ).select_from(self.model)

        for join in self.joins:
            if join.onclause is None:
                stmt = stmt.join(join.target, isouter=join.is_outer)
            else:
                stmt = stmt.join(join.target, join.onclause, isouter=join.is_outer)
        if self.wheres:
            stmt = stmt.where(*self.wheres)
        if self.groups:
            stmt = stmt.group_by(*[self.resolve_column(column) for column in self.groups])
        if self.havings:
            stmt = stmt.having(*self.havings)

        if self.unions:
            return self._compound_statement(stmt, hydrate)

        return self._apply_order_and_limits(stmt)

    def _compound_statement(self, stmt: Any, hydrate: bool) -> Any:
        compound = stmt
        for member in self.unions:
            combine = union_all if member.all else union
            compound = combine(compound, member.query.to_statement())
        compound = self._apply_order_and_limits(compound)
        if hydrate:
            return select(self.model).options(*self.eager_loads).from_statement(compound)
        return compound

    def _apply_order_and_limits(self, stmt: Any) -> Any:
        for order in self.orders:
            if order.raw is not None:
                stmt = stmt.order_by(order.raw)
                continue
            column = self.resolve_column(order.column)
            stmt = stmt.order_by(column.desc() if order.direction == "desc" else column.asc())
        if self.limit_value is not None:
            stmt = stmt.limit(self.limit_value)
        if self.offset_value is not None:
            stmt = stmt.offset(self.offset_value)
        return stmt

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def get(self, columns: Sequence[Any] | None = None) -> list[Any]:
        """
        Execute the query.

        Args:
            columns: Select list used when the builder has none of its own.

        Returns:
            Model instances when the select list is ``*`` or model columns,
            otherwise result rows.
        """
        result = await self.session.exec(self.to_statement(columns))
        if self.hydrates_models(columns):
            return list(result.scalars().all())
        return list(result.all())

    async def count(self) -> int:
        """Count the rows the query matches, ignoring order and limits."""
        counted = self.clone().without_eager_loads().as_rows()
        counted.orders = []
        counted.limit_value = None
        counted.offset_value = None
        stmt = select(func.count()).select_from(counted.to_statement().subquery())
        result = await self.session.exec(stmt)
        return result.scalar_one()

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    async def paginate(
        self,
        per_page: int | None = None,
        columns: Sequence[Any] = (ALL_COLUMNS,),
        page_name: str = DEFAULT_PAGE_NAME,
        page: int | None = None,
    ) -> Any:
        """Length-aware pagination (COUNT query plus one page of rows)."""
        from fast_paginate.storage.pagination.resolvers import (  # Import here to avoid circular dependency
            resolve_per_page,
        )
        from fast_paginate.storage.pagination.length_aware import (
            LengthAwarePaginationStrategy,
        )

        strategy = LengthAwarePaginationStrategy(page_name, page)
        return await strategy.paginate(self, resolve_per_page(per_page), columns)

    async def simple_paginate(
        self,
        per_page: int | None = None,
        columns: Sequence[Any] = (ALL_COLUMNS,),
        page_name: str = DEFAULT_PAGE_NAME,
        page: int | None = None,
    ) -> Any:
        """Simple pagination (one extra row tells whether more pages exist)."""
        from fast_paginate.storage.pagination.resolvers import (  # Import here to avoid circular dependency
            resolve_per_page,
        )
        from fast_paginate.storage.pagination.simple import (
            SimplePaginationStrategy,
        )

        strategy = SimplePaginationStrategy(page_name, page)
        return await strategy.paginate(self, resolve_per_page(per_page), columns)

    async def fast_paginate(
        self,
        per_page: int | None = None,
        columns: Sequence[Any] = (ALL_COLUMNS,),
        page_name: str = DEFAULT_PAGE_NAME,
        page: int | None = None,
        options: Any = None,
    ) -> Any:
        """Length-aware pagination through a deferred join on primary keys."""
        from fast_paginate.storage.pagination.fast import (  # Import here to avoid circular dependency
            fast_paginate,
        )

        return await fast_paginate(self, per_page, columns, page_name, page, options)

    async def fast_simple_paginate(
        self,
        per_page: int | None = None,
        columns: Sequence[Any] = (ALL_COLUMNS,),
        page_name: str = DEFAULT_PAGE_NAME,
        page: int | None = None,
        options: Any = None,
    ) -> Any:
        """Simple pagination through a deferred join on primary keys."""
        from fast_paginate.storage.pagination.fast import (  # Import here to avoid circular dependency
            fast_simple_paginate,
        )

        return await fast_simple_paginate(
            self, per_page, columns, page_name, page, options
        )

    simple_fast_paginate = fast_simple_paginate


def _is_all_columns(column: Any) -> bool:
    return isinstance(column, str) and column == ALL_COLUMNS
