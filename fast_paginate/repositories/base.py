"""
Base repository exposing query building and pagination.

Repositories keep data access for one model in one place. Pagination goes
through a QueryBuilder so callers can choose standard or fast pagination
without changing how the query is written.

Example:
    ```python
    from fast_paginate.repositories.base import BaseRepository


    class UserRepository(BaseRepository[User]):
        def __init__(self, session: AsyncSession):
            super().__init__(session, User)

        async def active_page(self, page: int) -> LengthAwarePaginator:
            query = self.query().where(User.active.is_(True)).order_by("name")
            return await query.fast_paginate(20, page=page)
    ```
"""

from typing import Any, Callable, Generic, Sequence, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from fast_paginate.constants import DEFAULT_PAGE_NAME
from fast_paginate.logging import logger
from fast_paginate.schemas.generic_typing import GenericSQLModelType
from fast_paginate.schemas.options import PaginationOptions
from fast_paginate.storage.pagination.paginator import (
    LengthAwarePaginator,
    SimplePaginator,
)
from fast_paginate.storage.query import ALL_COLUMNS, QueryBuilder

QueryScope = Callable[[QueryBuilder[Any]], QueryBuilder[Any]]


class BaseRepository(Generic[GenericSQLModelType]):
    """
    Base repository for one SQLModel class.

    Attributes:
        session: The database session for executing queries.
        model: The SQLModel class this repository manages.
    """

    def __init__(self, session: AsyncSession, model: Type[GenericSQLModelType]):
        self.session = session
        self.model = model

    def query(self) -> QueryBuilder[GenericSQLModelType]:
        """Start a new query over the repository's model."""
        return QueryBuilder(self.session, self.model)

    async def get_by_id(self, id: Any) -> GenericSQLModelType | None:
        """
        Get entity by primary key.

        Args:
            id: Primary key value.

        Returns:
            Entity if found, None otherwise.

        Raises:
            SQLAlchemyError: If database query fails.
        """
        try:
            return await self.session.get(self.model, id)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {self.model.__name__} {id}: {e}")
            raise

    def _scoped(self, scope: QueryScope | None) -> QueryBuilder[GenericSQLModelType]:
        query = self.query()
        if scope is not None:
            query = scope(query)
        return query

    async def paginate(
        self,
        per_page: int | None = None,
        page: int | None = None,
        *,
        scope: QueryScope | None = None,
        columns: Sequence[Any] = (ALL_COLUMNS,),
        page_name: str = DEFAULT_PAGE_NAME,
    ) -> LengthAwarePaginator:
        """
        Standard length-aware pagination.

        Args:
            per_page: Page size.
            page: Page to fetch.
            scope: Callable that adds constraints to the query.
            columns: Select list used when the scope sets none.
            page_name: Query-string parameter holding the page number.

        Returns:
            LengthAwarePaginator of the page.
        """
        return await self._scoped(scope).paginate(per_page, columns, page_name, page)

    async def fast_paginate(
        self,
        per_page: int | None = None,
        page: int | None = None,
        *,
        scope: QueryScope | None = None,
        columns: Sequence[Any] = (ALL_COLUMNS,),
        page_name: str = DEFAULT_PAGE_NAME,
        options: PaginationOptions | dict[str, Any] | None = None,
    ) -> LengthAwarePaginator:
        """
        Length-aware pagination through a deferred join.

        Takes the same arguments as paginate() plus ``options``; the result
        is indistinguishable from paginate()'s.
        """
        return await self._scoped(scope).fast_paginate(
            per_page, columns, page_name, page, options
        )

    async def fast_simple_paginate(
        self,
        per_page: int | None = None,
        page: int | None = None,
        *,
        scope: QueryScope | None = None,
        columns: Sequence[Any] = (ALL_COLUMNS,),
        page_name: str = DEFAULT_PAGE_NAME,
        options: PaginationOptions | dict[str, Any] | None = None,
    ) -> SimplePaginator:
        return await self._scoped(scope).fast_simple_paginate(
            per_page, columns, page_name, page, options
        )
