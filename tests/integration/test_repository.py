"""Tests for BaseRepository pagination."""

import pytest

from fast_paginate.repositories.base import BaseRepository
from fast_paginate.utils.query_monitor import record_queries
from tests.support.models import User


class UserRepository(BaseRepository[User]):
    def __init__(self, session):
        super().__init__(session, User)


class TestBaseRepository:
    """Tests for BaseRepository."""

    @pytest.mark.asyncio
    async def test_get_by_id(self, session):
        user = await UserRepository(session).get_by_id(4)

        assert user.name == "Person 4"

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, session):
        assert await UserRepository(session).get_by_id(99) is None

    @pytest.mark.asyncio
    async def test_fast_paginate_with_scope(self, engine, session):
        repo = UserRepository(session)

        with record_queries(engine) as queries:
            paginator = await repo.fast_paginate(
                3, page=2, scope=lambda query: query.order_by_desc("id")
            )

        assert [user.id for user in paginator] == [12, 11, 10]
        assert "WHERE users.id IN (12, 11, 10)" in queries[2].statement

    @pytest.mark.asyncio
    async def test_fast_paginate_equals_paginate(self, session):
        repo = UserRepository(session)

        fast = await repo.fast_paginate(4, page=3)
        standard = await repo.paginate(4, page=3)

        assert [user.id for user in fast] == [user.id for user in standard]
        assert fast.meta == standard.meta

    @pytest.mark.asyncio
    async def test_fast_simple_paginate(self, session):
        paginator = await UserRepository(session).fast_simple_paginate(10, page=2)

        assert [user.id for user in paginator] == [11, 12, 13, 14, 15]
        assert paginator.has_more_pages is False

    @pytest.mark.asyncio
    async def test_query_starts_empty(self, session):
        query = UserRepository(session).query()

        assert query.model is User
        assert query.wheres == []
