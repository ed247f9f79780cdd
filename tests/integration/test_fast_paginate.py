"""
End-to-end tests for deferred-join pagination on SQLite.

The seeded database holds 15 users ("Person 1" .. "Person 15", ids 1..15)
with one post each. Statements are captured with record_queries() so the
tests assert on the exact SQL each call emits.
"""

import pytest
from sqlalchemy import func

from fast_paginate import LengthAwarePaginator, QueryBuilder, SimplePaginator
from fast_paginate.utils.query_monitor import record_queries
from tests.support.models import Post, Tag, User

ALL_KEYS = ", ".join(str(i) for i in range(1, 16))


def ids(paginator):
    return [user.id for user in paginator]


class TestFastPaginate:
    """Length-aware fast pagination."""

    @pytest.mark.asyncio
    async def test_default_page_runs_three_queries(self, engine, session):
        with record_queries(engine) as queries:
            paginator = await QueryBuilder(session, User).fast_paginate()

        assert isinstance(paginator, LengthAwarePaginator)
        assert ids(paginator) == list(range(1, 16))
        assert paginator.total == 15
        assert paginator.per_page == 15
        assert paginator.current_page == 1

        assert len(queries) == 3
        assert "count(*)" in queries[0].statement
        assert queries[1].statement.startswith("SELECT users.id \nFROM users")
        assert tuple(queries[1].parameters) == (15, 0)
        assert f"WHERE users.id IN ({ALL_KEYS})" in queries[2].statement
        assert tuple(queries[2].parameters) == (16, 0)

    @pytest.mark.asyncio
    async def test_second_page(self, engine, session):
        with record_queries(engine) as queries:
            paginator = await QueryBuilder(session, User).fast_paginate(5, page=2)

        assert ids(paginator) == [6, 7, 8, 9, 10]
        assert paginator.total == 15
        assert paginator.last_page == 3
        assert paginator.has_more_pages is True
        assert tuple(queries[1].parameters) == (5, 5)
        assert "WHERE users.id IN (6, 7, 8, 9, 10)" in queries[2].statement
        assert tuple(queries[2].parameters) == (6, 0)

    @pytest.mark.asyncio
    async def test_page_past_the_end_is_empty(self, session):
        paginator = await QueryBuilder(session, User).fast_paginate(5, page=9)

        assert ids(paginator) == []
        assert paginator.total == 15
        assert paginator.current_page == 9

    @pytest.mark.asyncio
    async def test_ordering_applies_to_both_queries(self, engine, session):
        query = QueryBuilder(session, User).order_by("name")

        with record_queries(engine) as queries:
            paginator = await query.fast_paginate(5)

        assert ids(paginator) == [1, 10, 11, 12, 13]
        assert "ORDER BY users.name ASC" in queries[1].statement
        assert "WHERE users.id IN (1, 10, 11, 12, 13)" in queries[2].statement
        assert "ORDER BY users.name ASC" in queries[2].statement

    @pytest.mark.asyncio
    async def test_order_by_selected_alias(self, engine, session):
        query = (
            QueryBuilder(session, User)
            .select("*", func.lower(User.name).label("lname"))
            .order_by("lname", "desc")
        )

        with record_queries(engine) as queries:
            paginator = await query.fast_paginate(3)

        assert "SELECT users.id, lower(users.name) AS lname" in queries[1].statement
        assert [row[0].id for row in paginator] == [9, 8, 7]
        assert [row[1] for row in paginator] == ["person 9", "person 8", "person 7"]

    @pytest.mark.asyncio
    async def test_eager_loads_run_after_outer_query(self, engine, session):
        query = QueryBuilder(session, User).with_("posts")

        with record_queries(engine) as queries:
            paginator = await query.fast_paginate(5, page=3)

        assert len(queries) == 4
        assert "posts" not in queries[1].statement
        assert "FROM posts" in queries[3].statement
        assert [user.posts[0].title for user in paginator] == [
            f"Post {i}" for i in range(11, 16)
        ]

    @pytest.mark.asyncio
    async def test_wheres_filter_inner_query(self, engine, session):
        query = QueryBuilder(session, User).where(User.id > 10)

        with record_queries(engine) as queries:
            paginator = await query.fast_paginate(3)

        assert ids(paginator) == [11, 12, 13]
        assert paginator.total == 5
        assert "users.id > ?" in queries[1].statement
        assert "users.id > ?" not in queries[2].statement

    @pytest.mark.asyncio
    async def test_should_preserve_wheres(self, engine, session):
        query = QueryBuilder(session, User).where(User.id > 10)

        with record_queries(engine) as queries:
            await query.fast_paginate(3, options={"should_preserve_wheres": True})

        assert "users.id > ?" in queries[2].statement

    @pytest.mark.asyncio
    async def test_joins_keep_wheres_on_outer_query(self, engine, session):
        query = (
            QueryBuilder(session, User)
            .join(Post)
            .where(Post.title.like("Post 1%"))
            .order_by("id")
        )

        with record_queries(engine) as queries:
            paginator = await query.fast_paginate(15)

        assert ids(paginator) == [1, 10, 11, 12, 13, 14, 15]
        assert "JOIN posts" in queries[2].statement
        assert "LIKE" in queries[2].statement

    @pytest.mark.asyncio
    async def test_should_omit_joins(self, engine, session):
        query = (
            QueryBuilder(session, User)
            .join(Post)
            .where(Post.title.like("Post 1%"))
            .order_by("id")
        )

        with record_queries(engine) as queries:
            paginator = await query.fast_paginate(
                15, options={"should_omit_joins": True}
            )

        assert ids(paginator) == [1, 10, 11, 12, 13, 14, 15]
        assert "JOIN posts" in queries[1].statement
        assert "JOIN" not in queries[2].statement
        assert "LIKE" not in queries[2].statement

    @pytest.mark.asyncio
    async def test_should_omit_wheres_with_joins(self, engine, session):
        query = (
            QueryBuilder(session, User)
            .join(Post)
            .where(Post.title.like("Post 1%"))
            .order_by("id")
        )

        with record_queries(engine) as queries:
            await query.fast_paginate(15, options={"should_omit_wheres": True})

        assert "JOIN posts" in queries[2].statement
        assert "LIKE" not in queries[2].statement

    @pytest.mark.asyncio
    async def test_string_keys_are_bound(self, engine, session):
        with record_queries(engine) as queries:
            paginator = await QueryBuilder(session, Tag).order_by("slug").fast_paginate(2)

        assert [tag.slug for tag in paginator] == ["alpha", "beta"]
        assert "tags.slug IN (?, ?)" in queries[2].statement
        assert "alpha" in tuple(queries[2].parameters)

    @pytest.mark.asyncio
    async def test_columns_argument_limits_outer_select(self, engine, session):
        with record_queries(engine) as queries:
            paginator = await QueryBuilder(session, User).fast_paginate(
                2, columns=["id", "name"]
            )

        assert [user.name for user in paginator] == ["Person 1", "Person 2"]
        assert "users.email" not in queries[2].statement

    @pytest.mark.asyncio
    async def test_query_is_not_modified(self, session):
        query = QueryBuilder(session, User).where(User.id > 3).order_by("name")

        first = await query.fast_paginate(4, page=2)
        second = await query.fast_paginate(4, page=2)

        assert ids(first) == ids(second)
        assert len(query.wheres) == 1
        assert query.columns == []
        assert query.limit_value is None

    @pytest.mark.asyncio
    async def test_matches_standard_pagination(self, session):
        query = QueryBuilder(session, User).order_by_desc("email")

        fast = await query.fast_paginate(4, page=2)
        standard = await query.paginate(4, page=2)

        assert ids(fast) == ids(standard)
        assert fast.meta == standard.meta


class TestFastSimplePaginate:
    """Simple fast pagination."""

    @pytest.mark.asyncio
    async def test_runs_two_queries_without_count(self, engine, session):
        with record_queries(engine) as queries:
            paginator = await QueryBuilder(session, User).fast_simple_paginate(5, page=2)

        assert isinstance(paginator, SimplePaginator)
        assert ids(paginator) == [6, 7, 8, 9, 10]
        assert paginator.has_more_pages is True
        assert len(queries) == 2
        assert tuple(queries[0].parameters) == (6, 5)
        assert "WHERE users.id IN (6, 7, 8, 9, 10)" in queries[1].statement
        assert tuple(queries[1].parameters) == (6, 0)

    @pytest.mark.asyncio
    async def test_last_page_has_no_more(self, session):
        paginator = await QueryBuilder(session, User).fast_simple_paginate(5, page=3)

        assert ids(paginator) == [11, 12, 13, 14, 15]
        assert paginator.has_more_pages is False

    @pytest.mark.asyncio
    async def test_alias(self, session):
        query = QueryBuilder(session, User)

        paginator = await query.simple_fast_paginate(5)

        assert ids(paginator) == [1, 2, 3, 4, 5]
