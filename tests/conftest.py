"""
Pytest configuration and fixtures for testing.

Database fixtures run against an in-memory SQLite database through
aiosqlite. The ``engine`` fixture seeds 15 users ("Person 1" .. "Person 15",
ids 1..15) with one post each, and three string-keyed tags.
"""

import pytest
import pytest_asyncio
from sqlalchemy.dialects import sqlite
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from fast_paginate.storage.grammar import Grammar
from fast_paginate.storage.query import QueryBuilder
from tests.support.models import Post, Tag, User

USER_COUNT = 15


@pytest_asyncio.fixture
async def engine():
    """
    Provides a seeded in-memory SQLite engine.

    Yields:
        AsyncEngine: Engine whose single shared connection holds the data.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async with AsyncSession(engine) as seed:
        for i in range(1, USER_COUNT + 1):
            seed.add(User(id=i, name=f"Person {i}", email=f"person{i}@example.com"))
        await seed.flush()
        for i in range(1, USER_COUNT + 1):
            seed.add(Post(id=i, title=f"Post {i}", user_id=i))
        for slug in ("alpha", "beta", "gamma"):
            seed.add(Tag(slug=slug, label=slug.title()))
        await seed.commit()

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    """
    Provides a fresh session on the seeded engine.

    Yields:
        AsyncSession: Session with an empty identity map.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def grammar():
    """SQLite grammar for building queries without a database."""
    return Grammar(sqlite.dialect())


@pytest.fixture
def user_query(grammar):
    """
    Provides a factory of unbound user queries.

    Returns:
        Callable returning a QueryBuilder over User with no session.
    """

    def _factory():
        return QueryBuilder(None, User, grammar=grammar)

    return _factory
