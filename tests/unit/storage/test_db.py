"""Tests for engine creation and the session dependency."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from fast_paginate.settings import Settings
from fast_paginate.storage.db import create_engine_from_settings, get_session
from fast_paginate.utils.query_monitor import _before_cursor_execute


def mock_session_factory(session):
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = session
    return factory


class TestCreateEngineFromSettings:
    """Tests for create_engine_from_settings."""

    @pytest.mark.asyncio
    async def test_sqlite_uses_static_pool_and_monitoring(self):
        settings = Settings(DATABASE_URL="sqlite+aiosqlite:///:memory:")

        engine = create_engine_from_settings(settings)

        assert isinstance(engine.sync_engine.pool, StaticPool)
        assert event.contains(
            engine.sync_engine, "before_cursor_execute", _before_cursor_execute
        )
        await engine.dispose()


class TestGetSession:
    """Tests for get_session."""

    @pytest.mark.asyncio
    async def test_commits_after_use(self):
        mock_session = AsyncMock()

        with patch(
            "fast_paginate.storage.db.async_session",
            mock_session_factory(mock_session),
        ):
            gen = get_session()
            assert await gen.__anext__() is mock_session
            with pytest.raises(StopAsyncIteration):
                await gen.__anext__()

        mock_session.commit.assert_awaited_once()
        mock_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rolls_back_on_database_error(self):
        mock_session = AsyncMock()

        with patch(
            "fast_paginate.storage.db.async_session",
            mock_session_factory(mock_session),
        ):
            gen = get_session()
            await gen.__anext__()
            with pytest.raises(SQLAlchemyError):
                await gen.athrow(SQLAlchemyError("connection lost"))

        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()
