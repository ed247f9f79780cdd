"""
Database statement monitoring.

Hooks SQLAlchemy cursor events to time every statement, feed the database
Prometheus metrics and log slow statements. ``record_queries`` captures the
statements executed inside a block, which is how tests assert on the exact
SQL emitted by a pagination call.
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine

from fast_paginate.logging import logger
from fast_paginate.settings import app_settings
from fast_paginate.utils.metrics import (
    db_query_duration_seconds,
    db_slow_queries_total,
)

_START_KEY = "_fast_paginate_query_start"


@dataclass
class RecordedQuery:
    """A statement as it was sent to the DBAPI cursor."""

    statement: str
    parameters: Any


@dataclass
class QueryLog:
    """Statements captured by record_queries(), in execution order."""

    queries: list[RecordedQuery] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.queries)

    def __getitem__(self, index: int) -> RecordedQuery:
        return self.queries[index]

    @property
    def statements(self) -> list[str]:
        return [query.statement for query in self.queries]


def _sync_engine(engine: Engine | AsyncEngine) -> Engine:
    if isinstance(engine, AsyncEngine):
        return engine.sync_engine
    return engine


def _operation(statement: str) -> str:
    return statement.lstrip().split(" ", 1)[0].lower() or "unknown"


def _before_cursor_execute(
    conn, cursor, statement, parameters, context, executemany
) -> None:
    conn.info.setdefault(_START_KEY, []).append(time.perf_counter())


def _after_cursor_execute(
    conn, cursor, statement, parameters, context, executemany
) -> None:
    starts = conn.info.get(_START_KEY)
    if not starts:
        return
    duration = time.perf_counter() - starts.pop()
    operation = _operation(statement)
    db_query_duration_seconds.labels(operation=operation).observe(duration)

    if duration * 1000 >= app_settings.SLOW_QUERY_THRESHOLD_MS:
        db_slow_queries_total.labels(operation=operation).inc()
        logger.warning(
            f"Slow query ({duration * 1000:.1f}ms): {statement}",
            extra={"duration_ms": round(duration * 1000, 1)},
        )


def enable_query_monitoring(engine: Engine | AsyncEngine) -> None:
    """
    Attach timing listeners to an engine.

    Safe to call more than once for the same engine.

    Args:
        engine: Sync or async SQLAlchemy engine to monitor.
    """
    target = _sync_engine(engine)
    if event.contains(target, "before_cursor_execute", _before_cursor_execute):
        return
    event.listen(target, "before_cursor_execute", _before_cursor_execute)
    event.listen(target, "after_cursor_execute", _after_cursor_execute)


@contextmanager
def record_queries(engine: Engine | AsyncEngine) -> Iterator[QueryLog]:
    """
    Capture every statement executed on ``engine`` inside the block.

    Args:
        engine: Sync or async SQLAlchemy engine to listen on.

    Yields:
        QueryLog filled as statements execute.

    Example:
        >>> with record_queries(engine) as queries:
        ...     await QueryBuilder(session, User).fast_paginate()
        >>> len(queries)
        3
    """
    target = _sync_engine(engine)
    log = QueryLog()

    def _record(conn, cursor, statement, parameters, context, executemany):
        log.queries.append(RecordedQuery(statement, parameters))

    event.listen(target, "before_cursor_execute", _record)
    try:
        yield log
    finally:
        event.remove(target, "before_cursor_execute", _record)
