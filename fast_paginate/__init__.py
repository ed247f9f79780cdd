"""
Deferred-join pagination for async SQLModel queries.

    from fast_paginate import QueryBuilder

    paginator = await QueryBuilder(session, User).order_by("name").fast_paginate(20)
"""

from fast_paginate.exceptions import (
    FastPaginateError,
    QueryBuilderError,
    ValidationError,
)
from fast_paginate.schemas.options import PaginationOptions
from fast_paginate.storage.pagination import (
    LengthAwarePaginator,
    SimplePaginator,
    fast_paginate,
    fast_simple_paginate,
    simple_fast_paginate,
)
from fast_paginate.storage.query import QueryBuilder

__all__ = [
    "FastPaginateError",
    "LengthAwarePaginator",
    "PaginationOptions",
    "QueryBuilder",
    "QueryBuilderError",
    "SimplePaginator",
    "ValidationError",
    "fast_paginate",
    "fast_simple_paginate",
    "simple_fast_paginate",
]
