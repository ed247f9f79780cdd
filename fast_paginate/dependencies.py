"""
FastAPI dependencies for paginated endpoints.

Example:
    ```python
    from fastapi import APIRouter, Depends
    from fast_paginate.dependencies import SessionDep, get_page_request

    router = APIRouter()

    @router.get("/users")
    async def list_users(
        session: SessionDep,
        page_request: PageRequest = Depends(get_page_request),
    ) -> PaginatedResponseModel[User]:
        paginator = await QueryBuilder(session, User).fast_paginate(
            page_request.per_page, page=page_request.page
        )
        return paginator.with_path(page_request.path).appends(
            **page_request.query
        ).to_response()
    ```
"""

from typing import Annotated, Callable

from fastapi import Depends, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from fast_paginate.constants import DEFAULT_PAGE_NAME
from fast_paginate.exceptions import ValidationError
from fast_paginate.schemas.request import PageRequest
from fast_paginate.storage.db import get_session
from fast_paginate.storage.pagination.resolvers import resolve_page, resolve_per_page

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def _int_or_none(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def page_request_dependency(
    page_name: str = DEFAULT_PAGE_NAME, per_page_name: str = "per_page"
) -> Callable[[Request], PageRequest]:
    """
    Build a dependency reading pagination parameters from the query string.

    Malformed or out-of-range values never fail the request: the page falls
    back to 1, and the page size to the default (``-1`` is kept, sizes above
    MAX_PAGE_SIZE are capped).

    Args:
        page_name: Query-string parameter holding the page number.
        per_page_name: Query-string parameter holding the page size.

    Returns:
        Dependency callable returning a PageRequest.
    """

    def dependency(request: Request) -> PageRequest:
        params = request.query_params
        page = resolve_page(_int_or_none(params.get(page_name)))
        per_page = _int_or_none(params.get(per_page_name))

        if per_page is not None:
            try:
                per_page = resolve_per_page(per_page)
            except ValidationError:
                per_page = None

        return PageRequest(
            page=page,
            per_page=per_page,
            page_name=page_name,
            path=request.url.path,
            query={
                key: value
                for key, value in params.items()
                if key != page_name
            },
        )

    return dependency


get_page_request = page_request_dependency()
