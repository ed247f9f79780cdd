from typing import Any, Generic

from pydantic import BaseModel, Field
from typing_extensions import Annotated

from fast_paginate.schemas.generic_typing import GenericSQLModelType


class MetadataModel(BaseModel):  # type: ignore[misc]
    """
    Pagination metadata shared by both paginator kinds.

    ``total`` and ``pages`` are None for simple pagination, which never
    counts rows.
    """

    page: Annotated[int, Field(ge=1)]
    per_page: int
    total: Annotated[int, Field(ge=0)] | None = None
    pages: Annotated[int, Field(ge=0)] | None = None
    has_more: bool = False
    next_page_url: str | None = None
    prev_page_url: str | None = None


class PaginatedResponseModel(BaseModel, Generic[GenericSQLModelType]):  # type: ignore[misc]
    items: list[GenericSQLModelType] | list[Any]
    meta: MetadataModel
