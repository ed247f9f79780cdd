from pydantic import BaseModel, Field
from typing_extensions import Annotated


class PageRequest(BaseModel):  # type: ignore[misc]
    """
    Pagination parameters resolved from an HTTP request.

    Attributes:
        page: Page number to retrieve (starts from 1).
        per_page: Number of items per page, or None for the default size.
        page_name: Query-string parameter the page number was read from.
        path: Request path used to build page URLs.
        query: Other query-string parameters to keep in page URLs.
    """

    page: Annotated[int, Field(ge=1)] = 1
    per_page: int | None = None
    page_name: str = "page"
    path: str = "/"
    query: dict[str, str] = {}
