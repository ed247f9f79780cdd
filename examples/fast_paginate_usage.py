"""
Fast Pagination Usage Examples.

This module demonstrates deferred-join pagination from a FastAPI endpoint
and from a repository.

Use cases:
- Deep pages of large tables (large OFFSET values)
- Wide rows where reading whole rows for skipped pages is expensive
- Endpoints that eager load relationships

Trade-offs:
- One more round trip than standard pagination
- Grouped, HAVING and UNION queries gain nothing (they fall back)

Related:
- fast_paginate/storage/pagination/fast.py - Implementation
- fast_paginate/dependencies.py - Page request dependency
"""

from fastapi import Depends, FastAPI
from sqlmodel import Field, Relationship, SQLModel

from fast_paginate import QueryBuilder
from fast_paginate.dependencies import SessionDep, get_page_request
from fast_paginate.repositories.base import BaseRepository
from fast_paginate.schemas.request import PageRequest
from fast_paginate.schemas.response import PaginatedResponseModel


class Author(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    name: str
    active: bool = True

    books: list["Book"] = Relationship(back_populates="author")


class Book(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    title: str
    author_id: int = Field(foreign_key="author.id")

    author: Author | None = Relationship(back_populates="books")


app = FastAPI()


# Example 1: Endpoint with length-aware fast pagination
@app.get("/authors")
async def list_authors(
    session: SessionDep,
    page_request: PageRequest = Depends(get_page_request),
) -> PaginatedResponseModel[Author]:
    """
    GET /authors?page=40&per_page=25

    The inner query only reads author ids for page 40; full rows (and their
    books) are fetched for those 25 ids only.
    """
    paginator = await (
        QueryBuilder(session, Author)
        .where(Author.active.is_(True))
        .order_by("name")
        .with_("books")
        .fast_paginate(page_request.per_page, page=page_request.page)
    )
    return (
        paginator.with_path(page_request.path)
        .appends(**page_request.query)
        .to_response()
    )


# Example 2: Simple pagination ("next page" links only, no COUNT)
@app.get("/books")
async def list_books(
    session: SessionDep,
    page_request: PageRequest = Depends(get_page_request),
) -> PaginatedResponseModel[Book]:
    paginator = await QueryBuilder(session, Book).order_by_desc("id").fast_simple_paginate(
        page_request.per_page, page=page_request.page
    )
    return paginator.with_path(page_request.path).to_response()


# Example 3: Joined query that keeps its WHERE criteria off the outer query
class AuthorRepository(BaseRepository[Author]):
    def __init__(self, session):
        super().__init__(session, Author)

    async def authors_with_title(self, word: str, page: int):
        """
        Authors having a book whose title contains ``word``.

        The join only selects which authors belong on the page, so the outer
        query drops it along with the title filter.
        """
        return await self.fast_paginate(
            20,
            page,
            scope=lambda query: query.join(Book)
            .where(Book.title.contains(word))
            .order_by("id"),
            options={"should_omit_joins": True},
        )
