"""
Shared GraphQL types: plain message responses and pagination.
"""
import strawberry

from marketplace.core.config import settings
from marketplace.db.store import Page


@strawberry.type
class MessageResponse:
    message: str


@strawberry.input
class PaginationInput:
    page: int = settings.DEFAULT_PAGE
    limit: int = settings.DEFAULT_PAGE_LIMIT


@strawberry.type
class PaginationInfo:
    total: int
    pages: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def from_page(cls, page: Page) -> "PaginationInfo":
        return cls(
            total=page.total,
            pages=page.pages,
            current_page=page.current_page,
            has_next_page=page.has_next_page,
            has_previous_page=page.has_previous_page,
        )
