import math
from typing import Generic, List, Literal, Tuple, TypeVar

from fastapi import Query
from pydantic import BaseModel


T = TypeVar("T")


class OkResponse(BaseModel, Generic[T]):
    """Successful response envelope."""

    ok: Literal[True] = True
    value: T


class ErrorDetail(BaseModel):
    """Error payload carried by a failed response."""

    code: int
    message: str


class ErrorResponse(BaseModel):
    """Failed response envelope."""

    ok: Literal[False] = False
    error: ErrorDetail


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


class Pagination(BaseModel):
    """Pagination block returned with every list."""

    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(total=total, page=page, limit=limit, pages=page_count(total, limit))


def page_count(total: int, limit: int) -> int:
    """Number of pages needed to show ``total`` records ``limit`` at a time."""
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


SortOrder = Literal["asc", "desc"]


class PageParams:
    """Query parameters shared by all list endpoints."""

    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
    ):
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def sort_spec(field: str, order: SortOrder) -> List[Tuple[str, int]]:
    """Build a Mongo sort specification for one field."""
    return [(field, 1 if order == "asc" else -1)]
