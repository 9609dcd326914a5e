from __future__ import annotations

from typing import Annotated, Generic, Optional, TypeVar

from fastapi import Path, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# largest id a JSON client can send without losing precision
MAX_MOVIE_ID = 2**53 - 1

MovieIdPath = Annotated[
    int, Path(gt=0, le=MAX_MOVIE_ID, description="Catalog movie id")]


class CamelModel(BaseModel):
    """Python names inside, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: T


class Pagination(CamelModel):
    limit: int
    offset: int = 0
    total: int


class PageParams(BaseModel):
    limit: int = 20
    offset: int = 0


def page_params(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> PageParams:
    return PageParams(limit=limit, offset=offset)


def limit_param(limit: int = Query(20, ge=1, le=100)) -> int:
    return limit
