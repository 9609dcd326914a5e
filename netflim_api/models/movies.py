from __future__ import annotations

import json
from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from netflim_api.models.common import MAX_MOVIE_ID, CamelModel

ReleaseDate = Annotated[str, Field(pattern=r"^\d{4}-\d{2}-\d{2}$")]


class Genre(BaseModel):
    id: Optional[int] = None
    name: str


def parse_genres(raw: Any) -> List[dict]:
    """Stored JSON text -> list of genre dicts; unreadable payloads -> []."""
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return []
    if not isinstance(raw, list):
        return []
    return [g for g in raw if isinstance(g, dict) and "name" in g]


class MovieData(BaseModel):
    """Catalog metadata sent along with a like, in the catalog's own keys."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = Field(default=None, gt=0, le=MAX_MOVIE_ID)
    title: str = Field(min_length=1, max_length=500)
    overview: Optional[str] = Field(default=None, max_length=2000)
    poster_path: Optional[str] = Field(default=None, max_length=500)
    release_date: Optional[ReleaseDate] = None
    vote_average: Optional[float] = Field(default=None, ge=0, le=10)
    vote_count: Optional[int] = Field(default=None, ge=0)
    genres: List[Genre] = Field(default_factory=list)

    @field_validator("release_date", "poster_path", mode="before")
    @classmethod
    def _empty_to_none(cls, value):
        return None if value == "" else value

    def genres_json(self) -> Optional[str]:
        if not self.genres:
            return None
        return json.dumps([g.model_dump() for g in self.genres])


class MovieOut(CamelModel):
    id: int
    title: str
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    vote_average: Optional[float] = None
    vote_count: Optional[int] = None
    genres: List[Genre] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("genres", mode="before")
    @classmethod
    def _load_genres(cls, value):
        if isinstance(value, list) and all(isinstance(g, Genre)
                                           for g in value):
            return value
        return parse_genres(value)


class MovieStats(CamelModel):
    total_interactions: int = 0
    likes: int = 0
    dislikes: int = 0


class MostLikedMovie(MovieOut):
    like_count: int = 0
    dislike_count: int = 0


class TopPagination(CamelModel):
    limit: int
    total: int


class MostLikedPage(CamelModel):
    movies: List[MostLikedMovie]
    pagination: TopPagination


class MovieList(CamelModel):
    movies: List[MovieOut]
    total: int
