from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from netflim_api.models.common import MAX_MOVIE_ID, CamelModel, Pagination
from netflim_api.models.movies import MovieData, MovieStats
from netflim_api.models.reactions import Reaction
from netflim_api.models.users import RatedMovie, UserStats


class LikeCreateRequest(CamelModel):
    movie_id: int = Field(..., gt=0, le=MAX_MOVIE_ID)
    is_liked: bool = True
    movie_data: Optional[MovieData] = None

    @model_validator(mode="after")
    def _same_movie(self):
        data = self.movie_data
        if data is not None and data.id is not None \
                and data.id != self.movie_id:
            raise ValueError("movieData.id must match movieId")
        return self


class AdvanceRequest(CamelModel):
    movie_data: Optional[MovieData] = None


class LikeOut(CamelModel):
    id: str
    user_id: str
    movie_id: int
    is_liked: bool
    reaction: Reaction
    created_at: datetime
    updated_at: datetime


class LikeCreated(CamelModel):
    like: LikeOut
    movie_stats: MovieStats


class LikeStatus(CamelModel):
    is_liked: Optional[bool] = None
    reaction: Reaction = Reaction.neutral
    movie_stats: MovieStats


class LikeDeleted(CamelModel):
    deleted: bool
    movie_stats: MovieStats


class UserLikeItem(CamelModel):
    id: str
    movie_id: int
    is_liked: bool
    reaction: Reaction
    title: str
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    vote_average: Optional[float] = None
    created_at: datetime
    updated_at: datetime


class UserLikesPage(CamelModel):
    likes: List[UserLikeItem]
    stats: UserStats
    pagination: Pagination


class RatedMoviesPage(CamelModel):
    movies: List[RatedMovie]
    stats: UserStats
    pagination: Pagination
