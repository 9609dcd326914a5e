from __future__ import annotations

from datetime import datetime
from typing import List

from netflim_api.models.common import CamelModel, Pagination
from netflim_api.models.movies import MovieOut


class UserOut(CamelModel):
    id: str
    session_id: str
    created_at: datetime


class UserStats(CamelModel):
    # likes + dislikes: every stored edge is a reaction
    total_reactions: int = 0
    liked_movies: int = 0
    disliked_movies: int = 0


class UserProfile(CamelModel):
    user: UserOut
    stats: UserStats


class GenreCount(CamelModel):
    name: str
    count: int


class RatedMovie(MovieOut):
    reacted_at: datetime


class LikedMoviesProfile(CamelModel):
    movies: List[RatedMovie]
    stats: UserStats
    genres: List[GenreCount]
    common_genres: List[GenreCount]
    pagination: Pagination


class SessionCreated(CamelModel):
    session_id: str
