from __future__ import annotations

from netflim_api.models.common import CamelModel


class GlobalStats(CamelModel):
    total_interactions: int = 0
    total_likes: int = 0
    total_dislikes: int = 0
    unique_users: int = 0
    unique_movies: int = 0


class DetailedStats(GlobalStats):
    total_users: int = 0
    total_movies: int = 0
