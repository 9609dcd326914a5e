"""Service layer for like statistics; everything is computed on read."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from netflim_api.models.movies import MostLikedMovie, MovieStats, parse_genres
from netflim_api.models.stats import DetailedStats, GlobalStats
from netflim_api.models.users import GenreCount, UserStats
from netflim_api.services.repositories.movies_repo import MoviesRepo
from netflim_api.services.repositories.stats_repo import StatsRepo
from netflim_api.services.repositories.users_repo import UsersRepo

COMMON_GENRES_LIMIT = 10


def genre_frequency(payloads: Iterable[object]) -> List[GenreCount]:
    """Tally genre names over stored genre payloads, most frequent first.

    Payloads that are not a JSON list of {id, name} are skipped.
    Ties are ordered by name.
    """
    counts: Counter[str] = Counter()
    for payload in payloads:
        for genre in parse_genres(payload):
            counts[str(genre["name"])] += 1
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [GenreCount(name=name, count=count) for name, count in ranked]


class StatsService:
    """Per-movie, per-user and global like statistics."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repositories."""
        self.repo = StatsRepo(session)
        self.users = UsersRepo(session)
        self.movies = MoviesRepo(session)

    # ----- MOVIE -----

    async def movie_stats(self, movie_id: int) -> MovieStats:
        """Counts of edges for a movie, split by like/dislike."""
        return MovieStats(**await self.repo.movie_counts(movie_id))

    async def most_liked(self, limit: int = 20) -> List[MostLikedMovie]:
        """Movies with at least one like, most liked first."""
        rows = await self.repo.most_liked(limit)
        return [
            MostLikedMovie.model_validate({
                **movie.as_dict(),
                "like_count": like_count,
                "dislike_count": dislike_count,
            })
            for movie, like_count, dislike_count in rows
        ]

    # ----- USER -----

    async def user_stats(self, user_id: Optional[str]) -> UserStats:
        """Reaction counts for a user; zeros for an unknown visitor."""
        if user_id is None:
            return UserStats()
        return UserStats(**await self.repo.user_counts(user_id))

    async def liked_genres(self, user_id: str) -> List[GenreCount]:
        """Genre frequency over the user's liked movies."""
        return genre_frequency(await self.repo.liked_genre_payloads(user_id))

    async def common_genres(
            self,
            limit: int = COMMON_GENRES_LIMIT) -> List[GenreCount]:
        """Top genres over every liked edge of every user."""
        payloads = await self.repo.liked_genre_payloads()
        return genre_frequency(payloads)[:limit]

    # ----- GLOBAL -----

    async def global_stats(self) -> GlobalStats:
        """Totals across all edges."""
        return GlobalStats(**await self.repo.global_counts())

    async def detailed_stats(self) -> DetailedStats:
        """Global totals plus table sizes."""
        counts = await self.repo.global_counts()
        return DetailedStats(
            **counts,
            total_users=await self.users.count(),
            total_movies=await self.movies.count(),
        )
