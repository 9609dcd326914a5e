from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import case, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from netflim_api.db.tables import LikeRow, MovieRow

_LIKES = func.count(case((LikeRow.is_liked.is_(True), 1)))
_DISLIKES = func.count(case((LikeRow.is_liked.is_(False), 1)))


class StatsRepo:
    """Aggregates over the likes table; nothing here is stored."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def movie_counts(self, movie_id: int) -> Dict[str, int]:
        res = await self._session.execute(
            select(
                func.count(LikeRow.id).label("total"),
                _LIKES.label("likes"),
                _DISLIKES.label("dislikes"),
            ).where(LikeRow.movie_id == movie_id)
        )
        row = res.one()
        return {
            "total_interactions": row.total or 0,
            "likes": row.likes or 0,
            "dislikes": row.dislikes or 0,
        }

    async def user_counts(self, user_id: str) -> Dict[str, int]:
        res = await self._session.execute(
            select(
                func.count(LikeRow.id).label("total"),
                _LIKES.label("likes"),
                _DISLIKES.label("dislikes"),
            ).where(LikeRow.user_id == user_id)
        )
        row = res.one()
        return {
            "total_reactions": row.total or 0,
            "liked_movies": row.likes or 0,
            "disliked_movies": row.dislikes or 0,
        }

    async def global_counts(self) -> Dict[str, int]:
        res = await self._session.execute(
            select(
                func.count(LikeRow.id).label("total"),
                _LIKES.label("likes"),
                _DISLIKES.label("dislikes"),
                func.count(distinct(LikeRow.user_id)).label("users"),
                func.count(distinct(LikeRow.movie_id)).label("movies"),
            )
        )
        row = res.one()
        return {
            "total_interactions": row.total or 0,
            "total_likes": row.likes or 0,
            "total_dislikes": row.dislikes or 0,
            "unique_users": row.users or 0,
            "unique_movies": row.movies or 0,
        }

    async def liked_genre_payloads(
            self,
            user_id: Optional[str] = None) -> List[str]:
        """Raw genre JSON of liked movies, one payload per liked edge."""
        stmt = (
            select(MovieRow.genres)
            .join(LikeRow, LikeRow.movie_id == MovieRow.id)
            .where(LikeRow.is_liked.is_(True), MovieRow.genres.is_not(None))
        )
        if user_id is not None:
            stmt = stmt.where(LikeRow.user_id == user_id)
        res = await self._session.execute(stmt)
        return list(res.scalars())

    async def most_liked(self, limit: int) -> List[Any]:
        like_count = _LIKES.label("like_count")
        dislike_count = _DISLIKES.label("dislike_count")
        res = await self._session.execute(
            select(MovieRow, like_count, dislike_count)
            .outerjoin(LikeRow, LikeRow.movie_id == MovieRow.id)
            .group_by(MovieRow.id)
            .having(_LIKES > 0)
            .order_by(like_count.desc(), MovieRow.vote_average.desc())
            .limit(limit)
        )
        return list(res.all())
