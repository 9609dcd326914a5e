"""SQL repository for the likes table (user/movie edges)."""

from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession

from netflim_api.db.tables import LikeRow, MovieRow, UserRow, new_id, utcnow


class LikesRepo:
    """CRUD helpers for like/dislike edges."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str, movie_id: int) -> Optional[LikeRow]:
        """Get the edge for (user, movie), None if neutral."""
        res = await self._session.execute(
            select(LikeRow)
            .where(LikeRow.user_id == user_id, LikeRow.movie_id == movie_id)
            .execution_options(populate_existing=True)
        )
        return res.scalar_one_or_none()

    async def upsert(
        self,
        user_id: str,
        movie_id: int,
        is_liked: bool,
    ) -> LikeRow:
        """Write-wins upsert; id and created_at of an existing edge stay."""
        now = utcnow()
        stmt = insert(LikeRow).values(
            id=new_id(),
            user_id=user_id,
            movie_id=movie_id,
            is_liked=is_liked,
            created_at=now,
            updated_at=now,
        ).on_conflict_do_update(
            index_elements=[LikeRow.user_id, LikeRow.movie_id],
            set_={"is_liked": is_liked, "updated_at": now},
        )
        await self._session.execute(stmt)
        row = await self.get(user_id, movie_id)
        assert row is not None
        return row

    async def delete(self, user_id: str, movie_id: int) -> bool:
        """Delete the edge; return whether one existed."""
        res = await self._session.execute(
            delete(LikeRow)
            .where(LikeRow.user_id == user_id, LikeRow.movie_id == movie_id)
        )
        return res.rowcount > 0

    async def list_by_user(
            self,
            user_id: str,
            limit: int,
            offset: int) -> List[Any]:
        """Edges of a user with movie title/poster, newest change first."""
        res = await self._session.execute(
            select(
                LikeRow,
                MovieRow.title,
                MovieRow.poster_path,
                MovieRow.release_date,
                MovieRow.vote_average,
            )
            .join(MovieRow, MovieRow.id == LikeRow.movie_id)
            .where(LikeRow.user_id == user_id)
            .order_by(LikeRow.updated_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(res.all())

    async def list_movies(
            self,
            user_id: str,
            is_liked: bool,
            limit: int,
            offset: int) -> List[Any]:
        """(MovieRow, reacted_at) pairs for one side of the user's edges."""
        res = await self._session.execute(
            select(MovieRow, LikeRow.created_at.label("reacted_at"))
            .join(LikeRow, LikeRow.movie_id == MovieRow.id)
            .where(LikeRow.user_id == user_id,
                   LikeRow.is_liked.is_(is_liked))
            .order_by(LikeRow.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(res.all())

    async def get_all(self) -> List[Any]:
        """Every edge with its movie title and session token."""
        res = await self._session.execute(
            select(LikeRow, MovieRow.title, UserRow.session_id)
            .outerjoin(MovieRow, MovieRow.id == LikeRow.movie_id)
            .outerjoin(UserRow, UserRow.id == LikeRow.user_id)
            .order_by(LikeRow.created_at.desc())
        )
        return list(res.all())
