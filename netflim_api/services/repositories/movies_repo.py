from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession

from netflim_api.db.tables import MovieRow, utcnow
from netflim_api.models.movies import MovieData


class MoviesRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(self, movie_id: int, data: MovieData) -> None:
        """Insert or refresh every mutable field; created_at survives."""
        now = utcnow()
        fields = {
            "title": data.title,
            "overview": data.overview,
            "poster_path": data.poster_path,
            "release_date": data.release_date,
            "vote_average": data.vote_average,
            "vote_count": data.vote_count,
            "genres": data.genres_json(),
        }
        stmt = insert(MovieRow).values(
            id=movie_id, created_at=now, updated_at=now, **fields)
        stmt = stmt.on_conflict_do_update(
            index_elements=[MovieRow.id],
            set_={**fields, "updated_at": now},
        )
        await self._session.execute(stmt)

    async def ensure_exists(self, movie_id: int) -> bool:
        """Insert a placeholder row if the movie was never cached.

        Returns True if a placeholder was created.
        """
        now = utcnow()
        stmt = insert(MovieRow).values(
            id=movie_id, title="", created_at=now, updated_at=now,
        ).on_conflict_do_nothing(index_elements=[MovieRow.id])
        res = await self._session.execute(stmt)
        return res.rowcount == 1

    async def get(self, movie_id: int) -> Optional[MovieRow]:
        res = await self._session.execute(
            select(MovieRow)
            .where(MovieRow.id == movie_id)
            .execution_options(populate_existing=True)
        )
        return res.scalar_one_or_none()

    async def search_by_title(self, term: str, limit: int) -> List[MovieRow]:
        res = await self._session.execute(
            select(MovieRow)
            .where(MovieRow.title.contains(term, autoescape=True))
            .order_by(MovieRow.vote_average.desc(),
                      MovieRow.vote_count.desc())
            .limit(limit)
        )
        return list(res.scalars())

    async def recent(self, limit: int) -> List[MovieRow]:
        res = await self._session.execute(
            select(MovieRow)
            .where(MovieRow.release_date.is_not(None))
            .order_by(MovieRow.release_date.desc(),
                      MovieRow.created_at.desc())
            .limit(limit)
        )
        return list(res.scalars())

    async def get_all(self) -> List[MovieRow]:
        res = await self._session.execute(
            select(MovieRow).order_by(MovieRow.created_at.desc())
        )
        return list(res.scalars())

    async def count(self) -> int:
        res = await self._session.execute(select(func.count(MovieRow.id)))
        return int(res.scalar_one())
