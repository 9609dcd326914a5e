"""Read access to the local movie cache."""

from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from netflim_api.core.errors import NotFoundError
from netflim_api.models.movies import MovieOut
from netflim_api.services.repositories.movies_repo import MoviesRepo


class MoviesService:
    def __init__(self, session: AsyncSession) -> None:
        self.repo = MoviesRepo(session)

    async def get(self, movie_id: int) -> MovieOut:
        row = await self.repo.get(movie_id)
        if row is None:
            raise NotFoundError(f"movie {movie_id} is not cached")
        return MovieOut.model_validate(row)

    async def search(self, term: str, limit: int = 50) -> List[MovieOut]:
        rows = await self.repo.search_by_title(term, limit)
        return [MovieOut.model_validate(r) for r in rows]

    async def recent(self, limit: int = 20) -> List[MovieOut]:
        rows = await self.repo.recent(limit)
        return [MovieOut.model_validate(r) for r in rows]

    async def all(self) -> List[MovieOut]:
        return [MovieOut.model_validate(r) for r in await self.repo.get_all()]
