"""Service layer for user likes/dislikes on movies."""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from netflim_api.db.tables import LikeRow
from netflim_api.models.likes import LikeOut, LikeStatus, UserLikeItem
from netflim_api.models.movies import MovieData
from netflim_api.models.reactions import Reaction
from netflim_api.models.users import RatedMovie
from netflim_api.services.repositories.likes_repo import LikesRepo
from netflim_api.services.repositories.movies_repo import MoviesRepo
from netflim_api.services.stats_service import StatsService

logger = logging.getLogger(__name__)


def like_out(row: LikeRow) -> LikeOut:
    return LikeOut(
        id=row.id,
        user_id=row.user_id,
        movie_id=row.movie_id,
        is_liked=row.is_liked,
        reaction=Reaction.from_storage(row.is_liked),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class LikesService:
    """Persist a user's reaction to a movie: an edge with is_liked, or none.

    The service stores whatever boolean it is given; computing the next
    step of the neutral -> liked -> disliked cycle is the caller's job,
    except in `advance_reaction`, which reads the stored state itself.
    """

    def __init__(
            self,
            session: AsyncSession,
            stats: StatsService) -> None:
        """Initialize service with a session and the stats dependency."""
        self.session = session
        self.repo = LikesRepo(session)
        self.movies = MoviesRepo(session)
        self.stats = stats

    async def get_reaction(
            self,
            user_id: str,
            movie_id: int) -> Optional[LikeRow]:
        """Stored edge, None means neutral."""
        return await self.repo.get(user_id, movie_id)

    async def status(
            self,
            user_id: Optional[str],
            movie_id: int) -> LikeStatus:
        """Reaction of a (possibly unknown) user plus fresh movie stats."""
        row = None
        if user_id is not None:
            row = await self.repo.get(user_id, movie_id)
        reaction = Reaction.from_storage(row.is_liked if row else None)
        return LikeStatus(
            is_liked=reaction.is_liked,
            reaction=reaction,
            movie_stats=await self.stats.movie_stats(movie_id),
        )

    async def _cache_movie(
            self,
            movie_id: int,
            movie: Optional[MovieData]) -> None:
        if movie is not None:
            await self.movies.upsert(movie_id, movie)
        else:
            await self.movies.ensure_exists(movie_id)

    async def record_reaction(
        self,
        user_id: str,
        movie_id: int,
        is_liked: bool,
        movie: Optional[MovieData] = None,
    ) -> LikeRow:
        """Cache the movie, then upsert the edge in one transaction."""
        try:
            await self._cache_movie(movie_id, movie)
            row = await self.repo.upsert(user_id, movie_id, is_liked)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.exception("reaction_record_failed",
                             extra={"movie_id": movie_id})
            raise
        logger.info("reaction_recorded",
                    extra={"movie_id": movie_id, "is_liked": is_liked})
        return row

    async def clear_reaction(self, user_id: str, movie_id: int) -> bool:
        """Delete the edge; False when there was nothing to delete."""
        try:
            deleted = await self.repo.delete(user_id, movie_id)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.exception("reaction_clear_failed",
                             extra={"movie_id": movie_id})
            raise
        if deleted:
            logger.info("reaction_cleared", extra={"movie_id": movie_id})
        return deleted

    async def advance_reaction(
        self,
        user_id: str,
        movie_id: int,
        movie: Optional[MovieData] = None,
    ) -> Reaction:
        """Apply one cycle step to the stored state, atomically."""
        try:
            row = await self.repo.get(user_id, movie_id)
            current = Reaction.from_storage(row.is_liked if row else None)
            target = current.next()
            if target is Reaction.neutral:
                await self.repo.delete(user_id, movie_id)
            else:
                await self._cache_movie(movie_id, movie)
                await self.repo.upsert(user_id, movie_id, target.is_liked)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.exception("reaction_advance_failed",
                             extra={"movie_id": movie_id})
            raise
        logger.info("reaction_advanced",
                    extra={"movie_id": movie_id, "from": current.value,
                           "to": target.value})
        return target

    # ----- LISTS -----

    async def list_reactions(
            self,
            user_id: str,
            limit: int = 20,
            offset: int = 0) -> List[UserLikeItem]:
        """All edges of a user, most recently changed first."""
        rows = await self.repo.list_by_user(user_id, limit, offset)
        return [
            UserLikeItem(
                id=like.id,
                movie_id=like.movie_id,
                is_liked=like.is_liked,
                reaction=Reaction.from_storage(like.is_liked),
                title=title,
                poster_path=poster_path,
                release_date=release_date,
                vote_average=vote_average,
                created_at=like.created_at,
                updated_at=like.updated_at,
            )
            for like, title, poster_path, release_date, vote_average in rows
        ]

    async def list_movies(
            self,
            user_id: str,
            is_liked: bool,
            limit: int = 20,
            offset: int = 0) -> List[RatedMovie]:
        """Liked (or disliked) movies of a user, newest reaction first."""
        rows = await self.repo.list_movies(user_id, is_liked, limit, offset)
        return [
            RatedMovie.model_validate({**movie.as_dict(),
                                       "reacted_at": reacted_at})
            for movie, reacted_at in rows
        ]
