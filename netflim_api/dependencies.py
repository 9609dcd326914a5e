from typing import AsyncIterator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from netflim_api.core.config import settings
from netflim_api.core.errors import ValidationFailed
from netflim_api.core.middleware import client_ip
from netflim_api.db.store import Database
from netflim_api.services.likes_service import LikesService
from netflim_api.services.movies_service import MoviesService
from netflim_api.services.sessions_service import SessionService
from netflim_api.services.stats_service import StatsService

MAX_TOKEN_LENGTH = 255


def session_token(request: Request) -> str:
    """Session header, falling back to the caller's IP."""
    token = request.headers.get(settings.session_header)
    if token is None:
        return client_ip(request)
    token = token.strip()
    if not token or len(token) > MAX_TOKEN_LENGTH:
        raise ValidationFailed.for_field(
            settings.session_header,
            f"session id must be 1-{MAX_TOKEN_LENGTH} characters")
    return token


def get_db(request: Request) -> Database:
    # the store is created in the lifespan, see main.py
    return request.app.state.db


async def get_session(
        db: Database = Depends(get_db)) -> AsyncIterator[AsyncSession]:
    async with db.session() as session:
        yield session


async def get_session_service(
        session: AsyncSession = Depends(get_session)) -> SessionService:
    return SessionService(session)


async def get_stats_service(
        session: AsyncSession = Depends(get_session)) -> StatsService:
    return StatsService(session)


async def get_movies_service(
        session: AsyncSession = Depends(get_session)) -> MoviesService:
    return MoviesService(session)


async def get_likes_service(
        session: AsyncSession = Depends(get_session),
        stats: StatsService = Depends(get_stats_service),
) -> LikesService:
    return LikesService(session, stats)


async def current_user_id(
        token: str = Depends(session_token),
        sessions: SessionService = Depends(get_session_service),
) -> Optional[str]:
    """User id for the token, None for a visitor never seen before."""
    user = await sessions.resolve_user(token)
    return user.id if user else None


async def current_or_new_user_id(
        token: str = Depends(session_token),
        sessions: SessionService = Depends(get_session_service),
) -> str:
    user = await sessions.resolve_or_create_user(token)
    return user.id
