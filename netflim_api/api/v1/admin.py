from http import HTTPStatus
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from netflim_api.api.http_utils import ok
from netflim_api.core.config import settings
from netflim_api.dependencies import (
    get_movies_service,
    get_session,
    get_stats_service,
)
from netflim_api.models.common import CamelModel, Envelope
from netflim_api.models.movies import MovieOut
from netflim_api.models.stats import DetailedStats
from netflim_api.models.users import UserOut
from netflim_api.services.movies_service import MoviesService
from netflim_api.services.repositories.likes_repo import LikesRepo
from netflim_api.services.repositories.users_repo import UsersRepo
from netflim_api.services.stats_service import StatsService

router = APIRouter(prefix="/api/admin", tags=["admin"])


class AdminLike(CamelModel):
    id: str
    user_id: str
    movie_id: int
    is_liked: bool
    movie_title: str | None = None
    session_id: str | None = None


@router.get("/users", response_model=Envelope[List[UserOut]],
            status_code=HTTPStatus.OK)
async def list_users(session: AsyncSession = Depends(get_session)):
    users = await UsersRepo(session).get_all()
    return ok([UserOut.model_validate(u) for u in users])


@router.get("/movies", response_model=Envelope[List[MovieOut]],
            status_code=HTTPStatus.OK)
async def list_movies(svc: MoviesService = Depends(get_movies_service)):
    return ok(await svc.all())


@router.get("/likes", response_model=Envelope[List[AdminLike]],
            status_code=HTTPStatus.OK)
async def list_likes(session: AsyncSession = Depends(get_session)):
    rows = await LikesRepo(session).get_all()
    return ok([
        AdminLike(id=like.id, user_id=like.user_id, movie_id=like.movie_id,
                  is_liked=like.is_liked, movie_title=title,
                  session_id=session_id)
        for like, title, session_id in rows
    ])


@router.get("/stats", response_model=Envelope[DetailedStats],
            status_code=HTTPStatus.OK)
async def detailed_stats(stats: StatsService = Depends(get_stats_service)):
    return ok(await stats.detailed_stats())


def include_admin_routes(app, enabled: bool | None = None):
    # mounted only when explicitly enabled
    if settings.admin_routes_enabled if enabled is None else enabled:
        app.include_router(router)
