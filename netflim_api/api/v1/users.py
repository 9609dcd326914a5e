from http import HTTPStatus
from typing import Optional

from fastapi import APIRouter, Depends

from netflim_api.api.http_utils import ok
from netflim_api.dependencies import (
    current_user_id,
    get_likes_service,
    get_session_service,
    session_token,
)
from netflim_api.models.common import Envelope, PageParams, Pagination, \
    page_params
from netflim_api.models.users import (
    LikedMoviesProfile,
    SessionCreated,
    UserOut,
    UserProfile,
    UserStats,
)
from netflim_api.services.likes_service import LikesService
from netflim_api.services.sessions_service import SessionService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me",
            response_model=Envelope[UserProfile],
            status_code=HTTPStatus.OK)
async def get_me(
    token: str = Depends(session_token),
    sessions: SessionService = Depends(get_session_service),
    likes: LikesService = Depends(get_likes_service),
):
    user = await sessions.resolve_or_create_user(token)
    return ok(UserProfile(
        user=UserOut.model_validate(user),
        stats=await likes.stats.user_stats(user.id),
    ))


@router.get("/me/stats",
            response_model=Envelope[UserStats],
            status_code=HTTPStatus.OK)
async def get_my_stats(
    user_id: Optional[str] = Depends(current_user_id),
    likes: LikesService = Depends(get_likes_service),
):
    return ok(await likes.stats.user_stats(user_id))


@router.get("/me/liked-movies",
            response_model=Envelope[LikedMoviesProfile],
            status_code=HTTPStatus.OK)
async def get_my_liked_movies(
    page: PageParams = Depends(page_params),
    user_id: Optional[str] = Depends(current_user_id),
    likes: LikesService = Depends(get_likes_service),
):
    stats = await likes.stats.user_stats(user_id)
    if user_id is None:
        movies, genres, common = [], [], []
    else:
        movies = await likes.list_movies(user_id, True, page.limit,
                                         page.offset)
        genres = await likes.stats.liked_genres(user_id)
        common = await likes.stats.common_genres()
    return ok(LikedMoviesProfile(
        movies=movies,
        stats=stats,
        genres=genres,
        common_genres=common,
        pagination=Pagination(limit=page.limit, offset=page.offset,
                              total=stats.liked_movies),
    ))


@router.post("/new-session",
             response_model=Envelope[SessionCreated],
             status_code=HTTPStatus.OK)
async def new_session():
    # nothing is stored until the token is used for a write
    return ok(SessionCreated(session_id=SessionService.new_session_token()),
              "New session created")
