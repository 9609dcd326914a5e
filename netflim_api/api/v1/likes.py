from http import HTTPStatus
from typing import Optional

from fastapi import APIRouter, Body, Depends

from netflim_api.api.http_utils import not_found_if_none, ok
from netflim_api.core.errors import NotFoundError
from netflim_api.dependencies import (
    current_or_new_user_id,
    current_user_id,
    get_likes_service,
    get_stats_service,
)
from netflim_api.models.common import (
    Envelope,
    MovieIdPath,
    PageParams,
    Pagination,
    limit_param,
    page_params,
)
from netflim_api.models.likes import (
    AdvanceRequest,
    LikeCreated,
    LikeCreateRequest,
    LikeDeleted,
    LikeOut,
    LikeStatus,
    RatedMoviesPage,
    UserLikesPage,
)
from netflim_api.models.movies import MostLikedPage, TopPagination
from netflim_api.models.stats import GlobalStats
from netflim_api.services.likes_service import LikesService, like_out
from netflim_api.services.stats_service import StatsService

router = APIRouter(prefix="/api/likes", tags=["likes"])


@router.get("/user/likes",
            response_model=Envelope[UserLikesPage],
            status_code=HTTPStatus.OK)
async def list_user_likes(
    page: PageParams = Depends(page_params),
    user_id: Optional[str] = Depends(current_user_id),
    svc: LikesService = Depends(get_likes_service),
):
    stats = await svc.stats.user_stats(user_id)
    likes = [] if user_id is None else await svc.list_reactions(
        user_id, page.limit, page.offset)
    return ok(UserLikesPage(
        likes=likes,
        stats=stats,
        pagination=Pagination(limit=page.limit, offset=page.offset,
                              total=stats.total_reactions),
    ))


async def _rated_movies(svc: LikesService, user_id: Optional[str],
                        is_liked: bool, page: PageParams) -> RatedMoviesPage:
    stats = await svc.stats.user_stats(user_id)
    movies = [] if user_id is None else await svc.list_movies(
        user_id, is_liked, page.limit, page.offset)
    total = stats.liked_movies if is_liked else stats.disliked_movies
    return RatedMoviesPage(
        movies=movies,
        stats=stats,
        pagination=Pagination(limit=page.limit, offset=page.offset,
                              total=total),
    )


@router.get("/user/liked-movies",
            response_model=Envelope[RatedMoviesPage],
            status_code=HTTPStatus.OK)
async def list_user_liked_movies(
    page: PageParams = Depends(page_params),
    user_id: Optional[str] = Depends(current_user_id),
    svc: LikesService = Depends(get_likes_service),
):
    return ok(await _rated_movies(svc, user_id, True, page))


@router.get("/user/disliked-movies",
            response_model=Envelope[RatedMoviesPage],
            status_code=HTTPStatus.OK)
async def list_user_disliked_movies(
    page: PageParams = Depends(page_params),
    user_id: Optional[str] = Depends(current_user_id),
    svc: LikesService = Depends(get_likes_service),
):
    return ok(await _rated_movies(svc, user_id, False, page))


@router.get("/stats/global",
            response_model=Envelope[GlobalStats],
            status_code=HTTPStatus.OK)
async def get_global_stats(
    stats: StatsService = Depends(get_stats_service),
):
    return ok(await stats.global_stats())


@router.get("/movies/most-liked",
            response_model=Envelope[MostLikedPage],
            status_code=HTTPStatus.OK)
async def get_most_liked(
    limit: int = Depends(limit_param),
    stats: StatsService = Depends(get_stats_service),
):
    movies = await stats.most_liked(limit)
    return ok(MostLikedPage(
        movies=movies,
        pagination=TopPagination(limit=limit, total=len(movies)),
    ))


@router.post("",
             response_model=Envelope[LikeCreated],
             status_code=HTTPStatus.CREATED)
async def create_like(
    body: LikeCreateRequest,
    user_id: str = Depends(current_or_new_user_id),
    svc: LikesService = Depends(get_likes_service),
):
    row = await svc.record_reaction(user_id, body.movie_id, body.is_liked,
                                    body.movie_data)
    movie_stats = await svc.stats.movie_stats(body.movie_id)
    message = ("Movie added to liked" if body.is_liked
               else "Movie added to disliked")
    return ok(LikeCreated(like=like_out(row), movie_stats=movie_stats),
              message)


@router.get("/{movie_id}/status",
            response_model=Envelope[LikeStatus],
            status_code=HTTPStatus.OK)
async def get_like_status(
    movie_id: MovieIdPath,
    user_id: Optional[str] = Depends(current_user_id),
    svc: LikesService = Depends(get_likes_service),
):
    return ok(await svc.status(user_id, movie_id))


@router.post("/{movie_id}/advance",
             response_model=Envelope[LikeStatus],
             status_code=HTTPStatus.OK)
async def advance_like(
    movie_id: MovieIdPath,
    body: Optional[AdvanceRequest] = Body(default=None),
    user_id: str = Depends(current_or_new_user_id),
    svc: LikesService = Depends(get_likes_service),
):
    movie = body.movie_data if body else None
    reaction = await svc.advance_reaction(user_id, movie_id, movie)
    return ok(LikeStatus(
        is_liked=reaction.is_liked,
        reaction=reaction,
        movie_stats=await svc.stats.movie_stats(movie_id),
    ))


@router.get("/{movie_id:int}",
            response_model=Envelope[LikeOut],
            status_code=HTTPStatus.OK)
async def get_like(
    movie_id: MovieIdPath,
    user_id: Optional[str] = Depends(current_user_id),
    svc: LikesService = Depends(get_likes_service),
):
    user_id = not_found_if_none(user_id, "user not found")
    row = not_found_if_none(await svc.get_reaction(user_id, movie_id),
                            "like not found")
    return ok(like_out(row))


@router.delete("/{movie_id:int}",
               response_model=Envelope[LikeDeleted],
               status_code=HTTPStatus.OK)
async def delete_like(
    movie_id: MovieIdPath,
    user_id: Optional[str] = Depends(current_user_id),
    svc: LikesService = Depends(get_likes_service),
):
    if user_id is None:
        raise NotFoundError("user not found")
    if not await svc.clear_reaction(user_id, movie_id):
        raise NotFoundError("like not found")
    return ok(LikeDeleted(deleted=True,
                          movie_stats=await svc.stats.movie_stats(movie_id)),
              "Like removed")
