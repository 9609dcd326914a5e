from http import HTTPStatus
from fastapi import APIRouter, Depends, Query

from netflim_api.api.http_utils import ok
from netflim_api.dependencies import get_movies_service
from netflim_api.models.common import Envelope, MovieIdPath
from netflim_api.models.movies import MovieList, MovieOut
from netflim_api.services.movies_service import MoviesService

router = APIRouter(prefix="/api/movies", tags=["movies"])


@router.get("/search",
            response_model=Envelope[MovieList],
            status_code=HTTPStatus.OK)
async def search_movies(
    q: str = Query(..., min_length=1, max_length=200),
    limit: int = Query(50, ge=1, le=100),
    svc: MoviesService = Depends(get_movies_service),
):
    movies = await svc.search(q, limit)
    return ok(MovieList(movies=movies, total=len(movies)))


@router.get("/recent",
            response_model=Envelope[MovieList],
            status_code=HTTPStatus.OK)
async def recent_movies(
    limit: int = Query(20, ge=1, le=100),
    svc: MoviesService = Depends(get_movies_service),
):
    movies = await svc.recent(limit)
    return ok(MovieList(movies=movies, total=len(movies)))


@router.get("/{movie_id}",
            response_model=Envelope[MovieOut],
            status_code=HTTPStatus.OK)
async def get_movie(
    movie_id: MovieIdPath,
    svc: MoviesService = Depends(get_movies_service),
):
    return ok(await svc.get(movie_id))
