import uuid
from contextlib import asynccontextmanager
from typing import Dict, Optional

from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient


@asynccontextmanager
async def serve(app, raise_app_exceptions: bool = True):
    async with LifespanManager(app):
        transport = ASGITransport(
            app=app, raise_app_exceptions=raise_app_exceptions)
        async with AsyncClient(transport=transport,
                               base_url="http://test") as ac:
            yield ac


def new_session() -> str:
    return f"session_{uuid.uuid4().hex[:12]}"


def sid_header(token: str) -> Dict[str, str]:
    return {"X-Session-Id": token}


def movie_data(movie_id: int, title: str = "Heat",
               genres: Optional[list] = None, **extra) -> dict:
    data = {
        "id": movie_id,
        "title": title,
        "overview": "A movie.",
        "poster_path": f"/poster{movie_id}.jpg",
        "release_date": "1995-12-15",
        "vote_average": 7.9,
        "vote_count": 6000,
        "genres": genres if genres is not None else [
            {"id": 28, "name": "Action"}],
    }
    data.update(extra)
    return data


async def read_status(client: AsyncClient, movie_id: int,
                      token: str) -> dict:
    r = await client.get(f"/api/likes/{movie_id}/status",
                         headers=sid_header(token))
    assert r.status_code == 200
    return r.json()["data"]


async def put_reaction(client: AsyncClient, movie_id: int, token: str,
                       is_liked: bool = True,
                       data: Optional[dict] = None) -> dict:
    body = {"movieId": movie_id, "isLiked": is_liked}
    if data is not None:
        body["movieData"] = data
    r = await client.post("/api/likes", json=body, headers=sid_header(token))
    assert r.status_code == 201, r.text
    return r.json()["data"]
