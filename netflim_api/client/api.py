"""Async HTTP client for the likes service."""

from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001/api"


def generate_session_id() -> str:
    return f"session_{secrets.token_hex(5)}_{int(time.time() * 1000)}"


class LikeApiClient:
    """Wraps every likes/users endpoint; sends the session token on each call.

    Non-2xx answers raise `httpx.HTTPStatusError`, an unreachable server
    raises an `httpx.NetworkError`.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session_id: Optional[str] = None,
        timeout: float = 5.0,
        session_header: str = "X-Session-Id",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.session_id = session_id or generate_session_id()
        self.session_header = session_header
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "LikeApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        headers = {self.session_header: self.session_id}
        try:
            resp = await self._client.request(method, url, headers=headers,
                                              **kwargs)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("like_api_request_failed",
                           extra={"method": method, "url": url,
                                  "err": str(exc)})
            raise
        return resp.json()

    # ----- likes -----

    async def like_movie(
            self,
            movie_id: int,
            is_liked: bool = True,
            movie_data: Optional[dict[str, Any]] = None) -> dict:
        payload: dict[str, Any] = {"movieId": int(movie_id),
                                   "isLiked": is_liked}
        if movie_data:
            payload["movieData"] = movie_data
        return await self._request("POST", "likes", json=payload)

    async def unlike_movie(self, movie_id: int) -> dict:
        return await self._request("DELETE", f"likes/{movie_id}")

    async def get_like_status(self, movie_id: int) -> dict:
        return await self._request("GET", f"likes/{movie_id}/status")

    async def advance(
            self,
            movie_id: int,
            movie_data: Optional[dict[str, Any]] = None) -> dict:
        body = {"movieData": movie_data} if movie_data else None
        return await self._request("POST", f"likes/{movie_id}/advance",
                                   json=body)

    async def get_disliked_movies(self, limit: int = 20,
                                  offset: int = 0) -> dict:
        return await self._request(
            "GET", "likes/user/disliked-movies",
            params={"limit": limit, "offset": offset})

    async def get_global_stats(self) -> dict:
        return await self._request("GET", "likes/stats/global")

    async def get_most_liked_movies(self, limit: int = 20) -> dict:
        return await self._request("GET", "likes/movies/most-liked",
                                   params={"limit": limit})

    # ----- users -----

    async def get_liked_movies(self, limit: int = 20,
                               offset: int = 0) -> dict:
        return await self._request(
            "GET", "users/me/liked-movies",
            params={"limit": limit, "offset": offset})

    async def get_user_stats(self) -> dict:
        return await self._request("GET", "users/me/stats")

    async def get_user_info(self) -> dict:
        return await self._request("GET", "users/me")

    async def generate_new_session(self) -> str:
        """Ask the server for a fresh token and use it from now on."""
        body = await self._request("POST", "users/new-session")
        self.session_id = body["data"]["sessionId"]
        return self.session_id
