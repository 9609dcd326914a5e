"""Client-side mirror of reactions with optimistic toggling.

The cache is never authoritative: `load_status` always re-reads the
server, and a toggle only keeps its optimistic value when the server
accepted it (or when the server cannot be reached at all).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Optional

import httpx

from netflim_api.client.api import LikeApiClient
from netflim_api.models.reactions import Reaction

logger = logging.getLogger(__name__)

LOCAL_ONLY_WARNING = "Backend unreachable. Likes will not be saved."
SAVE_ERROR = "Could not save the like. Check that the backend is running."
LOAD_ERROR = "Could not load the like status."
BUSY_ERROR = "toggle_in_progress"


def empty_stats() -> dict[str, int]:
    return {"totalInteractions": 0, "likes": 0, "dislikes": 0}


@dataclass(frozen=True)
class CachedReaction:
    reaction: Reaction = Reaction.neutral
    movie_stats: dict[str, int] = field(default_factory=empty_stats)

    @property
    def is_liked(self) -> Optional[bool]:
        return self.reaction.is_liked


@dataclass(frozen=True)
class ToggleResult:
    success: bool
    reaction: Reaction
    movie_stats: dict[str, int]
    error: Optional[str] = None
    local_only: bool = False


class ReactionCache:
    """Per-movie reaction state, loading flags and the last error."""

    def __init__(self, api: LikeApiClient) -> None:
        self.api = api
        self.entries: dict[int, CachedReaction] = {}
        self.error: Optional[str] = None
        self.local_only = False
        self._loading: set[int] = set()

    def get(self, movie_id: int) -> CachedReaction:
        return self.entries.get(movie_id, CachedReaction())

    def is_loading(self, movie_id: int) -> bool:
        return movie_id in self._loading

    def clear_error(self) -> None:
        self.error = None

    async def load_status(self, movie_id: int) -> CachedReaction:
        """Replace the cached entry with the server's view."""
        self._loading.add(movie_id)
        self.error = None
        try:
            body = await self.api.get_like_status(movie_id)
            data = body["data"]
            entry = CachedReaction(
                reaction=Reaction.from_storage(data["isLiked"]),
                movie_stats=data["movieStats"],
            )
        except httpx.NetworkError:
            logger.warning("backend_unreachable",
                           extra={"movie_id": movie_id})
            self.local_only = True
            entry = CachedReaction()
        except (httpx.HTTPError, KeyError, ValueError):
            self.error = LOAD_ERROR
            return self.get(movie_id)
        finally:
            self._loading.discard(movie_id)
        self.entries[movie_id] = entry
        return entry

    async def toggle(
            self,
            movie_id: int,
            movie_data: Optional[dict[str, Any]] = None) -> ToggleResult:
        """Advance one step of the cycle locally, then persist it."""
        previous = self.get(movie_id)
        if self.is_loading(movie_id):
            return ToggleResult(False, previous.reaction,
                                previous.movie_stats, error=BUSY_ERROR)

        target = previous.reaction.next()
        self._loading.add(movie_id)
        self.error = None
        self.entries[movie_id] = replace(previous, reaction=target)
        try:
            if target is Reaction.neutral:
                await self.api.unlike_movie(movie_id)
            else:
                await self.api.like_movie(movie_id, target.is_liked,
                                          movie_data)
            body = await self.api.get_like_status(movie_id)
            stats = body["data"]["movieStats"]
        except httpx.NetworkError:
            # no server at all: keep the optimistic value, nothing persisted
            logger.warning("backend_unreachable",
                           extra={"movie_id": movie_id})
            self.local_only = True
            self.entries[movie_id] = CachedReaction(target, empty_stats())
            return ToggleResult(False, target, empty_stats(),
                                error=LOCAL_ONLY_WARNING, local_only=True)
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            logger.warning("toggle_rolled_back",
                           extra={"movie_id": movie_id, "err": str(exc)})
            self.entries[movie_id] = previous
            self.error = SAVE_ERROR
            return ToggleResult(False, previous.reaction,
                                previous.movie_stats, error=SAVE_ERROR)
        finally:
            self._loading.discard(movie_id)

        self.local_only = False
        self.entries[movie_id] = CachedReaction(target, stats)
        return ToggleResult(True, target, stats)
