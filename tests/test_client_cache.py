"""Optimistic reaction cache against the real app and against stub servers."""

import asyncio
import json

import httpx
import pytest

from netflim_api.client.api import LikeApiClient, generate_session_id
from netflim_api.client.cache import (
    BUSY_ERROR,
    LOAD_ERROR,
    LOCAL_ONLY_WARNING,
    SAVE_ERROR,
    ReactionCache,
    empty_stats,
)
from netflim_api.models.reactions import Reaction
from tests.helpers import movie_data

STATS = {"totalInteractions": 1, "likes": 1, "dislikes": 0}


def status_body(is_liked=None, stats=None) -> dict:
    return {"success": True,
            "data": {"isLiked": is_liked, "movieStats": stats or STATS}}


def stub_api(handler) -> LikeApiClient:
    return LikeApiClient(base_url="http://stub/api", session_id="s1",
                         transport=httpx.MockTransport(handler))


@pytest.fixture
async def api(app, client):
    # `client` runs the lifespan, this one talks to the same app
    async with LikeApiClient(base_url="http://test/api",
                             transport=httpx.ASGITransport(app=app)) as c:
        yield c


async def test_toggle_walks_cycle_against_server(api):
    cache = ReactionCache(api)
    data = movie_data(42, title="Heat")

    first = await cache.toggle(42, data)
    assert first.success and first.reaction is Reaction.liked
    assert first.movie_stats == STATS

    second = await cache.toggle(42, data)
    assert second.reaction is Reaction.disliked
    assert second.movie_stats == {
        "totalInteractions": 1, "likes": 0, "dislikes": 1}

    third = await cache.toggle(42, data)
    assert third.reaction is Reaction.neutral
    assert third.movie_stats == empty_stats()

    server = await api.get_like_status(42)
    assert server["data"]["isLiked"] is None


async def test_load_status_reads_server_truth(api):
    await api.like_movie(7, False)

    cache = ReactionCache(api)
    entry = await cache.load_status(7)

    assert entry.reaction is Reaction.disliked
    assert entry.is_liked is False
    assert cache.get(7) == entry
    assert not cache.is_loading(7)


async def test_client_sends_session_header(api):
    await api.like_movie(3)

    info = await api.get_user_info()
    assert info["data"]["user"]["sessionId"] == api.session_id
    assert (await api.get_user_stats())["data"]["likedMovies"] == 1


async def test_generate_new_session_switches_identity(api):
    await api.like_movie(3)
    old = api.session_id

    new = await api.generate_new_session()

    assert new != old
    assert api.session_id == new
    assert (await api.get_like_status(3))["data"]["isLiked"] is None


async def test_advance_endpoint_through_client(api):
    body = await api.advance(5, movie_data(5))
    assert body["data"]["reaction"] == "liked"
    liked = await api.get_liked_movies()
    assert [m["id"] for m in liked["data"]["movies"]] == [5]


async def test_network_error_keeps_optimistic_state():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with stub_api(handler) as api:
        cache = ReactionCache(api)
        result = await cache.toggle(1)

    assert result.success is False
    assert result.local_only is True
    assert result.error == LOCAL_ONLY_WARNING
    assert result.reaction is Reaction.liked
    assert cache.get(1).reaction is Reaction.liked
    assert cache.local_only is True


async def test_server_error_rolls_back():
    def handler(request):
        if request.method == "GET":
            return httpx.Response(200, json=status_body(None))
        return httpx.Response(500, json={"success": False,
                                         "error": "internal_error"})

    async with stub_api(handler) as api:
        cache = ReactionCache(api)
        await cache.load_status(1)
        result = await cache.toggle(1)

    assert result.success is False
    assert result.error == SAVE_ERROR
    assert result.reaction is Reaction.neutral
    assert cache.get(1).reaction is Reaction.neutral
    assert cache.error == SAVE_ERROR
    assert cache.local_only is False


async def test_validation_error_rolls_back_to_previous_state():
    def handler(request):
        if request.method == "GET":
            return httpx.Response(200, json=status_body(True))
        return httpx.Response(400, json={"success": False,
                                         "error": "validation_error"})

    async with stub_api(handler) as api:
        cache = ReactionCache(api)
        await cache.load_status(9)
        result = await cache.toggle(9)

    assert result.reaction is Reaction.liked
    assert cache.get(9).reaction is Reaction.liked
    assert cache.get(9).movie_stats == STATS


async def test_second_toggle_while_pending_is_rejected():
    entered = asyncio.Event()
    release = asyncio.Event()
    posted = []

    async def handler(request):
        if request.method == "POST":
            posted.append(json.loads(request.content))
            entered.set()
            await release.wait()
            return httpx.Response(201, json={"success": True, "data": {}})
        return httpx.Response(200, json=status_body(True))

    async with stub_api(handler) as api:
        cache = ReactionCache(api)
        pending = asyncio.create_task(cache.toggle(4))
        await entered.wait()

        assert cache.is_loading(4)
        busy = await cache.toggle(4)
        assert busy.success is False
        assert busy.error == BUSY_ERROR

        release.set()
        done = await pending

    assert done.success is True
    assert done.reaction is Reaction.liked
    assert posted == [{"movieId": 4, "isLiked": True}]


async def test_load_status_failure_keeps_entry():
    def handler(request):
        return httpx.Response(503, json={"success": False})

    async with stub_api(handler) as api:
        cache = ReactionCache(api)
        entry = await cache.load_status(2)

    assert entry.reaction is Reaction.neutral
    assert cache.error == LOAD_ERROR
    cache.clear_error()
    assert cache.error is None


async def test_load_status_without_backend_goes_local():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with stub_api(handler) as api:
        cache = ReactionCache(api)
        entry = await cache.load_status(2)

    assert entry.reaction is Reaction.neutral
    assert cache.local_only is True
    assert cache.error is None


def test_generated_session_ids_are_distinct():
    a, b = generate_session_id(), generate_session_id()
    assert a.startswith("session_")
    assert a != b
