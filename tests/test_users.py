import uuid

from tests.helpers import movie_data, new_session, put_reaction, sid_header


async def test_me_creates_user_on_first_call(client):
    sid = new_session()

    r1 = await client.get("/api/users/me", headers=sid_header(sid))
    r2 = await client.get("/api/users/me", headers=sid_header(sid))

    assert r1.status_code == 200
    user = r1.json()["data"]["user"]
    assert user["sessionId"] == sid
    assert r2.json()["data"]["user"]["id"] == user["id"]
    assert r1.json()["data"]["stats"] == {
        "totalReactions": 0, "likedMovies": 0, "dislikedMovies": 0}


async def test_my_stats_for_unknown_session_are_zero(client):
    r = await client.get("/api/users/me/stats",
                         headers=sid_header(new_session()))
    assert r.status_code == 200
    assert r.json()["data"] == {
        "totalReactions": 0, "likedMovies": 0, "dislikedMovies": 0}


async def test_my_stats_count_reactions(client):
    sid = new_session()
    await put_reaction(client, 1, sid, True)
    await put_reaction(client, 2, sid, False)

    r = await client.get("/api/users/me/stats", headers=sid_header(sid))
    assert r.json()["data"] == {
        "totalReactions": 2, "likedMovies": 1, "dislikedMovies": 1}


async def test_my_liked_movies_with_genres(client):
    sid, other = new_session(), new_session()
    await put_reaction(client, 1, sid, True, movie_data(
        1, title="A", genres=[{"id": 28, "name": "Action"},
                              {"id": 18, "name": "Drama"}]))
    await put_reaction(client, 2, sid, True, movie_data(
        2, title="B", genres=[{"id": 28, "name": "Action"}]))
    await put_reaction(client, 3, sid, False, movie_data(
        3, title="C", genres=[{"id": 35, "name": "Comedy"}]))
    await put_reaction(client, 4, other, True, movie_data(
        4, title="D", genres=[{"id": 18, "name": "Drama"}]))

    r = await client.get("/api/users/me/liked-movies",
                         headers=sid_header(sid))
    assert r.status_code == 200
    data = r.json()["data"]
    assert {m["title"] for m in data["movies"]} == {"A", "B"}
    assert all("reactedAt" in m for m in data["movies"])
    assert data["genres"] == [
        {"name": "Action", "count": 2},
        {"name": "Drama", "count": 1},
    ]
    # every user's likes feed the common genres
    assert data["commonGenres"] == [
        {"name": "Action", "count": 2},
        {"name": "Drama", "count": 2},
    ]
    assert data["pagination"]["total"] == 2


async def test_my_liked_movies_for_unknown_session(client):
    r = await client.get("/api/users/me/liked-movies",
                         headers=sid_header(new_session()))
    data = r.json()["data"]
    assert data["movies"] == []
    assert data["genres"] == [] and data["commonGenres"] == []


async def test_new_session_returns_uuid(client):
    r = await client.post("/api/users/new-session")
    assert r.status_code == 200
    token = r.json()["data"]["sessionId"]
    assert str(uuid.UUID(token)) == token


async def test_overlong_session_header_is_rejected(client):
    r = await client.get("/api/users/me", headers=sid_header("x" * 256))
    assert r.status_code == 400
    assert r.json()["details"][0]["field"] == "X-Session-Id"
