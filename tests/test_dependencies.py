import pytest
from starlette.requests import Request

from netflim_api.core.errors import ValidationFailed
from netflim_api.db.store import Database
from netflim_api.dependencies import get_db, session_token
from tests.helpers import new_session, sid_header


def make_request(headers=None, client=("10.0.0.7", 5000), app=None):
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode())
                    for k, v in (headers or {}).items()],
        "client": client,
    }
    if app is not None:
        scope["app"] = app
    return Request(scope)


def test_session_token_from_header():
    assert session_token(make_request({"X-Session-Id": " abc "})) == "abc"


def test_session_token_falls_back_to_ip():
    assert session_token(make_request()) == "10.0.0.7"
    assert session_token(make_request(client=None)) == "unknown"


@pytest.mark.parametrize("value", ["", "   ", "x" * 256])
def test_session_token_rejects_bad_header(value):
    with pytest.raises(ValidationFailed) as e:
        session_token(make_request({"X-Session-Id": value}))
    assert e.value.details[0]["field"] == "X-Session-Id"


async def test_get_db_returns_lifespan_store(app, client):
    db = get_db(make_request(app=app))
    assert isinstance(db, Database)
    assert db is app.state.db
    assert db.url.endswith("netflim.db")


async def test_empty_session_header_is_400_on_endpoint(client):
    r = await client.get("/api/likes/1/status", headers=sid_header(" "))
    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"


async def test_status_read_with_valid_header(client):
    r = await client.get("/api/likes/1/status",
                         headers=sid_header(new_session()))
    assert r.status_code == 200
