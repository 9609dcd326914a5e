import uuid

from netflim_api.core.config import settings
from netflim_api.core.middleware import FixedWindowLimiter
from netflim_api.main import create_app
from tests.helpers import new_session, serve, sid_header


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_limiter_blocks_after_max_and_resets_with_window():
    clock = FakeClock()
    limiter = FixedWindowLimiter(2, window_ms=1000, clock=clock)

    assert limiter.hit("a") == (True, 1, 1.0)
    assert limiter.hit("a")[:2] == (True, 0)
    allowed, remaining, _ = limiter.hit("a")
    assert (allowed, remaining) == (False, 0)
    # other keys have their own window
    assert limiter.hit("b")[0] is True

    clock.now = 1.0
    assert limiter.hit("a")[:2] == (True, 1)


def test_limiter_reset_forgets_hits():
    limiter = FixedWindowLimiter(1, window_ms=60_000, clock=FakeClock())
    limiter.hit("a")
    assert limiter.hit("a")[0] is False
    limiter.reset()
    assert limiter.hit("a")[0] is True


async def test_rate_limit_returns_429(monkeypatch):
    monkeypatch.setattr(settings, "rate_limit_max_requests", 2)
    app = create_app()
    headers = sid_header(new_session())

    async with serve(app) as client:
        for _ in range(2):
            r = await client.get("/api/likes/1/status", headers=headers)
            assert r.status_code == 200
        r = await client.get("/api/likes/1/status", headers=headers)
        assert r.status_code == 429
        assert r.json()["error"] == "rate_limited"
        assert int(r.headers["Retry-After"]) >= 1

        # health stays reachable
        assert (await client.get("/health")).status_code == 200


async def test_rate_limit_headers_on_success(client):
    r = await client.get("/api/likes/stats/global")
    assert r.headers["X-RateLimit-Limit"] == str(
        settings.rate_limit_max_requests)
    assert "X-RateLimit-Remaining" in r.headers


async def test_every_response_carries_trace_id(client):
    ok = await client.get("/health")
    missing = await client.get("/api/nope")

    for r in (ok, missing):
        uuid.UUID(r.headers["X-Trace-Id"])


async def test_cors_allows_configured_origin(client):
    origin = settings.cors_origins[0]
    r = await client.options(
        "/api/likes",
        headers={"Origin": origin,
                 "Access-Control-Request-Method": "POST",
                 "Access-Control-Request-Headers": "X-Session-Id"})
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == origin


def test_limiter_forgets_expired_windows():
    clock = FakeClock()
    limiter = FixedWindowLimiter(5, window_ms=1000, clock=clock)
    for i in range(1000):
        limiter.hit(f"10.0.{i // 256}.{i % 256}")
    assert len(limiter) == 1000

    clock.now = 3600.0
    limiter.hit("10.9.9.9")
    assert len(limiter) == 1


def test_limiter_keeps_live_windows_on_sweep():
    clock = FakeClock()
    limiter = FixedWindowLimiter(1, window_ms=1000, clock=clock)
    limiter.hit("old")
    clock.now = 0.5
    limiter.hit("young")

    clock.now = 1.2
    assert limiter.hit("young")[0] is False
    assert len(limiter) == 1
