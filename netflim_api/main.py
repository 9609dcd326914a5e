import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from netflim_api.api.http_utils import register_error_handlers
from netflim_api.api.v1.admin import include_admin_routes
from netflim_api.api.v1.likes import router as likes_router
from netflim_api.api.v1.movies import router as movies_router
from netflim_api.api.v1.users import router as users_router
from netflim_api.core.config import settings
from netflim_api.core.logger import setup_json_logging, shutdown_logging
from netflim_api.core.middleware import (
    RateLimitMiddleware,
    RequestContextMiddleware,
)
from netflim_api.core.sentry import init_sentry
from netflim_api.db.store import Database


@asynccontextmanager
async def lifespan(app: FastAPI):
    # logging first, everything below may log
    setup_json_logging(service=settings.app_name)
    init_sentry(settings.sentry_dsn, environment=settings.env)

    db = Database(settings.db_path)
    await db.connect()
    app.state.db = db
    try:
        yield
    finally:
        await db.close()
        shutdown_logging()


def create_app() -> FastAPI:
    app = FastAPI(title="Netflim Likes Service", lifespan=lifespan)
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization",
                       settings.session_header],
    )
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_max_requests,
        window_ms=settings.rate_limit_window_ms,
    )
    # outermost: trace id and access log cover every response
    app.add_middleware(RequestContextMiddleware,
                       session_header=settings.session_header)

    register_error_handlers(app)

    @app.get("/health")
    def health(request: Request):
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic()
                            - request.app.state.started_at, 3),
            "environment": settings.env,
        }

    app.include_router(likes_router)
    app.include_router(users_router)
    app.include_router(movies_router)
    include_admin_routes(app)
    return app


app = create_app()

# silence the stock uvicorn access log, ours is JSON
logging.getLogger("uvicorn.access").setLevel("WARNING")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
