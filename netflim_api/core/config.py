# netflim_api/core/config.py
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "netflim_api"
    env: str = Field(default="development", alias="NODE_ENV")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3001, alias="PORT")

    db_path: str = Field(default="database/netflim.db", alias="DB_PATH")

    # fixed window per client ip
    rate_limit_window_ms: int = Field(default=15 * 60 * 1000,
                                      alias="RATE_LIMIT_WINDOW_MS")
    rate_limit_max_requests: int = Field(default=100,
                                         alias="RATE_LIMIT_MAX_REQUESTS")

    cors_origins: list[str] = Field(
        default=[
            "http://localhost:5173",
            "http://localhost:5174",
            "http://localhost:5175",
        ],
        alias="CORS_ORIGINS",
    )
    session_header: str = Field(default="X-Session-Id",
                                alias="SESSION_HEADER")

    sentry_dsn: str = Field(default="", alias="SENTRY_DSN")
    admin_routes_enabled: bool = Field(default=False,
                                       alias="ADMIN_ROUTES_ENABLED")

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True)

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


settings = Settings()
