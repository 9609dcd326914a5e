import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration


def init_sentry(dsn: str, environment: str = "development",
                traces_sample_rate: float = 0.2) -> bool:
    """Enable error reporting when a DSN is configured."""
    if not dsn:
        return False
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        integrations=[
            # JSON logs already go to stdout, only exceptions go to sentry
            LoggingIntegration(level=None, event_level=None),
            FastApiIntegration(),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=traces_sample_rate,
        # session tokens identify visitors, keep them out of events
        send_default_pii=False,
    )
    return True
