"""Logfire setup and instrumentation of the libraries the service talks through.

Configure once at process start (``configure_logfire``), then instrument each
client as it is created: the FastAPI app in ``create_app``, the SQLAlchemy
engine and the Redis client in their DI providers.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from forum.config import ObservabilitySettings, Settings

SERVICE_NAME = "forum-backend"

# Health checks would otherwise dominate the trace volume
EXCLUDED_URLS = ["/health"]

# Token values travel in a cookie and in the websocket query string
SCRUB_PATTERNS = ["auth_token", "token"]


def _send_to_logfire(observability: ObservabilitySettings) -> bool:
    """An explicit setting wins; otherwise send only when a token is configured."""
    if observability.send_to_logfire is not None:
        return observability.send_to_logfire
    return bool(observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the process.

    Set OBSERVABILITY__LOGFIRE_TOKEN to ship spans to Logfire; without it
    output goes to the console only.

    Args:
        settings: Application settings
    """
    send = _send_to_logfire(settings.observability)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=settings.git_sha,
        environment=settings.environment,
        send_to_logfire=send,
        token=settings.observability.logfire_token,
        scrubbing=logfire.ScrubbingOptions(extra_patterns=SCRUB_PATTERNS),
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send,
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace HTTP requests and websocket handshakes of the app."""
    logfire.instrument_fastapi(app, excluded_urls=EXCLUDED_URLS)


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace every statement run on the engine."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)


def instrument_redis() -> None:
    """Trace Redis commands, MULTI/EXEC pipelines included.

    Must run before the client is created.
    """
    logfire.instrument_redis(capture_statement=True)
