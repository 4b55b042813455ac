#!/usr/bin/env python3
"""Serve the API with uvicorn.

Logfire is configured before the app module is imported, so failures while
building the app are reported too.
"""

import sys

import logfire
import uvicorn

from forum.config import Settings
from forum.util.logging import setup_logging
from forum.util.observability import configure_logfire

APP = "forum.interface.api.app:app"


def main() -> int:
    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    logfire.info("Starting API", port=settings.port, git_sha=settings.git_sha)
    try:
        # Vote workers and the connection hub start in the app lifespan
        uvicorn.run(
            APP,
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )
    except Exception as e:
        logfire.exception("API failed to start", error_type=type(e).__name__)
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
