#!/usr/bin/env python3
"""Upgrade the database schema to the latest revision.

Runs before the API starts; a failure aborts the deployment.
"""

import sys

import logfire
from alembic import command
from alembic.config import Config

from forum.config import Settings
from forum.util.observability import configure_logfire


def alembic_config(settings: Settings) -> Config:
    """alembic.ini with the database URL taken from the environment."""
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", settings.database_url)
    return config


def main() -> int:
    settings = Settings()
    configure_logfire(settings)

    with logfire.span("migrations.upgrade", environment=settings.environment):
        try:
            command.upgrade(alembic_config(settings), "head")
        except Exception as e:
            logfire.exception("Database migration failed", error_type=type(e).__name__)
            raise

    logfire.info("Database migrations completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
