#!/usr/bin/env python3
"""Bring the comment store schema up to date before the API starts."""

import sys
from pathlib import Path

import logfire
from alembic import command
from alembic.config import Config
from sqlalchemy.engine import make_url

from commentary.config import Settings
from commentary.util.observability import configure_logfire

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def main(revision: str = "head") -> int:
    """Upgrade the comments schema to the given revision."""
    settings = Settings()
    configure_logfire(settings)

    # Never log credentials from the URL
    database = make_url(settings.database_url)
    target = {
        "service": "commentary-api",
        "environment": settings.environment,
        "database_host": database.host,
        "database_name": database.database,
        "revision": revision,
    }

    try:
        with logfire.span("Upgrading comment store schema", **target):
            command.upgrade(Config(str(ALEMBIC_INI)), revision)

        logfire.info("Comment store schema is at {revision}", **target)
        return 0

    except Exception as e:
        logfire.error(
            "Comment store migration failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
            **target,
        )
        # The API container must not start against a half-migrated schema
        raise


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
