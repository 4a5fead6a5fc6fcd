"""Observability configuration using Logfire.

Spans follow the ``<service>.<operation>`` naming used by the domain
services, e.g. ``thread_service.submit`` or ``reply_counter.adjust``, and
carry comment and content item IDs as attributes.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from commentary.config import Settings

# Request path parameters worth lifting onto request spans
TRACED_PATH_PARAMS = ("content_item_id", "comment_id")


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the comment service.

    Spans leave the process only when OBSERVABILITY__SEND_TO_LOGFIRE is true,
    or when it is unset and OBSERVABILITY__LOGFIRE_TOKEN is present. Values
    of attributes named like the identity cookie are scrubbed.

    Args:
        settings: Application settings
    """
    observability = settings.observability
    send_to_logfire = (
        observability.send_to_logfire
        if observability.send_to_logfire is not None
        else bool(observability.logfire_token)
    )

    logfire.configure(
        service_name="commentary-api",
        service_version=settings.git_sha,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=observability.logfire_token,
        console=logfire.ConsoleOptions(
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
        scrubbing=logfire.ScrubbingOptions(extra_patterns=["auth_token"]),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request, tagging spans with the thread it touches.

    Args:
        app: FastAPI application instance
    """

    def _thread_attributes(request, attributes):
        result = {**attributes}
        path_params = getattr(request, "path_params", None) or {}
        for name in TRACED_PATH_PARAMS:
            if name in path_params:
                result[name] = path_params[name]
        return result

    logfire.instrument_fastapi(
        app,
        # Cookies carry identity tokens
        capture_headers=False,
        request_attributes_mapper=_thread_attributes,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace comment store queries.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(engine=engine.sync_engine)


def instrument_httpx() -> None:
    """Trace content service lookups."""
    logfire.instrument_httpx()
