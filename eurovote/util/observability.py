"""Observability configuration using Logfire.

Usage:
    import logfire

    # Structured logging
    logfire.info("Guest approved", code=code, guest_id=guest_id)

    # Spans around one polling cycle
    with logfire.span("party_sync_cycle", code=code):
        ...
"""

import logfire

from eurovote.config import Settings


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the client process.

    Console-only unless a token is present or sending is forced through
    OBSERVABILITY__SEND_TO_LOGFIRE.

    Args:
        settings: Client settings
    """
    # Priority: explicit setting > token presence > default (False)
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    elif settings.observability.logfire_token:
        send_to_logfire = True
    else:
        send_to_logfire = False

    config_kwargs = {
        "service_name": "eurovote-client",
        "service_version": "0.1.0",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
    )


def instrument_httpx() -> None:
    """Instrument httpx with Logfire.

    Traces every outbound gateway request, including latency and status.
    """
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
