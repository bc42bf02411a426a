"""Production dependency injection container."""

import logging

from dishka import AsyncContainer, make_async_container

from eurovote.util.di import PROVIDERS, get_provider

logger = logging.getLogger(__name__)


def create_container() -> AsyncContainer:
    """Container for the command line client.

    Every mockable component gets its production implementation. The
    caller owns the container and must ``await container.close()`` so the
    gateway's HTTP client is released.
    """
    providers = [get_provider(base, use_mock=False) for base in PROVIDERS]
    logger.debug(f"Building container from {', '.join(p.__name__ for p in providers)}")
    return make_async_container(*(provider() for provider in providers))
