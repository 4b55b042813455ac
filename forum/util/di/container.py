"""Production container."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from forum.util.di import PROVIDERS, get_provider


def create_container() -> AsyncContainer:
    """Build the container from the production implementation of every provider.

    Settings are read from the environment when first requested.
    """
    providers = [get_provider(base)() for base in PROVIDERS]
    return make_async_container(*providers, FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Serve ``FromDishka`` dependencies of the app from the container.

    The container is also reachable as ``app.state.dishka_container``.
    """
    setup_dishka(container, app)
