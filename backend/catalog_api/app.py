"""Application factory for the Voodio catalog API."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import config, health, movies, subtitles
from .state import AppState, ServerConfig


def create_app(server_config: ServerConfig) -> FastAPI:
    """Build and configure the FastAPI application."""

    app_state = AppState(server_config)

    app = FastAPI(title="Voodio Catalog API", version="0.1.0")
    app.state.app_state = app_state

    # Players are served from other origins on the local network.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router in (
        health.router,
        config.router,
        movies.router,
        subtitles.router,
    ):
        app.include_router(router)

    return app
