"""FastAPI dependencies for the catalog API."""
from fastapi import Depends, Request

from .state import AppState, ServerConfig
from .stores.catalog_store import CatalogStore


def get_app_state(request: Request) -> AppState:
    """Resolve the shared application state from the FastAPI request."""
    return request.app.state.app_state


def get_catalog_store(app_state: AppState = Depends(get_app_state)) -> CatalogStore:
    """Return the catalog store dependency."""
    return app_state.catalog_store


def get_server_config(app_state: AppState = Depends(get_app_state)) -> ServerConfig:
    """Return the configuration the server was built with."""
    return app_state.config
