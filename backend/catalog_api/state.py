"""Shared state container for the catalog API."""
from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.engine import Engine

from .stores.catalog_store import CatalogStore


@dataclass(slots=True)
class ServerConfig:
    """Everything the HTTP service needs from the launcher."""

    engine: Engine
    port: int
    app_dir: str
    tmdb_api_key: str
    screen_resolutions: list[str] = field(default_factory=list)
    host: str = "0.0.0.0"


@dataclass(slots=True)
class AppState:
    """Encapsulates state shared across routers."""

    config: ServerConfig
    catalog_store: CatalogStore

    def __init__(self, config: ServerConfig) -> None:
        self.config = config
        self.catalog_store = CatalogStore(config.engine)
