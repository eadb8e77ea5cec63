"""Configuration endpoints."""
from fastapi import APIRouter, Depends

from ..dependencies import get_server_config
from ..schemas import ServerConfigModel
from ..state import ServerConfig

router = APIRouter(prefix="/config", tags=["config"])


@router.get("", response_model=ServerConfigModel)
def read_config(config: ServerConfig = Depends(get_server_config)) -> ServerConfigModel:
    """Return the public part of the server configuration."""

    return ServerConfigModel(
        port=config.port,
        screen_resolutions=list(config.screen_resolutions),
        tmdb_enabled=bool(config.tmdb_api_key),
    )
