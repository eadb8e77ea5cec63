"""Runtime configuration for the Voodio catalog service."""
from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SCREEN_RESOLUTIONS: tuple[str, ...] = ("360p", "480p", "720p", "1080p")


class VoodioSettings(BaseSettings):
    """Environment-aware settings shared by the launcher and the HTTP service."""

    movie_path: str = Field(
        default="", description="Parent directory scanned for movies and subtitles."
    )
    port: int = Field(default=1818, ge=1, le=65535, description="Port the HTTP service binds to.")
    host: str = Field(default="0.0.0.0", description="Interface the HTTP service binds to.")
    tmdb_api_key: str = Field(
        default="", description="TMDB API key forwarded to the HTTP service for enrichment."
    )
    screen_resolutions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SCREEN_RESOLUTIONS),
        description="Output resolutions offered for transcoding.",
    )
    cache_dir: str | None = Field(
        default=None,
        description="Override for the platform user-cache root holding the working directory.",
    )
    shutdown_timeout: float = Field(
        default=30.0, gt=0, description="Seconds allowed for graceful HTTP shutdown."
    )
    require_ffmpeg: bool = Field(
        default=True, description="Abort startup when ffmpeg is not on PATH."
    )
    database_echo: bool = Field(default=False, description="Enable SQL echo for debugging queries.")
    log_level: str = Field(default="INFO", description="Root logging level.")

    model_config = SettingsConfigDict(
        env_prefix="VOODIO_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @field_validator("screen_resolutions")
    @classmethod
    def _default_resolutions(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value if item and item.strip()]
        return cleaned or list(DEFAULT_SCREEN_RESOLUTIONS)
