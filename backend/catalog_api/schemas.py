"""Pydantic models exposed by the catalog API."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class CatalogMetricsModel(BaseModel):
    """Aggregate counts for the current catalog."""

    movies: int = Field(default=0, ge=0)
    subtitles: int = Field(default=0, ge=0)
    grouped_movies: int = Field(
        default=0, ge=0, description="Movies living in a directory shared with other movies."
    )


class HealthStatus(BaseModel):
    """Service health payload."""

    status: Literal["ok"] = Field(default="ok")
    version: str = Field(default="0.1.0", description="Semantic version of the API service.")
    catalog: CatalogMetricsModel = Field(default_factory=CatalogMetricsModel)


class ServerConfigModel(BaseModel):
    """Public view of the service configuration."""

    port: int
    screen_resolutions: list[str]
    tmdb_enabled: bool = Field(description="Whether a TMDB API key was supplied.")


class MovieModel(BaseModel):
    """Represents a catalogued movie file."""

    id: int
    dir_path: str
    dir_name: str
    clean_dir_name: str = Field(description="Title parsed from the directory name, empty on a miss.")
    base_name: str
    clean_base_name: str = Field(description="Title parsed from the file name, empty on a miss.")
    file_size: int = Field(ge=0)
    mime_type: str
    is_group_dir: bool = Field(
        default=False, description="True when the directory holds more than one movie file."
    )
    is_prepared: bool = Field(default=False, description="Whether transcoded outputs exist.")


class SubtitleModel(BaseModel):
    """Represents a catalogued subtitle file."""

    id: int
    dir_path: str
    dir_name: str
    clean_dir_name: str
    base_name: str
    clean_base_name: str


class DirectoryGroupModel(BaseModel):
    """A directory key shared by more than one movie record."""

    dir_name: str
    dir_path: str
    count: int = Field(ge=2)
