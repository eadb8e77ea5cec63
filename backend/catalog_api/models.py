"""Database models for the movie catalog."""
from __future__ import annotations

from sqlmodel import Field, SQLModel


class MovieRecord(SQLModel, table=True):
    """A movie file discovered during ingestion."""

    __tablename__ = "movies"

    id: int | None = Field(default=None, primary_key=True)
    dir_path: str = Field(index=True)
    dir_name: str = Field(index=True)
    clean_dir_name: str = Field(default="")
    base_name: str
    clean_base_name: str = Field(default="", index=True)
    file_size: int = Field(default=0, ge=0)
    mime_type: str = Field(default="application/octet-stream")
    is_group_dir: bool = Field(default=False, index=True)
    is_prepared: bool = Field(default=False)


class SubtitleRecord(SQLModel, table=True):
    """A subtitle file discovered during ingestion."""

    __tablename__ = "subtitles"

    id: int | None = Field(default=None, primary_key=True)
    dir_path: str = Field(index=True)
    dir_name: str = Field(index=True)
    clean_dir_name: str = Field(default="")
    base_name: str
    clean_base_name: str = Field(default="")
