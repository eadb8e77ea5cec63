"""Database helpers for the catalog store."""
from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from . import models  # noqa: F401 - registers catalog tables on the metadata


def sqlite_url(db_path: str | Path) -> str:
    """Build a SQLAlchemy URL for a SQLite file."""

    return f"sqlite:///{Path(db_path)}"


def create_catalog_engine(db_path: str | Path, *, echo: bool = False) -> Engine:
    """Create a SQLModel engine bound to the catalog database file."""

    # The serve loop reads from worker threads while ingestion ran on the main one.
    return create_engine(
        sqlite_url(db_path), echo=echo, connect_args={"check_same_thread": False}
    )


def init_database(engine: Engine) -> None:
    """Create the movie and subtitle tables."""

    SQLModel.metadata.create_all(engine)
