"""Catalog writer that folds scanned entries into persisted records."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError

from backend.catalog_api.stores.catalog_store import CatalogStore

from .errors import CatalogError
from .normalizer import normalize
from .scanner import DirectoryEntry

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class IngestReport:
    """Counts of records written by one ingestion run."""

    movies: int
    subtitles: int

    @property
    def total(self) -> int:
        return self.movies + self.subtitles


def ingest(
    store: CatalogStore,
    movies: Sequence[DirectoryEntry],
    subtitles: Sequence[DirectoryEntry],
) -> IngestReport:
    """Normalize each entry and insert one record per file, preserving input order.

    The first failed insert raises :class:`CatalogError`; records written so far
    are left in place for the caller to discard with the working directory.
    """

    written_movies = 0
    for entry in movies:
        try:
            store.add_movie(
                dir_path=entry.directory_path,
                dir_name=entry.directory_name,
                clean_dir_name=normalize(entry.directory_name),
                base_name=entry.file_name,
                clean_base_name=normalize(entry.file_name),
                file_size=entry.file_size,
                mime_type=entry.mime_type,
            )
        except SQLAlchemyError as exc:
            raise CatalogError(f"Unable to save movie {entry.file_name!r}: {exc}") from exc
        written_movies += 1

    written_subtitles = 0
    for entry in subtitles:
        try:
            store.add_subtitle(
                dir_path=entry.directory_path,
                dir_name=entry.directory_name,
                clean_dir_name=normalize(entry.directory_name),
                base_name=entry.file_name,
                clean_base_name=normalize(entry.file_name),
            )
        except SQLAlchemyError as exc:
            raise CatalogError(f"Unable to save subtitle {entry.file_name!r}: {exc}") from exc
        written_subtitles += 1

    logger.info("Saved %d movies and %d subtitles", written_movies, written_subtitles)
    return IngestReport(movies=written_movies, subtitles=written_subtitles)
