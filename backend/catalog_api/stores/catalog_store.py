"""Catalog store exposing the movie and subtitle tables."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import func, update
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from ..models import MovieRecord, SubtitleRecord
from ..schemas import CatalogMetricsModel, DirectoryGroupModel, MovieModel, SubtitleModel


@dataclass(slots=True)
class CatalogStore:
    """Insert, query and flag catalog records.

    Writes happen only during ingestion; the HTTP service reads afterwards.
    """

    engine: Engine

    def add_movie(
        self,
        *,
        dir_path: str,
        dir_name: str,
        clean_dir_name: str,
        base_name: str,
        clean_base_name: str,
        file_size: int,
        mime_type: str,
    ) -> MovieModel:
        """Insert one movie record with grouping and preparation flags cleared."""

        record = MovieRecord(
            dir_path=dir_path,
            dir_name=dir_name,
            clean_dir_name=clean_dir_name,
            base_name=base_name,
            clean_base_name=clean_base_name,
            file_size=file_size,
            mime_type=mime_type,
            is_group_dir=False,
            is_prepared=False,
        )
        with Session(self.engine) as session:
            session.add(record)
            session.commit()
            session.refresh(record)
            return _movie_to_model(record)

    def add_subtitle(
        self,
        *,
        dir_path: str,
        dir_name: str,
        clean_dir_name: str,
        base_name: str,
        clean_base_name: str,
    ) -> SubtitleModel:
        """Insert one subtitle record."""

        record = SubtitleRecord(
            dir_path=dir_path,
            dir_name=dir_name,
            clean_dir_name=clean_dir_name,
            base_name=base_name,
            clean_base_name=clean_base_name,
        )
        with Session(self.engine) as session:
            session.add(record)
            session.commit()
            session.refresh(record)
            return _subtitle_to_model(record)

    def get_movie(self, movie_id: int) -> MovieModel | None:
        """Return a single movie if present."""

        with Session(self.engine) as session:
            record = session.get(MovieRecord, movie_id)
            return _movie_to_model(record) if record else None

    def list_movies(
        self,
        *,
        dir_name: str | None = None,
        dir_path: str | None = None,
        is_group_dir: bool | None = None,
    ) -> list[MovieModel]:
        """Return movies matching the provided filters in insertion order."""

        statement = select(MovieRecord)
        if dir_name is not None:
            statement = statement.where(MovieRecord.dir_name == dir_name)
        if dir_path is not None:
            statement = statement.where(MovieRecord.dir_path == dir_path)
        if is_group_dir is not None:
            statement = statement.where(MovieRecord.is_group_dir == is_group_dir)
        statement = statement.order_by(MovieRecord.id)

        with Session(self.engine) as session:
            records: Iterable[MovieRecord] = session.exec(statement)
            return [_movie_to_model(record) for record in records]

    def list_subtitles(self, *, dir_path: str | None = None) -> list[SubtitleModel]:
        """Return subtitles, optionally limited to one directory."""

        statement = select(SubtitleRecord)
        if dir_path is not None:
            statement = statement.where(SubtitleRecord.dir_path == dir_path)
        statement = statement.order_by(SubtitleRecord.id)

        with Session(self.engine) as session:
            records: Iterable[SubtitleRecord] = session.exec(statement)
            return [_subtitle_to_model(record) for record in records]

    def duplicate_directories(self) -> list[DirectoryGroupModel]:
        """Return ``(dir_name, dir_path)`` keys shared by more than one movie.

        Keys compare with SQLite's case-sensitive ``BINARY`` collation.
        """

        dir_name = MovieRecord.dir_name.collate("BINARY")
        dir_path = MovieRecord.dir_path.collate("BINARY")
        count = func.count(MovieRecord.id)
        statement = (
            select(MovieRecord.dir_name, MovieRecord.dir_path, count)
            .group_by(dir_name, dir_path)
            .having(count > 1)
            .order_by(dir_path, dir_name)
        )
        with Session(self.engine) as session:
            rows = session.exec(statement).all()
        return [
            DirectoryGroupModel(dir_name=name, dir_path=path, count=total)
            for name, path, total in rows
        ]

    def mark_group_directory(self, *, dir_name: str, dir_path: str) -> int:
        """Flag every movie sharing the directory key and return the affected count."""

        statement = (
            update(MovieRecord)
            .where(MovieRecord.dir_name == dir_name)
            .where(MovieRecord.dir_path == dir_path)
            .values(is_group_dir=True)
        )
        with self.engine.begin() as connection:
            result = connection.execute(statement)
            return int(result.rowcount or 0)

    def metrics(self) -> CatalogMetricsModel:
        """Return aggregate record counts."""

        with Session(self.engine) as session:
            movies = session.exec(select(func.count()).select_from(MovieRecord)).one()
            subtitles = session.exec(select(func.count()).select_from(SubtitleRecord)).one()
            grouped = session.exec(
                select(func.count())
                .select_from(MovieRecord)
                .where(MovieRecord.is_group_dir == True)  # noqa: E712
            ).one()
        return CatalogMetricsModel(movies=movies, subtitles=subtitles, grouped_movies=grouped)


def _movie_to_model(record: MovieRecord) -> MovieModel:
    """Convert a movie record into a response model."""

    return MovieModel(
        id=record.id,
        dir_path=record.dir_path,
        dir_name=record.dir_name,
        clean_dir_name=record.clean_dir_name,
        base_name=record.base_name,
        clean_base_name=record.clean_base_name,
        file_size=record.file_size,
        mime_type=record.mime_type,
        is_group_dir=record.is_group_dir,
        is_prepared=record.is_prepared,
    )


def _subtitle_to_model(record: SubtitleRecord) -> SubtitleModel:
    """Convert a subtitle record into a response model."""

    return SubtitleModel(
        id=record.id,
        dir_path=record.dir_path,
        dir_name=record.dir_name,
        clean_dir_name=record.clean_dir_name,
        base_name=record.base_name,
        clean_base_name=record.clean_base_name,
    )
