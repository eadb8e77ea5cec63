"""Tests for scanning, title normalization, catalog writes and grouping."""
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator

import pytest
from sqlalchemy.exc import OperationalError

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.catalog_api.db import create_catalog_engine, init_database  # noqa: E402
from backend.catalog_api.stores.catalog_store import CatalogStore  # noqa: E402
from backend.ingest import (  # noqa: E402
    CatalogError,
    DirectoryEntry,
    EntryKind,
    ScanError,
    detect_groups,
    ingest,
    normalize,
    scan_directory,
)
from backend.ingest import normalizer as normalizer_module  # noqa: E402


def touch(path: Path, size: int = 0) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\0" * size)
    return path


def movie_entry(dir_path: str, file_name: str, size: int = 10) -> DirectoryEntry:
    return DirectoryEntry(
        directory_path=dir_path,
        directory_name=Path(dir_path).name,
        file_name=file_name,
        file_size=size,
        mime_type="video/x-matroska",
        kind=EntryKind.MOVIE,
    )


def subtitle_entry(dir_path: str, file_name: str) -> DirectoryEntry:
    return DirectoryEntry(
        directory_path=dir_path,
        directory_name=Path(dir_path).name,
        file_name=file_name,
        file_size=1,
        mime_type="application/x-subrip",
        kind=EntryKind.SUBTITLE,
    )


@pytest.fixture()
def store(tmp_path: Path) -> Iterator[CatalogStore]:
    """Provide a catalog store backed by an isolated SQLite file."""

    engine = create_catalog_engine(tmp_path / "voodio.db")
    init_database(engine)
    yield CatalogStore(engine)
    engine.dispose()


def test_scan_directory_classifies_movies_and_subtitles(tmp_path: Path) -> None:
    """Only files with known movie or subtitle extensions should be returned."""

    root = tmp_path / "movies"
    touch(root / "Alpha" / "alpha.mkv", size=42)
    touch(root / "Alpha" / "alpha.srt")
    touch(root / "Alpha" / "cover.jpg")
    touch(root / "Beta" / "Disc 1" / "beta.MP4")
    touch(root / "Beta" / "beta.en.vtt")
    touch(root / "notes.txt")
    touch(root / "loose.avi")

    result = scan_directory(root)

    assert {entry.file_name for entry in result.movies} == {"alpha.mkv", "beta.MP4", "loose.avi"}
    assert {entry.file_name for entry in result.subtitles} == {"alpha.srt", "beta.en.vtt"}
    assert result.skipped == 2
    assert all(entry.kind is EntryKind.MOVIE for entry in result.movies)
    assert all(entry.kind is EntryKind.SUBTITLE for entry in result.subtitles)

    alpha = next(entry for entry in result.movies if entry.file_name == "alpha.mkv")
    assert alpha.directory_name == "Alpha"
    assert alpha.directory_path == str((root / "Alpha").resolve())
    assert alpha.file_size == 42
    assert alpha.mime_type == "video/x-matroska"


def test_scan_directory_is_deterministic(tmp_path: Path) -> None:
    """Two scans of an unchanged tree should yield identical sequences."""

    root = tmp_path / "movies"
    for name in ("zeta", "alpha", "mid"):
        touch(root / name / f"{name}.mkv")
        touch(root / name / f"{name}-2.mkv")

    first = scan_directory(root)
    second = scan_directory(root)

    assert first.movies == second.movies
    assert [entry.file_name for entry in first.movies] == [
        "alpha-2.mkv",
        "alpha.mkv",
        "mid-2.mkv",
        "mid.mkv",
        "zeta-2.mkv",
        "zeta.mkv",
    ]


def test_scan_directory_rejects_missing_root(tmp_path: Path) -> None:
    """A root that is not a directory should raise ScanError."""

    with pytest.raises(ScanError) as excinfo:
        scan_directory(tmp_path / "missing")
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)

    file_root = touch(tmp_path / "movie.mkv")
    with pytest.raises(ScanError):
        scan_directory(file_root)


@pytest.mark.skipif(
    sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
    reason="permission bits are not enforced for this user",
)
def test_scan_directory_aborts_on_unreadable_subdirectory(tmp_path: Path) -> None:
    """An unreadable subdirectory should abort the whole scan."""

    root = tmp_path / "movies"
    touch(root / "ok" / "ok.mkv")
    locked = root / "locked"
    touch(locked / "hidden.mkv")
    locked.chmod(0)
    try:
        with pytest.raises(ScanError) as excinfo:
            scan_directory(root)
        assert isinstance(excinfo.value.__cause__, OSError)
    finally:
        locked.chmod(0o755)


def test_normalize_strips_release_tags() -> None:
    """Release-style names should collapse to the bare title."""

    assert normalize("Film.2020.1080p.WEB.mkv") == "Film"
    assert normalize("Film.2020.1080p.WEB") == "Film"
    assert normalize("The.Matrix.1999.1080p.BluRay.x264-GROUP.mkv") == "The Matrix"


@pytest.mark.parametrize(
    "raw_name",
    ["", "   ", "Film.2020.1080p.WEB.mkv", "[Group] Show - 01 [720p].mkv", "....", "ep1.mkv"],
)
def test_normalize_is_total_and_deterministic(raw_name: str) -> None:
    """normalize should never raise and should repeat its answer."""

    first = normalize(raw_name)
    second = normalize(raw_name)

    assert isinstance(first, str)
    assert first == second


def test_normalize_returns_empty_string_on_parser_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """Parser failures should degrade to an empty title."""

    def _boom(name: str) -> dict[str, object]:
        raise ValueError("unparseable")

    monkeypatch.setattr(normalizer_module.PTN, "parse", _boom)

    assert normalize("Film.2020.1080p.WEB.mkv") == ""


def test_normalize_returns_empty_string_without_title(monkeypatch: pytest.MonkeyPatch) -> None:
    """A parse result lacking a title should map to an empty string."""

    monkeypatch.setattr(normalizer_module.PTN, "parse", lambda name: {"resolution": "1080p"})

    assert normalize("1080p") == ""


def test_ingest_round_trips_record_fields(store: CatalogStore) -> None:
    """Inserted records should read back with identical field values."""

    movie = movie_entry("/movies/Film.2020.1080p.WEB", "Film.2020.1080p.WEB.mkv", size=2048)
    subtitle = subtitle_entry("/movies/Film.2020.1080p.WEB", "Film.2020.1080p.WEB.srt")

    report = ingest(store, [movie], [subtitle])

    assert report.movies == 1
    assert report.subtitles == 1
    assert report.total == 2

    [stored_movie] = store.list_movies()
    assert stored_movie.id is not None
    assert stored_movie.dir_path == "/movies/Film.2020.1080p.WEB"
    assert stored_movie.dir_name == "Film.2020.1080p.WEB"
    assert stored_movie.clean_dir_name == "Film"
    assert stored_movie.base_name == "Film.2020.1080p.WEB.mkv"
    assert stored_movie.clean_base_name == "Film"
    assert stored_movie.file_size == 2048
    assert stored_movie.mime_type == "video/x-matroska"
    assert stored_movie.is_group_dir is False
    assert stored_movie.is_prepared is False

    [stored_subtitle] = store.list_subtitles()
    assert stored_subtitle.dir_path == stored_movie.dir_path
    assert stored_subtitle.dir_name == stored_movie.dir_name
    assert stored_subtitle.base_name == "Film.2020.1080p.WEB.srt"
    assert stored_subtitle.clean_base_name == "Film"


def test_ingest_preserves_input_order_and_duplicates(store: CatalogStore) -> None:
    """Records should be written in input order without uniqueness checks."""

    entries = [
        movie_entry("/m/B", "b.mkv"),
        movie_entry("/m/A", "a.mkv"),
        movie_entry("/m/A", "a.mkv"),
    ]

    ingest(store, entries, [])

    assert [(movie.dir_path, movie.base_name) for movie in store.list_movies()] == [
        ("/m/B", "b.mkv"),
        ("/m/A", "a.mkv"),
        ("/m/A", "a.mkv"),
    ]


def test_ingest_raises_catalog_error_on_failed_insert() -> None:
    """A failed insert should surface as CatalogError."""

    class FailingStore:
        def add_movie(self, **fields: object) -> None:
            raise OperationalError("INSERT INTO movies", {}, Exception("disk I/O error"))

        def add_subtitle(self, **fields: object) -> None:  # pragma: no cover - not reached
            raise AssertionError("subtitles must not be written after a failure")

    with pytest.raises(CatalogError) as excinfo:
        ingest(FailingStore(), [movie_entry("/m/A", "a.mkv")], [subtitle_entry("/m/A", "a.srt")])
    assert isinstance(excinfo.value.__cause__, OperationalError)


def test_detect_groups_flags_only_shared_directories(store: CatalogStore) -> None:
    """Exactly the movies sharing a directory key should be flagged."""

    ingest(
        store,
        [
            movie_entry("/m/dir1", "f1.mkv"),
            movie_entry("/m/dir1", "f2.mkv"),
            movie_entry("/m/dir2", "f3.mkv"),
        ],
        [],
    )

    affected = detect_groups(store)

    assert affected == 2
    flags = {movie.base_name: movie.is_group_dir for movie in store.list_movies()}
    assert flags == {"f1.mkv": True, "f2.mkv": True, "f3.mkv": False}


def test_detect_groups_is_idempotent(store: CatalogStore) -> None:
    """Running the detector twice should leave identical flags."""

    ingest(
        store,
        [
            movie_entry("/m/Show.S01", "ep1.mkv"),
            movie_entry("/m/Show.S01", "ep2.mkv"),
            movie_entry("/m/Solo", "solo.mkv"),
        ],
        [],
    )

    detect_groups(store)
    first = [(movie.id, movie.is_group_dir) for movie in store.list_movies()]
    detect_groups(store)
    second = [(movie.id, movie.is_group_dir) for movie in store.list_movies()]

    assert first == second


def test_detect_groups_ignores_subtitles(store: CatalogStore) -> None:
    """A single movie with several subtitles is not a group directory."""

    ingest(
        store,
        [movie_entry("/m/Film", "film.mkv")],
        [
            subtitle_entry("/m/Film", "film.en.srt"),
            subtitle_entry("/m/Film", "film.fr.srt"),
            subtitle_entry("/m/Other", "a.srt"),
            subtitle_entry("/m/Other", "b.srt"),
        ],
    )

    assert detect_groups(store) == 0
    assert [movie.is_group_dir for movie in store.list_movies()] == [False]
    assert store.duplicate_directories() == []


def test_detect_groups_compares_keys_case_sensitively(store: CatalogStore) -> None:
    """Directory keys differing only by case belong to different groups."""

    ingest(
        store,
        [movie_entry("/m/Show", "a.mkv"), movie_entry("/m/show", "b.mkv")],
        [],
    )

    assert detect_groups(store) == 0
    assert store.list_movies(is_group_dir=True) == []


def test_scenario_series_directory_is_grouped(tmp_path: Path, store: CatalogStore) -> None:
    """Two episodes in one folder should both be flagged after ingestion."""

    root = tmp_path / "movies"
    touch(root / "Show.S01" / "ep1.mkv")
    touch(root / "Show.S01" / "ep2.mkv")

    scanned = scan_directory(root)
    ingest(store, scanned.movies, scanned.subtitles)
    detect_groups(store)

    movies = store.list_movies()
    assert [movie.base_name for movie in movies] == ["ep1.mkv", "ep2.mkv"]
    assert all(movie.is_group_dir for movie in movies)


def test_scenario_single_release_is_not_grouped(tmp_path: Path, store: CatalogStore) -> None:
    """A release folder with one movie and its subtitle stays ungrouped."""

    root = tmp_path / "movies"
    release = root / "Film.2020.1080p.WEB"
    touch(release / "Film.2020.1080p.WEB.mkv")
    touch(release / "Film.2020.1080p.WEB.srt")

    scanned = scan_directory(root)
    ingest(store, scanned.movies, scanned.subtitles)
    detect_groups(store)

    [movie] = store.list_movies()
    [subtitle] = store.list_subtitles()
    assert movie.clean_base_name == "Film"
    assert movie.is_group_dir is False
    assert subtitle.dir_path == movie.dir_path
    assert subtitle.dir_name == movie.dir_name == "Film.2020.1080p.WEB"
