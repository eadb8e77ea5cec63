"""Filesystem classifier that splits a movie tree into movie and subtitle entries."""
from __future__ import annotations

import logging
import mimetypes
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import NoReturn

from .errors import ScanError

logger = logging.getLogger(__name__)

MOVIE_EXTENSIONS = frozenset(
    {
        ".mp4",
        ".mkv",
        ".avi",
        ".mov",
        ".wmv",
        ".flv",
        ".webm",
        ".m4v",
        ".mpg",
        ".mpeg",
        ".ts",
        ".m2ts",
    }
)
SUBTITLE_EXTENSIONS = frozenset({".srt", ".vtt", ".ass", ".ssa", ".sub"})

# The platform registry misses several container and subtitle types.
_FALLBACK_MIME_TYPES = {
    ".mkv": "video/x-matroska",
    ".m4v": "video/x-m4v",
    ".flv": "video/x-flv",
    ".webm": "video/webm",
    ".ts": "video/mp2t",
    ".m2ts": "video/mp2t",
    ".srt": "application/x-subrip",
    ".vtt": "text/vtt",
    ".ass": "text/x-ssa",
    ".ssa": "text/x-ssa",
    ".sub": "text/x-microdvd",
}


class EntryKind(str, Enum):
    """Classification assigned to a file found during the walk."""

    MOVIE = "movie"
    SUBTITLE = "subtitle"


@dataclass(slots=True, frozen=True)
class DirectoryEntry:
    """A classified file together with its containing directory."""

    directory_path: str
    directory_name: str
    file_name: str
    file_size: int
    mime_type: str
    kind: EntryKind


@dataclass(slots=True)
class ScanResult:
    """Movie and subtitle entries discovered under a root directory."""

    movies: list[DirectoryEntry] = field(default_factory=list)
    subtitles: list[DirectoryEntry] = field(default_factory=list)
    skipped: int = 0


def classify(file_name: str) -> EntryKind | None:
    """Return the entry kind implied by a file extension, if any."""

    suffix = Path(file_name).suffix.lower()
    if suffix in MOVIE_EXTENSIONS:
        return EntryKind.MOVIE
    if suffix in SUBTITLE_EXTENSIONS:
        return EntryKind.SUBTITLE
    return None


def guess_mime_type(file_name: str) -> str:
    """Resolve a MIME type from the file extension."""

    suffix = Path(file_name).suffix.lower()
    if suffix in _FALLBACK_MIME_TYPES:
        return _FALLBACK_MIME_TYPES[suffix]
    mime_type, _ = mimetypes.guess_type(file_name, strict=False)
    return mime_type or "application/octet-stream"


def _raise_scan_error(exc: OSError) -> NoReturn:
    raise ScanError(f"Unable to read {exc.filename or 'directory'}: {exc.strerror or exc}") from exc


def scan_directory(root: str | Path) -> ScanResult:
    """Walk ``root`` once and classify every regular file beneath it.

    Directories are visited top-down and their entries in lexicographic order,
    so two scans of an unchanged tree yield identical sequences. Any directory
    that cannot be listed aborts the whole scan.
    """

    root_path = Path(root).expanduser()
    try:
        root_path = root_path.resolve(strict=True)
        with os.scandir(root_path):
            pass
    except OSError as exc:
        _raise_scan_error(exc)

    result = ScanResult()
    for dirpath, dirnames, filenames in os.walk(root_path, onerror=_raise_scan_error):
        dirnames.sort()
        directory = Path(dirpath)
        for file_name in sorted(filenames):
            file_path = directory / file_name
            kind = classify(file_name)
            if kind is None:
                result.skipped += 1
                logger.debug("Skipping unrecognized file %s", file_path)
                continue
            if not file_path.is_file():
                continue
            try:
                stat = file_path.stat()
            except OSError as exc:
                _raise_scan_error(exc)

            entry = DirectoryEntry(
                directory_path=str(directory),
                directory_name=directory.name,
                file_name=file_name,
                file_size=stat.st_size,
                mime_type=guess_mime_type(file_name),
                kind=kind,
            )
            if kind is EntryKind.MOVIE:
                result.movies.append(entry)
            else:
                result.subtitles.append(entry)

    if result.skipped:
        logger.info("Ignored %d files with unrecognized extensions", result.skipped)
    return result
