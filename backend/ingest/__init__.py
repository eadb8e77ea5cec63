"""Ingestion pipeline: scan, normalize, persist and group movie files."""

from .errors import (
    CatalogError,
    ScanError,
    ServiceError,
    SetupError,
    ShutdownTimeout,
    VoodioError,
)
from .grouping import detect_groups
from .normalizer import normalize
from .scanner import DirectoryEntry, EntryKind, ScanResult, scan_directory
from .writer import IngestReport, ingest

__all__ = [
    "CatalogError",
    "DirectoryEntry",
    "EntryKind",
    "IngestReport",
    "ScanError",
    "ScanResult",
    "ServiceError",
    "SetupError",
    "ShutdownTimeout",
    "VoodioError",
    "detect_groups",
    "ingest",
    "normalize",
    "scan_directory",
]
