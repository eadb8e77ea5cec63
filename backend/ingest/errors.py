"""Error taxonomy shared by the ingestion pipeline and the launcher."""
from __future__ import annotations


class VoodioError(RuntimeError):
    """Base class for failures raised by the catalog pipeline."""


class SetupError(VoodioError):
    """Raised when required configuration or local resources are unavailable."""


class ScanError(VoodioError):
    """Raised when the movie directory cannot be walked."""


class CatalogError(VoodioError):
    """Raised when a record cannot be written to the catalog store."""


class ServiceError(VoodioError):
    """Raised when the HTTP service fails to bind or its serve loop crashes."""


class ShutdownTimeout(ServiceError):
    """Raised when graceful shutdown does not finish before its deadline."""
