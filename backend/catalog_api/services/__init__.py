"""Service layer helpers for the catalog API."""

from .server import CatalogServer

__all__ = ["CatalogServer"]
