"""Launcher that builds the catalog and supervises the HTTP service."""
