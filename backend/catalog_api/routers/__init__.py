"""Router exports for the catalog API."""
from . import config, health, movies, subtitles

__all__ = ["config", "health", "movies", "subtitles"]
