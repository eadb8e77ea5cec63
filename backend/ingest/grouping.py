"""Post-ingestion pass that flags directories holding several movies."""
from __future__ import annotations

import logging

from backend.catalog_api.stores.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


def detect_groups(store: CatalogStore) -> int:
    """Mark movies sharing a ``(dir_name, dir_path)`` key with another movie.

    Runs as an aggregate read followed by one update per kept key, so running
    it again re-applies the same flags. Returns the number of flagged movies.
    """

    affected = 0
    for group in store.duplicate_directories():
        affected += store.mark_group_directory(dir_name=group.dir_name, dir_path=group.dir_path)
        logger.debug("Grouped %d movies under %s", group.count, group.dir_path)

    if affected:
        logger.info("Flagged %d movies as part of a group directory", affected)
    return affected
