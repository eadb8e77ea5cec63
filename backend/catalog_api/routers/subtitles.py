"""Subtitle catalog endpoints."""
from fastapi import APIRouter, Depends, Query

from ..dependencies import get_catalog_store
from ..schemas import SubtitleModel
from ..stores.catalog_store import CatalogStore

router = APIRouter(prefix="/subtitles", tags=["subtitles"])


@router.get("", response_model=list[SubtitleModel])
def list_subtitles(
    dir_path: str | None = Query(default=None, description="Limit results to one directory."),
    store: CatalogStore = Depends(get_catalog_store),
) -> list[SubtitleModel]:
    """Return catalogued subtitles in ingestion order."""

    return store.list_subtitles(dir_path=dir_path)
