"""Movie catalog endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies import get_catalog_store
from ..schemas import CatalogMetricsModel, MovieModel, SubtitleModel
from ..stores.catalog_store import CatalogStore

router = APIRouter(prefix="/movies", tags=["movies"])


@router.get("", response_model=list[MovieModel])
def list_movies(
    group: bool | None = Query(
        default=None,
        description="Filter to movies inside (true) or outside (false) a group directory.",
    ),
    dir_path: str | None = Query(default=None, description="Limit results to one directory."),
    store: CatalogStore = Depends(get_catalog_store),
) -> list[MovieModel]:
    """Return catalogued movies in ingestion order."""

    return store.list_movies(dir_path=dir_path, is_group_dir=group)


@router.get("/metrics", response_model=CatalogMetricsModel)
def movie_metrics(store: CatalogStore = Depends(get_catalog_store)) -> CatalogMetricsModel:
    """Return aggregate catalog statistics."""

    return store.metrics()


@router.get("/{movie_id}", response_model=MovieModel)
def get_movie(movie_id: int, store: CatalogStore = Depends(get_catalog_store)) -> MovieModel:
    """Return a single movie, raising when missing."""

    movie = store.get_movie(movie_id)
    if movie is None:
        raise HTTPException(status_code=404, detail="Movie not found")
    return movie


@router.get("/{movie_id}/subtitles", response_model=list[SubtitleModel])
def list_movie_subtitles(
    movie_id: int, store: CatalogStore = Depends(get_catalog_store)
) -> list[SubtitleModel]:
    """Return subtitles stored next to the given movie."""

    movie = store.get_movie(movie_id)
    if movie is None:
        raise HTTPException(status_code=404, detail="Movie not found")
    return store.list_subtitles(dir_path=movie.dir_path)
