"""Command line interface that builds the catalog and serves it."""
from __future__ import annotations

import logging
from typing import List, Optional

import typer
from pydantic import ValidationError

from backend.catalog_api.settings import VoodioSettings

from .supervisor import Supervisor

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

app = typer.Typer(
    help="Scan a movie directory into a catalog and serve it over HTTP.",
    add_completion=False,
)


def configure_logging(level: str) -> None:
    """Configure root logging for the launcher process."""

    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=True,
    )


def build_supervisor(settings: VoodioSettings) -> Supervisor:
    """Create the supervisor for a run; patched in tests."""

    return Supervisor(settings)


@app.command()
def serve(
    path: Optional[str] = typer.Option(
        None, "--path", help="Path string of parent movie directory."
    ),
    port: Optional[int] = typer.Option(
        None, "--port", help="Server port number, 1818 when omitted."
    ),
    tmdb_key: Optional[str] = typer.Option(
        None,
        "--tmdb-key",
        help="Your TMDB API key, see https://www.themoviedb.org/documentation/api",
    ),
    resolutions: Optional[List[str]] = typer.Option(
        None,
        "--resolution",
        help=(
            "Specific resolution to be processed: 360p, 480p, 720p and 1080p. "
            "Repeat the option to request several."
        ),
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level such as DEBUG or INFO."
    ),
) -> None:
    """Scan PATH, build the catalog and serve it until interrupted."""

    overrides: dict[str, object] = {}
    if path is not None:
        overrides["movie_path"] = path
    if port is not None:
        overrides["port"] = port
    if tmdb_key is not None:
        overrides["tmdb_api_key"] = tmdb_key
    if resolutions:
        overrides["screen_resolutions"] = resolutions
    if log_level is not None:
        overrides["log_level"] = log_level

    try:
        settings = VoodioSettings(**overrides)
    except ValidationError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    configure_logging(settings.log_level)
    exit_code = build_supervisor(settings).run()
    if exit_code:
        raise typer.Exit(code=exit_code)
