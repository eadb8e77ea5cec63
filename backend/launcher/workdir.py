"""Process-owned working directory holding the catalog database."""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from types import TracebackType

from platformdirs import user_cache_dir

from backend.ingest.errors import SetupError

logger = logging.getLogger(__name__)

APP_DIR_NAME = "voodioapp"
DB_FILE_NAME = "voodio.db"


def default_cache_root() -> Path:
    """Return the platform user-cache root."""

    return Path(user_cache_dir())


class AppDirectory:
    """Create the working directory on entry and remove it on every exit path."""

    def __init__(self, cache_root: str | Path | None = None) -> None:
        root = Path(cache_root).expanduser() if cache_root else default_cache_root()
        self.path = root / APP_DIR_NAME

    @property
    def db_path(self) -> Path:
        return self.path / DB_FILE_NAME

    def prepare(self) -> Path:
        """Create the directory and an empty database file, dropping any previous one."""

        if not self.path.exists():
            try:
                self.path.mkdir(mode=0o777, parents=True)
            except OSError as exc:
                raise SetupError(f"Unable to create App Dir on {self.path}") from exc
            logger.info("Created App dir at %s", self.path)

        if self.db_path.exists():
            logger.info("Obsolete DB detected, removing...")
            try:
                self.db_path.unlink()
            except OSError as exc:
                raise SetupError("Unable removing obsolete DB") from exc

        try:
            self.db_path.touch()
        except OSError as exc:
            raise SetupError(f"Unable to init db file at {self.db_path}") from exc

        logger.info("DB initialized at %s", self.db_path)
        return self.db_path

    def cleanup(self) -> None:
        """Remove the working directory tree including the database."""

        logger.info("Cleaning up artifacts")
        try:
            shutil.rmtree(self.path)
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("Unable to remove %s: %s", self.path, exc)

    def __enter__(self) -> AppDirectory:
        self.prepare()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()
