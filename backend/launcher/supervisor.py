"""Process supervisor: build the catalog, serve it, and shut down on interrupt."""
from __future__ import annotations

from enum import Enum
import logging
import shutil
import signal
import threading
from typing import Callable, Protocol

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from backend.catalog_api.db import create_catalog_engine, init_database
from backend.catalog_api.services.server import CatalogServer
from backend.catalog_api.settings import VoodioSettings
from backend.catalog_api.state import ServerConfig
from backend.catalog_api.stores.catalog_store import CatalogStore
from backend.ingest import (
    ServiceError,
    SetupError,
    VoodioError,
    detect_groups,
    ingest,
    scan_directory,
)

from .network import server_urls
from .workdir import AppDirectory

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    """Stages the supervisor moves through during one process lifetime."""

    IDLE = "idle"
    STARTING = "starting"
    SERVING = "serving"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"
    ABORTED = "aborted"


class Server(Protocol):
    """Contract the supervisor needs from the HTTP service."""

    def listen_and_serve(self) -> None: ...

    def set_keep_alives_enabled(self, enabled: bool) -> None: ...

    def shutdown(self, timeout: float) -> None: ...


ServerFactory = Callable[[ServerConfig], Server]


class Supervisor:
    """Own the working directory and the HTTP service for one run.

    Setup runs sequentially on the calling thread. Once serving, a background
    thread waits for the interrupt, stops the server within
    ``settings.shutdown_timeout`` and reports completion through a one-shot
    event the calling thread blocks on before removing the working directory.
    """

    def __init__(
        self,
        settings: VoodioSettings,
        *,
        server_factory: ServerFactory = CatalogServer,
        app_dir: AppDirectory | None = None,
    ) -> None:
        self.settings = settings
        self.app_dir = app_dir or AppDirectory(settings.cache_dir)
        self._server_factory = server_factory
        self._engine: Engine | None = None
        self._interrupted = threading.Event()
        self._shutdown_done = threading.Event()
        self.state = LifecycleState.IDLE

    def interrupt(self) -> None:
        """Request shutdown; only the first request has an effect."""

        self._interrupted.set()

    def run(self) -> int:
        """Run the whole lifecycle and return the process exit code."""

        try:
            try:
                server = self._start()
            except VoodioError as exc:
                self.state = LifecycleState.ABORTED
                logger.error("%s", exc)
                return 1
            self._serve(server)
            return 0
        finally:
            if self._engine is not None:
                self._engine.dispose()
            self.app_dir.cleanup()
            if self.state in (LifecycleState.IDLE, LifecycleState.STARTING):
                self.state = LifecycleState.ABORTED
            elif self.state is not LifecycleState.ABORTED:
                self.state = LifecycleState.STOPPED
                logger.info("Server closed")

    def _validate(self) -> None:
        settings = self.settings
        if not settings.movie_path.strip():
            raise SetupError("No movie path directory provided, exited")
        if settings.require_ffmpeg and shutil.which("ffmpeg") is None:
            raise SetupError("ffmpeg was not found on PATH, install ffmpeg first")
        if not settings.tmdb_api_key.strip():
            raise SetupError("No TMDB Api Key provided, exited")

    def _start(self) -> Server:
        self._validate()
        db_path = self.app_dir.prepare()

        self.state = LifecycleState.STARTING
        engine = create_catalog_engine(db_path, echo=self.settings.database_echo)
        self._engine = engine
        logger.info("Preparing database...")
        try:
            init_database(engine)
        except SQLAlchemyError as exc:
            raise SetupError(f"Unable to create DB connection: {exc}") from exc
        logger.info("Database prepared")

        logger.info("Scanning movies...")
        scanned = scan_directory(self.settings.movie_path)
        logger.info("Scanning movies finished")

        store = CatalogStore(engine)
        ingest(store, scanned.movies, scanned.subtitles)
        detect_groups(store)

        return self._server_factory(
            ServerConfig(
                engine=engine,
                port=self.settings.port,
                app_dir=str(self.app_dir.path),
                tmdb_api_key=self.settings.tmdb_api_key,
                screen_resolutions=list(self.settings.screen_resolutions),
                host=self.settings.host,
            )
        )

    def _serve(self, server: Server) -> None:
        previous_handler = self._install_interrupt_handler()
        watcher = threading.Thread(
            target=self._watch_interrupt,
            args=(server,),
            name="voodio-shutdown",
            daemon=True,
        )
        watcher.start()

        self.state = LifecycleState.SERVING
        logger.info("Activate API Server")
        for url in server_urls(self.settings.port):
            logger.info(url)
        try:
            server.listen_and_serve()
        except ServiceError as exc:
            logger.error("Unable to serve on port %d: %s", self.settings.port, exc)

        try:
            self._shutdown_done.wait()
        finally:
            if previous_handler is not None:
                signal.signal(signal.SIGINT, previous_handler)

    def _watch_interrupt(self, server: Server) -> None:
        self._interrupted.wait()
        self.state = LifecycleState.SHUTTING_DOWN
        logger.info("Shutting down...")
        try:
            server.set_keep_alives_enabled(False)
            server.shutdown(self.settings.shutdown_timeout)
        except ServiceError as exc:
            logger.error("Couldn't gracefully shutdown: %s", exc)
        finally:
            self._shutdown_done.set()

    def _install_interrupt_handler(self):
        """Route SIGINT to :meth:`interrupt` when running on the main thread."""

        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread; interrupt handler not installed")
            return None

        def _handler(signum: int, _frame) -> None:
            self.interrupt()

        return signal.signal(signal.SIGINT, _handler)
