"""Uvicorn-backed HTTP server with an explicit shutdown handshake."""
from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
from typing import Iterator

import uvicorn

from backend.ingest.errors import ServiceError, ShutdownTimeout

from ..app import create_app
from ..state import ServerConfig

logger = logging.getLogger(__name__)


class _UvicornServer(uvicorn.Server):
    """Uvicorn server that leaves interrupt handling to the launcher."""

    def install_signal_handlers(self) -> None:  # uvicorn < 0.29
        return None

    @contextmanager
    def capture_signals(self) -> Iterator[None]:  # uvicorn >= 0.29
        yield


class CatalogServer:
    """Serve the catalog API and stop it on request within a deadline."""

    def __init__(self, config: ServerConfig) -> None:
        self.config = config
        self.app = create_app(config)
        self._uvicorn_config = uvicorn.Config(
            self.app,
            host=config.host,
            port=config.port,
            log_config=None,
        )
        self._keep_alive_timeout = self._uvicorn_config.timeout_keep_alive
        self._server = _UvicornServer(self._uvicorn_config)
        self._lock = threading.Lock()
        self._stopped = threading.Event()
        self._stopped.set()

    @property
    def started(self) -> bool:
        """Whether the server has bound its socket and is accepting connections."""

        return bool(self._server.started)

    def listen_and_serve(self) -> None:
        """Bind and serve until shutdown completes.

        Returns normally once the server was asked to stop; raises
        :class:`ServiceError` when binding fails or the serve loop crashes.
        """

        with self._lock:
            self._stopped.clear()
        try:
            self._server.run()
        except SystemExit as exc:
            # uvicorn exits the interpreter when the socket cannot be bound.
            raise ServiceError(f"Unable to start server on port {self.config.port}") from exc
        except Exception as exc:
            raise ServiceError(f"Server loop failed: {exc}") from exc
        finally:
            self._stopped.set()

        if not self._server.started and not self._server.should_exit:
            raise ServiceError(f"Unable to start server on port {self.config.port}")

    def set_keep_alives_enabled(self, enabled: bool) -> None:
        """Toggle HTTP keep-alive for connections accepted from now on."""

        self._uvicorn_config.timeout_keep_alive = self._keep_alive_timeout if enabled else 0

    def shutdown(self, timeout: float) -> None:
        """Ask the server to stop and wait up to ``timeout`` seconds for it.

        On timeout the remaining connections are force-closed and
        :class:`ShutdownTimeout` is raised.
        """

        with self._lock:
            self._server.should_exit = True
        if self._stopped.wait(timeout):
            return
        self._server.force_exit = True
        raise ShutdownTimeout(f"Server did not stop within {timeout:g} seconds")
