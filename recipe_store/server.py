"""Start and stop a real HTTP server around the recipe application.

Test harnesses use :func:`run_server` before a suite and :func:`close_server`
after it. :class:`RecipeServer` can also be driven directly or used as a
context manager.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Optional

from flask import Flask
from werkzeug.serving import BaseWSGIServer, make_server

from . import create_app

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


class RecipeServer:
    """Threaded werkzeug server serving a Flask application in the background."""

    def __init__(self, app: Flask, *, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
        self.app = app
        self.host = host
        self._requested_port = port
        self._server: Optional[BaseWSGIServer] = None
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_env(
        cls, app: Flask, *, host: Optional[str] = None, port: Optional[int] = None
    ) -> "RecipeServer":
        """Build a server bound to ``RECIPES_HOST``/``RECIPES_PORT`` unless given explicitly."""

        if host is None:
            host = os.environ.get("RECIPES_HOST", DEFAULT_HOST)
        if port is None:
            port = int(os.environ.get("RECIPES_PORT", DEFAULT_PORT))
        return cls(app, host=host, port=port)

    @property
    def running(self) -> bool:
        return self._server is not None

    @property
    def port(self) -> int:
        if self._server is None:
            raise RuntimeError("Server is not running.")
        return self._server.server_port

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def start(self) -> "RecipeServer":
        """Bind the socket and start serving. Returns once the server is listening."""

        if self._server is not None:
            raise RuntimeError("Server is already running.")

        server = make_server(self.host, self._requested_port, self.app, threaded=True)
        thread = threading.Thread(
            target=server.serve_forever,
            name=f"recipe-server-{server.server_port}",
            daemon=True,
        )
        thread.start()

        self._server = server
        self._thread = thread
        logger.info("Recipe server listening on %s", self.url)
        return self

    def stop(self) -> None:
        """Stop serving and release the listening socket."""

        server, thread = self._server, self._thread
        if server is None:
            return

        server.shutdown()
        server.server_close()
        if thread is not None:
            thread.join()

        self._server = None
        self._thread = None
        logger.info("Recipe server on %s:%s stopped", self.host, server.server_port)

    def __enter__(self) -> "RecipeServer":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.stop()


_server: Optional[RecipeServer] = None
_server_lock = threading.Lock()


def run_server(
    app: Optional[Flask] = None,
    *,
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> RecipeServer:
    """Start the shared server, creating a seeded application when ``app`` is ``None``."""

    global _server

    with _server_lock:
        if _server is not None:
            raise RuntimeError("Server is already running; call close_server() first.")

        if app is None:
            app = create_app()

        _server = RecipeServer.from_env(app, host=host, port=port).start()
        return _server


def close_server() -> None:
    """Stop the shared server started by :func:`run_server`, if any."""

    global _server

    with _server_lock:
        if _server is None:
            return
        _server.stop()
        _server = None


__all__ = ["RecipeServer", "close_server", "run_server"]
