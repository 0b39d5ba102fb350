"""Liveness endpoint server."""

from __future__ import annotations

from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class LivenessHandler(BaseHTTPRequestHandler):
    """HTTP handler that answers GET /health with OK."""

    def do_GET(self) -> None:  # noqa: N802
        if self.path != "/health":
            self._not_found()
            return

        logger.debug("health check")
        body = b"OK"
        self.send_response(200)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_POST(self) -> None:  # noqa: N802
        self._not_found()

    do_PUT = do_POST
    do_DELETE = do_POST
    do_PATCH = do_POST
    do_HEAD = do_POST

    def _not_found(self) -> None:
        self.send_response(404)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)


class LivenessServer(ThreadingHTTPServer):
    """HTTP server exposing the liveness probe."""

    daemon_threads = True

    def __init__(self, host: str, port: int) -> None:
        super().__init__((host, port), LivenessHandler)
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Serve on a daemon thread."""
        self._thread = threading.Thread(target=self.serve_forever, name="healthscope-liveness", daemon=True)
        self._thread.start()
        logger.info("Health server is running on %s:%s", *self.server_address[:2])

    def stop(self) -> None:
        """Stop serving and close the socket."""
        self.shutdown()
        self.server_close()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
