"""Loopback HTTP server for previewing a generated site.

Built on :class:`http.server.ThreadingHTTPServer`, so each connection runs on
its own thread. GET and HEAD are answered by :class:`StaticFileHandler`;
every other method receives 405. A connection stays open only when the
client sends ``Connection: keep-alive`` and the response allows it.

Examples
--------
>>> from pathlib import Path
>>> server = PreviewServer(Path("site"), port=0)  # doctest: +SKIP
>>> server.url  # doctest: +SKIP
'http://127.0.0.1:54321/'
>>> server.serve_forever()  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import threading
import typing as typ
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from archive_pages._constants import DEFAULT_PORT
from archive_pages.server.handler import StaticFileHandler
from archive_pages.server.response import HTTPResponse

if typ.TYPE_CHECKING:
    from pathlib import Path

LOOPBACK_HOST = "127.0.0.1"


class PreviewRequestHandler(BaseHTTPRequestHandler):
    """Translate one HTTP exchange into a :class:`StaticFileHandler` call."""

    protocol_version = "HTTP/1.1"
    server: _PreviewHTTPServer

    def do_GET(self) -> None:  # noqa: N802
        """Serve a file with its body."""
        self._send(self.server.file_handler.handle_request(self.path))

    def do_HEAD(self) -> None:  # noqa: N802
        """Serve a file's headers only."""
        self._send(
            self.server.file_handler.handle_request(self.path, include_body=False)
        )

    def __getattr__(self, name: str) -> typ.Callable[[], None]:
        # ``BaseHTTPRequestHandler`` looks up ``do_<METHOD>``; anything
        # beyond GET and HEAD is refused without touching the filesystem.
        if name.startswith("do_"):
            return self._method_not_allowed
        raise AttributeError(name)

    def _method_not_allowed(self) -> None:
        self._send(HTTPResponse.method_not_allowed())

    def _wants_keep_alive(self) -> bool:
        header = self.headers.get("Connection", "") if self.headers else ""
        return "keep-alive" in header.lower()

    def _send(self, response: HTTPResponse) -> None:
        keep_alive = response.keep_alive_allowed and self._wants_keep_alive()
        self.send_response(response.status)
        for name, value in response.headers.items():
            if name != "connection":
                self.send_header(name, value)
        self.send_header("connection", "keep-alive" if keep_alive else "close")
        self.end_headers()
        if response.body:
            self.wfile.write(response.body)
        self.close_connection = not keep_alive

    def log_message(self, format: str, *args: typ.Any) -> None:  # noqa: A002
        """Route access logs through the server's logger."""
        self.server.logger.debug(
            "%s - %s", self.address_string(), format % args
        )

    def log_error(self, format: str, *args: typ.Any) -> None:  # noqa: A002
        """Route protocol errors through the server's logger."""
        self.server.logger.warning(
            "%s - %s", self.address_string(), format % args
        )


class _PreviewHTTPServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(
        self,
        address: tuple[str, int],
        file_handler: StaticFileHandler,
        logger: logging.Logger,
    ) -> None:
        self.file_handler = file_handler
        self.logger = logger
        super().__init__(address, PreviewRequestHandler)

    def handle_error(self, request: typ.Any, client_address: typ.Any) -> None:  # noqa: ANN401
        """Log a failed connection without disturbing the accept loop."""
        self.logger.exception("error while serving %s", client_address)


class PreviewServer:
    """Serve ``root`` on ``127.0.0.1``.

    Parameters
    ----------
    root : Path
        Directory to serve, normally the generated site.
    port : int
        TCP port; ``0`` picks a free one, readable from :attr:`port`.
    logger : logging.Logger, optional
        Destination for access and error logs.
    """

    def __init__(
        self,
        root: Path,
        *,
        port: int = DEFAULT_PORT,
        logger: logging.Logger | None = None,
    ) -> None:
        self.root = root
        self.logger = logger or logging.getLogger(__name__)
        self._server = _PreviewHTTPServer(
            (LOOPBACK_HOST, port), StaticFileHandler(root), self.logger
        )
        self._thread: threading.Thread | None = None
        self._running = threading.Event()

    @property
    def host(self) -> str:
        """Return the bound address."""
        return str(self._server.server_address[0])

    @property
    def port(self) -> int:
        """Return the bound port."""
        return int(self._server.server_address[1])

    @property
    def url(self) -> str:
        """Return the base URL of the preview."""
        return f"http://{self.host}:{self.port}/"

    def serve_forever(self) -> None:
        """Accept connections until :meth:`shutdown` is called."""
        self.logger.info("serving %s at %s", self.root, self.url)
        self._running.set()
        try:
            self._server.serve_forever()
        finally:
            self._running.clear()

    def start(self) -> threading.Thread:
        """Serve on a background thread and return it."""
        self._thread = threading.Thread(
            target=self.serve_forever, name="archive-pages-preview", daemon=True
        )
        self._thread.start()
        return self._thread

    def shutdown(self) -> None:
        """Stop accepting connections and release the socket."""
        if self._running.is_set() or self._thread is not None:
            self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def __enter__(self) -> PreviewServer:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


__all__ = ["LOOPBACK_HOST", "PreviewRequestHandler", "PreviewServer"]
