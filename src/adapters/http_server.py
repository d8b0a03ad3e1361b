"""Servidor HTTP sobre un listener ya ligado.

Diseño:
- `ThreadingHTTPServer` de la stdlib, un hilo por conexión, HTTP/1.1 con
  keep-alive.
- El bucle `serve_forever` corre en su propio hilo; su resultado se entrega
  una única vez a través de un `concurrent.futures.Future`.
- Un fallo dentro de un handler no tumba el servidor: se registra y se
  responde 500.
"""

from __future__ import annotations

import errno
import logging
import socket
import threading
from concurrent.futures import Future
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import unquote, urlsplit

from core.domain.errors import ServeError
from core.interfaces.http import Handler, Request, Response

logger = logging.getLogger(__name__)

# Fallos de accept() tras los que el listener sigue siendo válido.
_TRANSIENT_ACCEPT_ERRNOS = frozenset(
    {
        errno.EAGAIN,
        errno.EINTR,
        errno.ECONNABORTED,
        errno.EMFILE,
        errno.ENFILE,
        errno.ENOBUFS,
        errno.ENOMEM,
        errno.EPROTO,
    }
)


class _RequestHandler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"
    server: "DocsHTTPServer"

    def _drain_body(self) -> None:
        # Con keep-alive, un cuerpo sin leer se parsearía como la siguiente petición.
        if self.headers.get("Transfer-Encoding"):
            # Cuerpos chunked: no se leen; se cierra la conexión tras responder.
            self.close_connection = True
            return
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            length = 0
        if length > 0:
            self.rfile.read(length)

    def _dispatch(self) -> None:
        self._drain_body()
        request = Request(
            method=self.command,
            path=unquote(urlsplit(self.path).path) or "/",
            headers={key: value for key, value in self.headers.items()},
        )
        try:
            response = self.server.app(request)
        except Exception:
            logger.exception("handler failed for %s %s", request.method, request.path)
            response = Response(
                status=500,
                body=b"500 internal server error\n",
                headers={"Content-Type": "text/plain; charset=utf-8"},
            )
        self._write(response)

    def _write(self, response: Response) -> None:
        self.send_response(response.status)
        for key, value in response.headers.items():
            self.send_header(key, value)
        self.send_header("Content-Length", str(len(response.body)))
        if self.close_connection:
            self.send_header("Connection", "close")
        self.end_headers()
        if self.command != "HEAD" and response.body:
            self.wfile.write(response.body)

    do_GET = _dispatch
    do_HEAD = _dispatch
    do_POST = _dispatch
    do_OPTIONS = _dispatch

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)


class DocsHTTPServer(ThreadingHTTPServer):
    """`ThreadingHTTPServer` que adopta un socket ya ligado y escuchando."""

    daemon_threads = True

    def __init__(self, listener: socket.socket, app: Handler) -> None:
        super().__init__(listener.getsockname()[:2], _RequestHandler, bind_and_activate=False)
        self.socket.close()
        self.socket = listener
        self.server_address = listener.getsockname()[:2]
        self.app = app
        self._listener_error: OSError | None = None

    def get_request(self) -> tuple[socket.socket, tuple[str, int]]:
        try:
            return super().get_request()
        except OSError as exc:
            if exc.errno not in _TRANSIENT_ACCEPT_ERRNOS:
                self._listener_error = exc
            raise

    def service_actions(self) -> None:
        """Corta `serve_forever` si el listener quedó inservible.

        `socketserver` descarta los `OSError` de `accept()`; sin esta
        comprobación un listener cerrado deja el bucle girando sin fin.
        """

        super().service_actions()
        if self._listener_error is None and self.socket.fileno() == -1:
            self._listener_error = OSError(errno.EBADF, "use of closed network connection")
        if self._listener_error is not None:
            raise self._listener_error

    def handle_error(self, request: object, client_address: tuple[str, int]) -> None:
        logger.exception("error while serving %s", client_address)


class ServerHandle:
    """Acceso al servidor en marcha: esperar su resultado o pararlo."""

    def __init__(self, server: DocsHTTPServer, thread: threading.Thread, outcome: Future[None]) -> None:
        self.server = server
        self._thread = thread
        self._outcome = outcome

    @property
    def address(self) -> tuple[str, int]:
        host, port = self.server.server_address[:2]
        return str(host), int(port)

    @property
    def running(self) -> bool:
        return not self._outcome.done()

    def wait(self, timeout: float | None = None) -> None:
        """Bloquea hasta que termine el bucle; relanza su `ServeError`."""

        self._outcome.result(timeout=timeout)

    def shutdown(self) -> None:
        if self._outcome.done():
            return
        self.server.shutdown()
        self._thread.join()


def _serve(server: DocsHTTPServer, outcome: Future[None]) -> None:
    try:
        server.serve_forever()
    except Exception as exc:
        error = ServeError(f"serve: {exc}")
        error.__cause__ = exc
        outcome.set_exception(error)
    else:
        outcome.set_result(None)
    finally:
        server.server_close()


def start_server(listener: socket.socket, app: Handler) -> ServerHandle:
    """Arranca el servidor en un hilo aparte y devuelve su `ServerHandle`."""

    server = DocsHTTPServer(listener, app)
    outcome: Future[None] = Future()
    thread = threading.Thread(
        target=_serve,
        args=(server, outcome),
        name="docserve-http",
        daemon=True,
    )
    thread.start()
    return ServerHandle(server, thread, outcome)
