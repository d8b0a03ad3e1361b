"""Creación del listener TCP4 y resolución de la dirección visible.

Por qué separado del servidor:
- El socket se liga antes de componer los handlers: la visit URL necesita el
  puerto real cuando se pidió el 0.
- `display_host` es cosmético; nunca cambia la dirección a la que se liga.
"""

from __future__ import annotations

import logging
import socket

from core.domain.errors import BindError
from core.domain.models import ResolvedAddress

logger = logging.getLogger(__name__)

WILDCARD_HOST = "0.0.0.0"
_LISTEN_BACKLOG = 128


def display_host_for(bound_host: str) -> str:
    return "localhost" if bound_host == WILDCARD_HOST else bound_host


def bind_listener(host: str, port: int) -> tuple[socket.socket, ResolvedAddress]:
    """Liga un socket TCP4 en `host:port` y devuelve `(listener, dirección)`.

    Lanza `BindError` si el host no resuelve, el puerto está ocupado o faltan
    privilegios.
    """

    host = host.strip() or WILDCARD_HOST
    try:
        infos = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as exc:
        raise BindError(f"cannot resolve host {host!r}: {exc}") from exc
    if not infos:
        raise BindError(f"cannot resolve host {host!r}")
    sockaddr = infos[0][4]

    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.bind(sockaddr)
        listener.listen(_LISTEN_BACKLOG)
    except OSError as exc:
        listener.close()
        raise BindError(f"listen tcp4 {host}:{port}: {exc.strerror or exc}") from exc

    bound_host, bound_port = listener.getsockname()[:2]
    address = ResolvedAddress(
        bound_host=bound_host,
        bound_port=bound_port,
        display_host=display_host_for(bound_host),
    )
    logger.debug("listening on %s:%d", bound_host, bound_port)
    return listener, address
