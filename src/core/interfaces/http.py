"""Contratos HTTP mínimos entre el Core y el servidor.

Por qué no usar directamente `http.server`:
- Los handlers se componen como capas (spec -> UI -> 404, envueltos en CORS)
  y deben poder probarse sin abrir sockets.
- El servidor (adapter) solo traduce peticiones reales a `Request` y
  escribe la `Response` devuelta.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Request:
    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)

    def header(self, name: str) -> str | None:
        """Busca una cabecera sin distinguir mayúsculas."""

        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


@dataclass
class Response:
    status: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class Handler(Protocol):
    """Una capa de la cadena: recibe la petición y siempre devuelve respuesta."""

    def __call__(self, request: Request) -> Response:
        ...
