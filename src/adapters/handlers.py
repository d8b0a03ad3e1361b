"""Capas HTTP de la cadena de handlers.

Cada capa atiende su ruta exacta o delega en la siguiente:

    CORS -> swagger.json -> UI (redoc | swagger-ui) -> 404

Las páginas HTML se renderizan con Jinja2 una sola vez, al construir la capa;
a partir de ahí todo es de solo lectura y puede compartirse entre hilos.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.domain.models import RedocUI, SwaggerUI
from core.interfaces.http import Handler, Request, Response

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_HTML = "text/html; charset=utf-8"


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )


def render_redoc_page(ui: RedocUI) -> str:
    template = _get_env().get_template("redoc.html")
    return template.render(title=ui.title, spec_url=ui.spec_url, redoc_url=ui.redoc_url)


def render_swagger_page(ui: SwaggerUI) -> str:
    template = _get_env().get_template("swagger_ui.html")
    return template.render(title=ui.title, spec_url=ui.spec_url, assets=ui.assets)


class NotFoundHandler:
    def __call__(self, request: Request) -> Response:
        return Response(
            status=404,
            body=b"404 page not found\n",
            headers={"Content-Type": "text/plain; charset=utf-8"},
        )


class StaticPageHandler:
    """Sirve `body` en `path`; cualquier otra ruta va a `next_handler`."""

    def __init__(self, *, path: str, body: bytes, content_type: str, next_handler: Handler) -> None:
        self.path = path
        self._body = body
        self._content_type = content_type
        self._next = next_handler

    def __call__(self, request: Request) -> Response:
        if request.path != self.path:
            return self._next(request)
        return Response(status=200, body=self._body, headers={"Content-Type": self._content_type})


class SpecDocumentHandler(StaticPageHandler):
    """Sirve los bytes canónicos de la spec en `<base>/swagger.json`."""

    def __init__(self, *, path: str, document: bytes, next_handler: Handler) -> None:
        super().__init__(
            path=path,
            body=document,
            content_type="application/json",
            next_handler=next_handler,
        )


class RedocHandler(StaticPageHandler):
    def __init__(self, ui: RedocUI, next_handler: Handler) -> None:
        super().__init__(
            path=ui.path,
            body=render_redoc_page(ui).encode("utf-8"),
            content_type=_HTML,
            next_handler=next_handler,
        )


class SwaggerUIHandler(StaticPageHandler):
    def __init__(self, ui: SwaggerUI, next_handler: Handler) -> None:
        super().__init__(
            path=ui.path,
            body=render_swagger_page(ui).encode("utf-8"),
            content_type=_HTML,
            next_handler=next_handler,
        )


class CORSHandler:
    """Capa CORS permisiva (cualquier origen).

    - Peticiones con `Origin` reciben `Access-Control-Allow-Origin: *`.
    - Los preflight `OPTIONS` se contestan aquí sin llegar a la cadena.
    """

    allowed_methods = ("GET", "HEAD", "POST")
    allowed_headers = ("Accept", "Accept-Language", "Content-Language", "Origin")

    def __init__(self, next_handler: Handler) -> None:
        self._next = next_handler

    def _is_preflight(self, request: Request) -> bool:
        return (
            request.method == "OPTIONS"
            and request.header("Origin") is not None
            and request.header("Access-Control-Request-Method") is not None
        )

    def _preflight(self, request: Request) -> Response:
        wanted = (request.header("Access-Control-Request-Method") or "").upper()
        if wanted not in self.allowed_methods:
            return Response(status=405)

        headers = {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": wanted,
        }
        requested = request.header("Access-Control-Request-Headers")
        if requested:
            allowed = {h.lower() for h in self.allowed_headers}
            names = [h.strip() for h in requested.split(",") if h.strip()]
            if any(name.lower() not in allowed for name in names):
                return Response(status=403)
            headers["Access-Control-Allow-Headers"] = ", ".join(names)
        return Response(status=200, headers=headers)

    def __call__(self, request: Request) -> Response:
        if self._is_preflight(request):
            return self._preflight(request)

        response = self._next(request)
        if request.header("Origin") is not None:
            response.headers["Access-Control-Allow-Origin"] = "*"
        return response
