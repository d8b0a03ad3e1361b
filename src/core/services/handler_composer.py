"""Composición de la cadena de handlers y de la visit URL.

La decisión se toma una sola vez a partir de `(no_ui, flavor, doc_url)`:

- `no_ui` -> `NoUI`: solo la spec; la visit URL es `doc_url` (puede ser vacía).
- `redoc` -> `RedocUI` en `<base>/<ui_path>`; la visit URL apunta siempre a
  `<base>/docs`, aunque `ui_path` sea otro.
- `swagger` -> `SwaggerUI` en `<base>/<ui_path>`; la visit URL apunta a esa
  misma ruta.

En todos los casos `<base>/swagger.json` sirve los bytes del documento y la
cadena completa va envuelta en la capa CORS. Componer no puede fallar: los
errores aparecen al servir (404, 500) o al ligar el socket.
"""

from __future__ import annotations

from adapters.handlers import (
    CORSHandler,
    NotFoundHandler,
    RedocHandler,
    SpecDocumentHandler,
    SwaggerUIHandler,
)
from core.domain.models import (
    Flavor,
    HandlerPlan,
    NoUI,
    RedocUI,
    ResolvedAddress,
    ServeConfig,
    SwaggerUI,
    UIVariant,
)
from core.interfaces.http import Handler
from core.services.assets import (
    REDOC_BUNDLE,
    asset_url,
    build_swagger_assets,
    join_url_path,
    resolve_asset_prefix,
)

SPEC_FILENAME = "swagger.json"
DEFAULT_TITLE = "API documentation"

# Segmento fijo de la visit URL de ReDoc (no sigue a --path).
REDOC_VISIT_SEGMENT = "docs"


def spec_path_for(config: ServeConfig) -> str:
    return join_url_path(config.base_path, SPEC_FILENAME)


def select_ui(config: ServeConfig, *, title: str = DEFAULT_TITLE) -> UIVariant:
    """Elige la variante de UI; función pura de la configuración."""

    if config.no_ui:
        return NoUI()

    spec_url = spec_path_for(config)
    ui_route = join_url_path(config.base_path, config.ui_path)
    prefix = resolve_asset_prefix(config.source_url, config.flavor)

    if config.flavor is Flavor.REDOC:
        return RedocUI(
            path=ui_route,
            spec_url=spec_url,
            redoc_url=asset_url(prefix, REDOC_BUNDLE),
            title=title,
        )
    if config.doc_url or config.flavor is Flavor.SWAGGER:
        return SwaggerUI(
            path=ui_route,
            spec_url=spec_url,
            assets=build_swagger_assets(prefix),
            title=title,
        )
    return NoUI()


def visit_url_for(ui: UIVariant, config: ServeConfig, address: ResolvedAddress) -> str:
    if isinstance(ui, RedocUI):
        return address.url(join_url_path(config.base_path, REDOC_VISIT_SEGMENT))
    if isinstance(ui, SwaggerUI):
        return address.url(ui.path)
    return config.doc_url or ""


def build_handler(ui: UIVariant, *, spec_path: str, document: bytes) -> Handler:
    handler: Handler = NotFoundHandler()
    if isinstance(ui, RedocUI):
        handler = RedocHandler(ui, handler)
    elif isinstance(ui, SwaggerUI):
        handler = SwaggerUIHandler(ui, handler)

    handler = SpecDocumentHandler(path=spec_path, document=document, next_handler=handler)
    return CORSHandler(handler)


def compose_handlers(
    config: ServeConfig,
    address: ResolvedAddress,
    document: bytes,
    *,
    title: str | None = None,
) -> HandlerPlan:
    ui = select_ui(config, title=title or DEFAULT_TITLE)
    spec_path = spec_path_for(config)
    return HandlerPlan(
        handler=build_handler(ui, spec_path=spec_path, document=document),
        visit_url=visit_url_for(ui, config, address),
        spec_path=spec_path,
        ui=ui,
    )
