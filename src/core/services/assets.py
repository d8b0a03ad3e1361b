"""Prefijos de assets de la UI y utilidades de rutas URL.

Reglas:
- Un override explícito (`-S/--source_url`) gana siempre y vale para
  cualquier flavor.
- Sin override, cada flavor usa su CDN por defecto.
- No se valida que el prefijo sea alcanzable: un prefijo roto solo produce
  enlaces rotos en la página.
"""

from __future__ import annotations

import posixpath

from core.domain.models import Flavor, SwaggerAssets

DEFAULT_SWAGGER_ASSET_PREFIX = "https://unpkg.com/swagger-ui-dist"
DEFAULT_REDOC_ASSET_PREFIX = "https://cdn.jsdelivr.net/npm/redoc/bundles"

REDOC_BUNDLE = "redoc.standalone.js"
SWAGGER_BUNDLE = "swagger-ui-bundle.js"
SWAGGER_PRESET = "swagger-ui-standalone-preset.js"
SWAGGER_STYLES = "swagger-ui.css"
SWAGGER_FAVICON_16 = "favicon-16x16.png"
SWAGGER_FAVICON_32 = "favicon-32x32.png"

_DEFAULT_PREFIXES: dict[Flavor, str] = {
    Flavor.REDOC: DEFAULT_REDOC_ASSET_PREFIX,
    Flavor.SWAGGER: DEFAULT_SWAGGER_ASSET_PREFIX,
}


def resolve_asset_prefix(override: str | None, flavor: Flavor) -> str:
    if override:
        return override
    return _DEFAULT_PREFIXES[flavor]


def asset_url(prefix: str, filename: str) -> str:
    """Une prefijo y nombre de fichero con una sola `/`."""

    return f"{prefix.rstrip('/')}/{filename}"


def build_swagger_assets(prefix: str) -> SwaggerAssets:
    return SwaggerAssets(
        bundle_url=asset_url(prefix, SWAGGER_BUNDLE),
        preset_url=asset_url(prefix, SWAGGER_PRESET),
        styles_url=asset_url(prefix, SWAGGER_STYLES),
        favicon16_url=asset_url(prefix, SWAGGER_FAVICON_16),
        favicon32_url=asset_url(prefix, SWAGGER_FAVICON_32),
    )


def join_url_path(*parts: str) -> str:
    """Une segmentos de ruta y limpia `//`, `.` y `..`.

    `join_url_path("/", "swagger.json") == "/swagger.json"`,
    `join_url_path("/api", "/docs") == "/api/docs"`.
    """

    joined = "/".join(part for part in parts if part)
    if not joined:
        return ""
    cleaned = posixpath.normpath(joined)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned
