"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los valores de configuración quedan inmutables (`frozen`) una vez parseados.

Nota:
- Estos modelos describen *qué* se sirve, no *cómo* se sirve.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core.interfaces.http import Handler


class Flavor(str, Enum):
    """Renderers disponibles para la UI de documentación."""

    REDOC = "redoc"
    SWAGGER = "swagger"

    def label(self) -> str:
        return "ReDoc" if self is Flavor.REDOC else "Swagger UI"


class ServeConfig(BaseModel):
    """Opciones del comando `serve`, validadas e inmutables."""

    model_config = ConfigDict(frozen=True)

    base_path: str = Field(
        default="/",
        description="Prefijo de ruta bajo el que se montan la spec y la UI.",
    )
    flavor: Flavor = Field(
        default=Flavor.REDOC,
        description="Renderer de la UI (redoc o swagger).",
    )
    doc_url: str | None = Field(
        default=None,
        description="URL explícita de la UI; es la visit URL cuando no hay UI propia.",
    )
    no_open: bool = Field(default=False, description="No abrir el navegador.")
    no_ui: bool = Field(default=False, description="Servir solo la spec, sin UI.")
    flatten: bool = Field(default=False, description="Expandir $ref antes de servir.")
    host: str = Field(default="0.0.0.0", description="Interfaz donde escuchar.")
    port: int = Field(default=0, ge=0, le=65535, description="Puerto; 0 = cualquiera libre.")
    ui_path: str = Field(
        default="docs",
        min_length=1,
        description="Segmento de ruta de la UI bajo `base_path`.",
    )
    source_url: str | None = Field(
        default=None,
        description="Prefijo que reemplaza al CDN por defecto de los assets de la UI.",
    )

    @field_validator("base_path")
    @classmethod
    def _default_base_path(cls, value: str) -> str:
        value = value.strip()
        if not value:
            return "/"
        if not value.startswith("/"):
            return "/" + value
        return value

    @field_validator("doc_url", "source_url")
    @classmethod
    def _empty_as_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class ResolvedAddress(BaseModel):
    """Dirección efectiva del listener, calculada una sola vez tras el bind."""

    model_config = ConfigDict(frozen=True)

    bound_host: str = Field(..., description="IP a la que quedó ligado el socket.")
    bound_port: int = Field(..., ge=1, le=65535, description="Puerto real (ya resuelto si se pidió 0).")
    display_host: str = Field(..., description="Host para URLs visibles (`localhost` si se ligó a 0.0.0.0).")

    def url(self, path: str = "/") -> str:
        return f"http://{self.display_host}:{self.bound_port}{path}"


class SpecDocument(BaseModel):
    """Especificación cargada en memoria, junto a su ubicación canónica.

    `location` es una ruta absoluta o una URL; sirve de base para resolver
    referencias relativas durante el flatten.
    """

    location: str = Field(..., min_length=1)
    content: dict[str, Any] = Field(default_factory=dict)

    @property
    def title(self) -> str | None:
        info = self.content.get("info")
        if isinstance(info, dict) and isinstance(info.get("title"), str):
            return info["title"].strip() or None
        return None


class SwaggerAssets(BaseModel):
    """URLs completas de los cinco assets que necesita Swagger UI."""

    model_config = ConfigDict(frozen=True)

    bundle_url: str
    preset_url: str
    styles_url: str
    favicon16_url: str
    favicon32_url: str

    def all_urls(self) -> list[str]:
        return [
            self.bundle_url,
            self.preset_url,
            self.styles_url,
            self.favicon16_url,
            self.favicon32_url,
        ]


class NoUI(BaseModel):
    """Solo se sirve el documento crudo."""

    model_config = ConfigDict(frozen=True)


class RedocUI(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    spec_url: str
    redoc_url: str
    title: str


class SwaggerUI(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    spec_url: str
    assets: SwaggerAssets
    title: str


UIVariant = Union[NoUI, RedocUI, SwaggerUI]


@dataclass(frozen=True)
class HandlerPlan:
    """Resultado del composer: cadena de handlers + URL a visitar.

    `visit_url` queda vacío cuando no hay UI que abrir.
    """

    handler: Handler
    visit_url: str
    spec_path: str
    ui: UIVariant
