"""Orquestación del comando `serve`.

Este módulo encadena los pasos sin efectos de UI (nada de prints): la CLI
solo aporta hooks para mostrar el resumen y avisos. Así el flujo se puede
reutilizar desde tests u otros entry-points.

Orden y política de errores:
1. cargar la spec (`LoadError`)
2. expandir/serializar (`ExpansionError`, `SerializationError`)
3. ligar el socket (`BindError`)
4. componer handlers (no falla)
5. servir en otro hilo; abrir el navegador (`BrowserLaunchError`, fatal)
6. esperar el resultado del servidor (`ServeError`)
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass, field
from typing import Callable

import httpx

from adapters.http_server import ServerHandle, start_server
from adapters.network import bind_listener
from adapters.spec_loader import load_spec
from core.config import AppSettings
from core.domain.errors import BrowserLaunchError
from core.domain.models import HandlerPlan, ResolvedAddress, ServeConfig
from core.interfaces.browser import BrowserLauncher
from core.services.document_processor import process_document
from core.services.handler_composer import compose_handlers

logger = logging.getLogger(__name__)


@dataclass
class ServeHooks:
    """Callbacks opcionales para capas de UI."""

    warning: Callable[[str], None] | None = None
    started: Callable[["PreparedServer", ServerHandle], None] | None = None


@dataclass
class PreparedServer:
    """Todo lo necesario para servir, fijado antes de arrancar el hilo."""

    listener: socket.socket
    address: ResolvedAddress
    plan: HandlerPlan
    document: bytes
    warnings: list[str] = field(default_factory=list)

    @property
    def spec_url(self) -> str:
        return self.address.url(self.plan.spec_path)


def prepare_server(
    source: str,
    config: ServeConfig,
    *,
    settings: AppSettings | None = None,
    client: httpx.Client | None = None,
) -> PreparedServer:
    settings = settings or AppSettings()

    spec = load_spec(source, settings=settings, client=client)
    processed = process_document(spec, config.flatten, settings=settings)

    listener, address = bind_listener(config.host, config.port)
    plan = compose_handlers(config, address, processed.body, title=spec.title)
    return PreparedServer(
        listener=listener,
        address=address,
        plan=plan,
        document=processed.body,
        warnings=list(processed.warnings),
    )


def run_serve(
    source: str,
    config: ServeConfig,
    *,
    browser: BrowserLauncher,
    settings: AppSettings | None = None,
    hooks: ServeHooks | None = None,
) -> None:
    """Sirve la spec hasta que el servidor termine.

    Vuelve sin error si el servidor se detuvo con `shutdown()`; lanza
    `ServeError` si el bucle de servicio falló.
    """

    hooks = hooks or ServeHooks()
    prepared = prepare_server(source, config, settings=settings)
    for message in prepared.warnings:
        if hooks.warning:
            hooks.warning(message)

    handle = start_server(prepared.listener, prepared.plan.handler)
    if hooks.started:
        hooks.started(prepared, handle)

    visit = prepared.plan.visit_url
    if not config.no_open and not config.no_ui:
        try:
            browser.open(visit)
        except BrowserLaunchError:
            handle.shutdown()
            raise

    logger.info("serving docs at %s", visit or prepared.spec_url)
    try:
        handle.wait()
    except KeyboardInterrupt:
        handle.shutdown()
        raise
