"""Apertura de la visit URL en el navegador del sistema (módulo `webbrowser`)."""

from __future__ import annotations

import logging
import webbrowser

from core.domain.errors import BrowserLaunchError

logger = logging.getLogger(__name__)


class SystemBrowserLauncher:
    """Abre URLs con el navegador por defecto del sistema operativo."""

    def open(self, url: str) -> None:
        if not url:
            raise BrowserLaunchError("no URL to open")
        try:
            opened = webbrowser.open(url)
        except webbrowser.Error as exc:
            raise BrowserLaunchError(f"cannot open {url}: {exc}") from exc
        if not opened:
            raise BrowserLaunchError(f"cannot open {url}: no usable browser found")
        logger.debug("opened %s in the default browser", url)


def browser_available() -> tuple[bool, str]:
    """Comprueba (sin abrir nada) si hay un navegador registrado."""

    try:
        controller = webbrowser.get()
    except webbrowser.Error as exc:
        return False, str(exc)
    return True, getattr(controller, "name", None) or type(controller).__name__
