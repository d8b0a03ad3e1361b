"""Contrato del lanzador de navegador.

Por qué Protocol:
- La CLI usa el navegador del sistema, los tests un doble que solo registra
  la URL; el pipeline no necesita saber cuál recibe.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BrowserLauncher(Protocol):
    def open(self, url: str) -> None:
        """Abre `url`; lanza `BrowserLaunchError` si no es posible."""

        ...
