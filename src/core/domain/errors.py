"""Taxonomía de errores del servidor de documentación.

Reglas:
- Todo fallo que `serve` puede reportar es un `DocServeError`; la CLI captura
  esa base, imprime el mensaje y sale con código distinto de cero.
- Los adaptadores traducen las excepciones de librerías a la subclase
  correspondiente con `raise ... from`.
"""

from __future__ import annotations


class DocServeError(Exception):
    """Base de todos los errores de docserve."""


class LoadError(DocServeError):
    """No se pudo leer o parsear el documento de la spec."""


class ExpansionError(DocServeError):
    """La expansión de referencias (`--flatten`) no pudo completarse."""


class SerializationError(DocServeError):
    """El documento en memoria no se pudo codificar como JSON."""


class BindError(DocServeError):
    """No se pudo crear el socket de escucha."""


class ServeError(DocServeError):
    """El bucle del servidor HTTP terminó con error."""


class BrowserLaunchError(DocServeError):
    """No se pudo abrir la URL de visita en un navegador."""
