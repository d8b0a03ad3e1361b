"""Carga de especificaciones (JSON o YAML, local o remota).

Reglas:
- Una fuente que empieza por `http://` o `https://` se descarga con httpx.
- Cualquier otra cosa es una ruta local; se normaliza a ruta absoluta para que
  las referencias relativas del flatten tengan una base estable.
- YAML se convierte a un árbol compatible con JSON: claves siempre `str`,
  fechas como ISO-8601.
"""

from __future__ import annotations

import datetime as dt
import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml

from adapters.http_client import build_client
from core.config import AppSettings
from core.domain.errors import LoadError
from core.domain.models import SpecDocument

logger = logging.getLogger(__name__)


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def normalize_location(source: str) -> str:
    """Devuelve la URL tal cual o la ruta absoluta (POSIX) del fichero."""

    source = source.strip()
    if is_url(source):
        return source
    return Path(source).expanduser().resolve().as_posix()


def _key_to_str(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def _to_json_compatible(value: Any) -> Any:
    if isinstance(value, dict):
        return {_key_to_str(k): _to_json_compatible(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_json_compatible(v) for v in value]
    if isinstance(value, (dt.datetime, dt.date)):
        return value.isoformat()
    return value


def parse_document(text: str, *, location: str) -> Any:
    """Parsea JSON y, si no lo es, YAML."""

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    try:
        return _to_json_compatible(yaml.safe_load(text))
    except yaml.YAMLError as exc:
        raise LoadError(f"{location}: not valid JSON or YAML ({exc})") from exc


def _read_text(location: str, *, settings: AppSettings, client: httpx.Client | None) -> str:
    if is_url(location):
        owned = client is None
        http = client or build_client(settings)
        try:
            response = http.get(location)
            response.raise_for_status()
            return response.text
        except httpx.HTTPError as exc:
            raise LoadError(f"{location}: {exc}") from exc
        finally:
            if owned:
                http.close()

    path = Path(location)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LoadError(f"{location}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise LoadError(f"{location}: not UTF-8 text") from exc


def load_raw(
    location: str,
    *,
    settings: AppSettings | None = None,
    client: httpx.Client | None = None,
) -> Any:
    """Lee y parsea un documento en `location` (ya normalizada)."""

    settings = settings or AppSettings()
    logger.debug("loading document %s", location)
    text = _read_text(location, settings=settings, client=client)
    return parse_document(text, location=location)


def load_spec(
    source: str,
    *,
    settings: AppSettings | None = None,
    client: httpx.Client | None = None,
) -> SpecDocument:
    """Carga la especificación raíz indicada por el usuario."""

    if not source or not source.strip():
        raise LoadError("specify the spec to serve as argument to the serve command")

    location = normalize_location(source)
    content = load_raw(location, settings=settings, client=client)
    if not isinstance(content, dict):
        raise LoadError(f"{location}: the document root must be an object")
    return SpecDocument(location=location, content=content)
