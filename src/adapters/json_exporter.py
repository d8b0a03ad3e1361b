"""Serialización canónica de la especificación.

Por qué JSON con formato estable:
- El endpoint `swagger.json` debe devolver los mismos bytes en cada ejecución
  (claves ordenadas, indentación de dos espacios) para poder diffear salidas.
"""

from __future__ import annotations

import json
from typing import Any

from core.domain.errors import SerializationError


def render_spec_json(content: Any) -> bytes:
    """Serializa `content` a JSON UTF-8 con claves ordenadas e indent=2."""

    try:
        text = json.dumps(content, ensure_ascii=False, indent=2, sort_keys=True, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"cannot serialize the specification: {exc}") from exc
    return text.encode("utf-8")
