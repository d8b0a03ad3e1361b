"""Preparación del documento servido en `swagger.json`.

Flujo:
- `flatten=False`: se serializa la spec tal como se cargó.
- `flatten=True`: se expanden las referencias con la política de
  `FLATTEN_OPTIONS` (best-effort, circulares absolutas) y luego se serializa.

El resultado son bytes inmutables que comparte toda la cadena de handlers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial

from adapters.json_exporter import render_spec_json
from adapters.ref_expander import FLATTEN_OPTIONS, ExpandOptions, Fetcher, RefExpander
from adapters.spec_loader import load_raw
from core.config import AppSettings
from core.domain.models import SpecDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessedDocument:
    """Bytes canónicos más los avisos que dejó la expansión (si hubo)."""

    body: bytes
    warnings: tuple[str, ...] = field(default_factory=tuple)


def process_document(
    spec: SpecDocument,
    flatten: bool,
    *,
    settings: AppSettings | None = None,
    fetch: Fetcher | None = None,
    options: ExpandOptions = FLATTEN_OPTIONS,
) -> ProcessedDocument:
    """Expande (opcionalmente) y serializa la spec.

    Lanza `ExpansionError` o `SerializationError`.
    """

    warnings: tuple[str, ...] = ()
    if flatten:
        fetch = fetch or partial(load_raw, settings=settings or AppSettings())
        result = RefExpander(fetch, options).expand(spec)
        spec = result.document
        warnings = tuple(result.warnings)
        logger.info("flattened %s (%d unresolved references)", spec.location, len(warnings))

    return ProcessedDocument(body=render_spec_json(spec.content), warnings=warnings)
