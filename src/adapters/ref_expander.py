"""Expansión de `$ref` (flatten) para especificaciones Swagger/OpenAPI.

Qué hace:
- Recorre el documento y reemplaza cada `{"$ref": ...}` por una copia del
  nodo al que apunta, resolviendo punteros internos (`#/definitions/X`),
  ficheros relativos/absolutos y URLs.
- Las referencias circulares se dejan como `$ref`; con
  `absolute_circular_ref` se reescriben como `<ubicación absoluta>#<puntero>`
  para que el resultado no dependa de la ubicación del documento que lo sirve.
- Con `continue_on_error` una referencia irresoluble se deja intacta y se
  registra como warning; sin él, aborta con `ExpansionError`.

Nota: el documento de entrada no se modifica; el recorrido construye uno nuevo.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable
from urllib.parse import quote, unquote, urljoin

from adapters.spec_loader import is_url
from core.domain.errors import DocServeError, ExpansionError
from core.domain.models import SpecDocument

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Any]

# (ubicación del documento, puntero JSON escapado)
Position = tuple[str, str]


@dataclass(frozen=True)
class ExpandOptions:
    skip_schemas: bool = False
    continue_on_error: bool = False
    absolute_circular_ref: bool = False


# Política usada por `serve --flatten`.
FLATTEN_OPTIONS = ExpandOptions(
    skip_schemas=False,
    continue_on_error=True,
    absolute_circular_ref=True,
)


@dataclass
class ExpansionResult:
    document: SpecDocument
    warnings: list[str] = field(default_factory=list)


def split_ref(ref: str) -> tuple[str, str]:
    """`"a.yaml#/x"` -> `("a.yaml", "/x")`; `"#/x"` -> `("", "/x")`."""

    if "#" not in ref:
        return ref, ""
    path_part, fragment = ref.split("#", 1)
    return path_part, unquote(fragment)


def _escape_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _unescape_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def resolve_pointer(document: Any, pointer: str) -> Any:
    """Resuelve un JSON Pointer (RFC 6901); lanza `KeyError` si no existe."""

    if pointer == "":
        return document
    if not pointer.startswith("/"):
        raise KeyError(f"unsupported JSON pointer {pointer!r}")

    current = document
    for raw in pointer[1:].split("/"):
        token = _unescape_token(raw)
        if isinstance(current, dict):
            if token not in current:
                raise KeyError(f"{token!r} not found")
            current = current[token]
        elif isinstance(current, list):
            try:
                current = current[int(token)]
            except (ValueError, IndexError) as exc:
                raise KeyError(f"invalid list index {token!r}") from exc
        else:
            raise KeyError(f"cannot descend into a scalar at {token!r}")
    return current


def _contains(outer: str, inner: str) -> bool:
    """True si el puntero `inner` es `outer` o cuelga de él."""

    return inner == outer or inner.startswith(outer + "/") or outer == ""


class RefExpander:
    """Expande referencias con caché de documentos por ubicación."""

    def __init__(self, fetch: Fetcher, options: ExpandOptions | None = None) -> None:
        self._fetch = fetch
        self.options = options or ExpandOptions()
        self._cache: dict[str, Any] = {}
        self._warnings: list[str] = []

    def expand(self, spec: SpecDocument) -> ExpansionResult:
        if not isinstance(spec.content, dict):
            raise ExpansionError(f"{spec.location}: the document root must be an object")

        self._cache = {spec.location: spec.content}
        self._warnings = []
        try:
            expanded = self._walk(
                spec.content,
                location=spec.location,
                pointer="",
                ancestors=(),
                in_schema=False,
            )
        except RecursionError as exc:
            raise ExpansionError(f"{spec.location}: references nest too deeply to expand") from exc

        return ExpansionResult(
            document=SpecDocument(location=spec.location, content=expanded),
            warnings=list(self._warnings),
        )

    def _document(self, location: str) -> Any:
        if location not in self._cache:
            self._cache[location] = self._fetch(location)
        return self._cache[location]

    @staticmethod
    def _resolve_location(base: str, path_part: str) -> str:
        if not path_part:
            return base
        if is_url(path_part):
            return path_part
        if is_url(base):
            return urljoin(base, path_part)
        target = Path(unquote(path_part))
        if not target.is_absolute():
            target = Path(base).parent / target
        return target.resolve().as_posix()

    @staticmethod
    def _enters_schema(pointer: str, key: str) -> bool:
        if key in ("schema", "definitions"):
            return True
        return pointer == "/components" and key == "schemas"

    @staticmethod
    def _is_circular(target: Position, current: Position, ancestors: tuple[Position, ...]) -> bool:
        target_location, target_pointer = target
        for location, pointer in (*ancestors, current):
            if location == target_location and _contains(target_pointer, pointer):
                return True
        return False

    def _walk(
        self,
        node: Any,
        *,
        location: str,
        pointer: str,
        ancestors: tuple[Position, ...],
        in_schema: bool,
    ) -> Any:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str) and not (in_schema and self.options.skip_schemas):
                return self._expand_ref(
                    ref,
                    node,
                    location=location,
                    pointer=pointer,
                    ancestors=ancestors,
                    in_schema=in_schema,
                )
            return {
                key: self._walk(
                    value,
                    location=location,
                    pointer=f"{pointer}/{_escape_token(key)}",
                    ancestors=ancestors,
                    in_schema=in_schema or self._enters_schema(pointer, key),
                )
                for key, value in node.items()
            }
        if isinstance(node, list):
            return [
                self._walk(
                    item,
                    location=location,
                    pointer=f"{pointer}/{index}",
                    ancestors=ancestors,
                    in_schema=in_schema,
                )
                for index, item in enumerate(node)
            ]
        return node

    def _expand_ref(
        self,
        ref: str,
        node: dict[str, Any],
        *,
        location: str,
        pointer: str,
        ancestors: tuple[Position, ...],
        in_schema: bool,
    ) -> Any:
        path_part, fragment = split_ref(ref)
        target_location = self._resolve_location(location, path_part)
        target: Position = (target_location, fragment)

        if self._is_circular(target, (location, pointer), ancestors):
            logger.debug("circular reference %s at %s#%s", ref, location, pointer)
            if self.options.absolute_circular_ref:
                return {"$ref": f"{target_location}#{quote(fragment, safe='/~')}"}
            return dict(node)

        try:
            resolved = resolve_pointer(self._document(target_location), fragment)
        except (DocServeError, KeyError) as exc:
            message = f"cannot resolve $ref {ref!r} at {location}#{pointer}: {exc}"
            if not self.options.continue_on_error:
                raise ExpansionError(message) from exc
            logger.warning(message)
            self._warnings.append(message)
            return dict(node)

        return self._walk(
            resolved,
            location=target_location,
            pointer=fragment,
            ancestors=(*ancestors, (location, pointer)),
            in_schema=in_schema,
        )
