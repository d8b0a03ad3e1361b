from __future__ import annotations

import json
import math

import pytest

from adapters.json_exporter import render_spec_json
from core.domain.errors import SerializationError
from core.domain.models import SpecDocument
from core.services.document_processor import process_document


def test_without_flatten_output_is_canonical_json(petstore) -> None:
    spec = SpecDocument(location="/v/s.json", content=petstore)
    body = process_document(spec, False).body

    assert body == json.dumps(petstore, indent=2, sort_keys=True, ensure_ascii=False).encode("utf-8")
    assert json.loads(body) == petstore
    assert b'\n  "basePath": "/api",\n' in body


def test_output_is_stable_regardless_of_key_order(petstore) -> None:
    reordered = dict(reversed(list(petstore.items())))
    first = process_document(SpecDocument(location="/v/s.json", content=petstore), False).body
    second = process_document(SpecDocument(location="/v/s.json", content=reordered), False).body
    assert first == second


def test_flatten_inlines_refs(petstore) -> None:
    spec = SpecDocument(location="/v/s.json", content=petstore)
    processed = process_document(spec, True, fetch=lambda location: pytest.fail(location))
    assert b"$ref" not in processed.body
    assert processed.warnings == ()


def test_flatten_reports_unresolved_refs(petstore) -> None:
    petstore["definitions"]["Pet"]["properties"]["owner"] = {"$ref": "#/definitions/Owner"}
    processed = process_document(SpecDocument(location="/v/s.json", content=petstore), True)
    assert processed.warnings
    assert b'"$ref": "#/definitions/Owner"' in processed.body


def test_unserializable_content_raises() -> None:
    with pytest.raises(SerializationError):
        render_spec_json({"x": object()})
    with pytest.raises(SerializationError):
        render_spec_json({"x": math.nan})


def test_non_ascii_is_kept_as_utf8() -> None:
    assert render_spec_json({"title": "Café"}) == '{\n  "title": "Café"\n}'.encode("utf-8")
