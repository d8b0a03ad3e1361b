from __future__ import annotations

import httpx
import pytest

from adapters.http_client import build_client
from adapters.spec_loader import is_url, load_raw, load_spec, normalize_location
from core.config import AppSettings
from core.domain.errors import LoadError


def test_load_json_spec(petstore, write_spec) -> None:
    path = write_spec(petstore)
    spec = load_spec(str(path))
    assert spec.location == path.resolve().as_posix()
    assert spec.content == petstore
    assert spec.title == "Petstore"


def test_load_yaml_spec_stringifies_keys_and_dates(tmp_path) -> None:
    path = tmp_path / "api.yaml"
    path.write_text(
        "swagger: '2.0'\n"
        "info:\n"
        "  title: Dates\n"
        "  version: 2020-01-02\n"
        "paths:\n"
        "  /x:\n"
        "    get:\n"
        "      responses:\n"
        "        200:\n"
        "          description: ok\n",
        encoding="utf-8",
    )
    spec = load_spec(str(path))
    assert spec.content["info"]["version"] == "2020-01-02"
    assert "200" in spec.content["paths"]["/x"]["get"]["responses"]


def test_missing_file_raises_load_error(tmp_path) -> None:
    with pytest.raises(LoadError):
        load_spec(str(tmp_path / "nope.json"))


def test_empty_source_raises_load_error() -> None:
    with pytest.raises(LoadError, match="specify the spec"):
        load_spec("  ")


def test_non_mapping_root_raises_load_error(tmp_path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(LoadError, match="must be an object"):
        load_spec(str(path))


def test_invalid_yaml_raises_load_error(tmp_path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("a: [1, 2\n", encoding="utf-8")
    with pytest.raises(LoadError, match="not valid JSON or YAML"):
        load_spec(str(path))


def _client(handler) -> httpx.Client:
    return build_client(AppSettings(), transport=httpx.MockTransport(handler))


def test_load_remote_spec() -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers["User-Agent"]
        return httpx.Response(200, text='{"swagger": "2.0", "info": {"title": "Remote"}}')

    with _client(handler) as client:
        spec = load_spec("https://specs.example.com/api.json", client=client)

    assert spec.location == "https://specs.example.com/api.json"
    assert spec.title == "Remote"
    assert seen["ua"].startswith("docserve/")


def test_remote_http_error_raises_load_error() -> None:
    with _client(lambda request: httpx.Response(404)) as client:
        with pytest.raises(LoadError):
            load_raw("https://specs.example.com/missing.json", client=client)


def test_location_helpers(tmp_path) -> None:
    assert is_url("https://a/b.json")
    assert not is_url("specs/b.json")
    assert normalize_location("https://a/b.json") == "https://a/b.json"
    assert normalize_location(str(tmp_path / "x" / ".." / "a.json")) == (tmp_path / "a.json").resolve().as_posix()
