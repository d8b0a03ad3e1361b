from __future__ import annotations

import pytest

from core.domain.models import (
    Flavor,
    NoUI,
    RedocUI,
    ResolvedAddress,
    ServeConfig,
    SwaggerUI,
)
from core.interfaces.http import Request
from core.services.assets import DEFAULT_REDOC_ASSET_PREFIX, DEFAULT_SWAGGER_ASSET_PREFIX
from core.services.handler_composer import compose_handlers, select_ui

DOC = b'{"swagger": "2.0"}'
ADDRESS = ResolvedAddress(bound_host="0.0.0.0", bound_port=8080, display_host="localhost")


def _get(plan, path: str):
    return plan.handler(Request(method="GET", path=path))


def test_no_ui_serves_only_the_document() -> None:
    plan = compose_handlers(ServeConfig(no_ui=True, flavor=Flavor.SWAGGER), ADDRESS, DOC)
    assert isinstance(plan.ui, NoUI)
    assert plan.visit_url == ""
    assert _get(plan, "/swagger.json").status == 200
    assert _get(plan, "/swagger.json").body == DOC
    assert _get(plan, "/docs").status == 404


def test_no_ui_keeps_explicit_doc_url_as_visit_url() -> None:
    config = ServeConfig(no_ui=True, doc_url="https://docs.example.com/?url=x")
    plan = compose_handlers(config, ADDRESS, DOC)
    assert plan.visit_url == "https://docs.example.com/?url=x"


def test_redoc_defaults() -> None:
    plan = compose_handlers(ServeConfig(), ADDRESS, DOC)
    assert isinstance(plan.ui, RedocUI)
    assert plan.ui.path == "/docs"
    assert plan.ui.spec_url == "/swagger.json"
    assert plan.ui.redoc_url == f"{DEFAULT_REDOC_ASSET_PREFIX}/redoc.standalone.js"
    assert plan.visit_url == "http://localhost:8080/docs"
    assert _get(plan, "/docs").status == 200


@pytest.mark.parametrize("ui_path", ["docs", "reference", "api-docs"])
def test_redoc_visit_url_always_ends_in_docs(ui_path: str) -> None:
    plan = compose_handlers(ServeConfig(base_path="/api", ui_path=ui_path), ADDRESS, DOC)
    assert plan.visit_url == "http://localhost:8080/api/docs"
    # the UI itself is mounted at the custom path
    assert plan.ui.path == f"/api/{ui_path}"
    assert _get(plan, f"/api/{ui_path}").status == 200


@pytest.mark.parametrize("ui_path", ["docs", "reference"])
def test_swagger_visit_url_follows_ui_path(ui_path: str) -> None:
    config = ServeConfig(flavor=Flavor.SWAGGER, base_path="/api/", ui_path=ui_path)
    plan = compose_handlers(config, ADDRESS, DOC)
    assert isinstance(plan.ui, SwaggerUI)
    assert plan.visit_url == f"http://localhost:8080/api/{ui_path}"
    assert plan.ui.spec_url == "/api/swagger.json"
    assert _get(plan, f"/api/{ui_path}").status == 200
    assert _get(plan, "/api/swagger.json").body == DOC


def test_swagger_default_assets() -> None:
    ui = select_ui(ServeConfig(flavor=Flavor.SWAGGER))
    assert isinstance(ui, SwaggerUI)
    assert all(url.startswith(DEFAULT_SWAGGER_ASSET_PREFIX + "/") for url in ui.assets.all_urls())


@pytest.mark.parametrize("flavor", list(Flavor))
def test_source_url_override_prefixes_all_assets(flavor: Flavor) -> None:
    ui = select_ui(ServeConfig(flavor=flavor, source_url="https://example.com/assets"))
    urls = [ui.redoc_url] if isinstance(ui, RedocUI) else ui.assets.all_urls()
    assert all(url.startswith("https://example.com/assets/") for url in urls)


def test_document_route_exists_in_every_state() -> None:
    for config in (
        ServeConfig(no_ui=True),
        ServeConfig(flavor=Flavor.REDOC),
        ServeConfig(flavor=Flavor.SWAGGER),
    ):
        plan = compose_handlers(config, ADDRESS, DOC)
        assert _get(plan, "/swagger.json").body == DOC


def test_chain_is_wrapped_in_cors() -> None:
    plan = compose_handlers(ServeConfig(), ADDRESS, DOC)
    response = plan.handler(Request(method="GET", path="/swagger.json", headers={"Origin": "http://x"}))
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_page_title_comes_from_the_document() -> None:
    plan = compose_handlers(ServeConfig(), ADDRESS, DOC, title="Petstore")
    assert b"<title>Petstore</title>" in _get(plan, "/docs").body
    default = compose_handlers(ServeConfig(), ADDRESS, DOC)
    assert b"<title>API documentation</title>" in _get(default, "/docs").body
