from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import AppSettings, write_user_env_vars
from core.domain.models import Flavor, ServeConfig


def test_serve_config_defaults() -> None:
    config = ServeConfig()
    assert config.base_path == "/"
    assert config.flavor is Flavor.REDOC
    assert config.host == "0.0.0.0"
    assert config.port == 0
    assert config.ui_path == "docs"
    assert config.doc_url is None


@pytest.mark.parametrize("raw, expected", [("", "/"), ("  ", "/"), ("api", "/api"), ("/api", "/api")])
def test_base_path_normalization(raw: str, expected: str) -> None:
    assert ServeConfig(base_path=raw).base_path == expected


def test_serve_config_rejects_invalid_values() -> None:
    with pytest.raises(ValidationError):
        ServeConfig(flavor="rapidoc")
    with pytest.raises(ValidationError):
        ServeConfig(ui_path="")
    with pytest.raises(ValidationError):
        ServeConfig(port=70000)


def test_serve_config_is_immutable() -> None:
    config = ServeConfig(flavor="swagger")
    assert config.flavor is Flavor.SWAGGER
    with pytest.raises(ValidationError):
        config.port = 9000  # type: ignore[misc]


def test_empty_optional_strings_become_none() -> None:
    config = ServeConfig(doc_url="", source_url="  ")
    assert config.doc_url is None
    assert config.source_url is None


def test_settings_read_prefixed_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCSERVE_SOURCE_URL", "https://mirror.test/assets")
    monkeypatch.setenv("DOCSERVE_LOG_LEVEL", "info")
    settings = AppSettings()
    assert settings.source_url == "https://mirror.test/assets"
    assert settings.log_level == "INFO"


def test_write_user_env_vars_merges(tmp_path) -> None:
    env_path = tmp_path / "cfg" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("# comment\nDOCSERVE_LOG_LEVEL=DEBUG\n", encoding="utf-8")

    write_user_env_vars({"DOCSERVE_SOURCE_URL": "https://m.test"}, env_path=env_path)

    text = env_path.read_text(encoding="utf-8")
    assert "DOCSERVE_LOG_LEVEL=DEBUG" in text
    assert "DOCSERVE_SOURCE_URL=https://m.test" in text
