from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'cli', 'core', 'adapters'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user/project .env files and DOCSERVE_* vars out of the tests."""

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    for name in ("DOCSERVE_SOURCE_URL", "DOCSERVE_LOG_LEVEL", "PORT", "HOST"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def petstore() -> dict[str, Any]:
    return {
        "swagger": "2.0",
        "info": {"title": "Petstore", "version": "1.0.0"},
        "basePath": "/api",
        "paths": {
            "/pets": {
                "get": {
                    "responses": {
                        "200": {
                            "description": "pets",
                            "schema": {"type": "array", "items": {"$ref": "#/definitions/Pet"}},
                        }
                    }
                }
            }
        },
        "definitions": {
            "Pet": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "tag": {"$ref": "#/definitions/Tag"},
                },
            },
            "Tag": {"type": "object", "properties": {"label": {"type": "string"}}},
        },
    }


@pytest.fixture
def write_spec(tmp_path: Path) -> Callable[..., Path]:
    def _write(content: Any, name: str = "swagger.json") -> Path:
        path = tmp_path / "specs" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if name.endswith((".yaml", ".yml")):
            path.write_text(yaml.safe_dump(content, sort_keys=False), encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write
