from pathlib import Path
from unittest.mock import patch

import pytest

from app import create_app
from config import ConfigError, RelayConfig, load_config


def test_load_config_defaults():
    config = load_config({"GOOGLE_CLOUD_API_KEY": "k"})

    assert config.api_key == "k"
    assert config.conversions == {".m4a": ".wav"}
    assert config.port == 4000
    assert config.sample_rate_hertz == 16000
    assert config.language_code == "en-US"
    assert config.upload_folder.name == "uploads"


def test_load_config_overrides(tmp_path):
    config = load_config({
        "GOOGLE_CLOUD_API_KEY": "k",
        "UPLOAD_FOLDER": str(tmp_path),
        "CONVERT_FORMATS": "m4a, .OGG, wav",
        "PORT": "8080",
        "GEMINI_MODEL": "gemini-x",
    })

    assert config.upload_folder == Path(tmp_path)
    assert config.conversions == {".m4a": ".wav", ".ogg": ".wav"}
    assert config.port == 8080
    assert config.gemini_model == "gemini-x"


def test_conversion_disabled_with_empty_list():
    assert load_config({"CONVERT_FORMATS": ""}).conversions == {}


def test_bad_port():
    with pytest.raises(ConfigError):
        load_config({"PORT": "abc"})


def test_missing_api_key_refuses_to_start(tmp_path):
    with pytest.raises(ConfigError):
        create_app(RelayConfig(api_key="", upload_folder=tmp_path / "uploads"))
    assert not (tmp_path / "uploads").exists()


def test_main_exits_without_api_key():
    from app import main

    with patch("app.load_config", return_value=RelayConfig(api_key="")):
        with pytest.raises(SystemExit) as exc:
            main()
    assert exc.value.code == 1


def test_startup_creates_upload_folder(app, relay_config):
    assert relay_config.upload_folder.is_dir()


def test_unknown_route_is_json(client):
    response = client.get("/nope")
    assert response.status_code == 404
    assert "error" in response.json


def test_cors_headers(client):
    response = client.post("/generate-podcast", json={}, headers={"Origin": "http://localhost:3000"})
    assert response.headers.get("Access-Control-Allow-Origin") in ("*", "http://localhost:3000")


def test_config_mappings_are_read_only():
    config = RelayConfig(api_key="k", conversions={".m4a": ".wav"})

    with pytest.raises(TypeError):
        config.conversions[".ogg"] = ".wav"
    assert isinstance(config.allowed_mime_types, frozenset)
