"""Tests for configuration loading"""

import json

import pytest

import config


def write_config(data):
    config.CONFIG_PATH.write_text(json.dumps(data))
    config.reset_config()


def test_defaults_without_config_file():
    assert config.get_gcp_projects() == []
    assert config.get_default_project() is None
    assert config.get_operation_timeout() == 240
    assert config.get_operation_poll_interval() == 2


def test_values_from_config_file():
    write_config({
        "gcp_projects": ["proj-a", "proj-b"],
        "operation_timeout": 60,
        "operation_poll_interval": 0.5,
    })

    assert config.get_gcp_projects() == ["proj-a", "proj-b"]
    assert config.get_default_project() == "proj-a"
    assert config.get_operation_timeout() == 60
    assert config.get_operation_poll_interval() == 0.5


def test_explicit_default_project():
    write_config({"gcp_project": "main", "gcp_projects": ["proj-a"]})
    assert config.get_default_project() == "main"


def test_env_project_overrides_file(monkeypatch):
    write_config({"gcp_project": "main"})
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "from-env")
    assert config.get_default_project() == "from-env"


def test_invalid_json():
    config.CONFIG_PATH.write_text("{not json")
    config.reset_config()

    with pytest.raises(ValueError, match="Invalid JSON"):
        config.load_config()
