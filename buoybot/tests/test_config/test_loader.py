"""Tests for config and credential loading."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from buoybot.config.loader import CredentialsError, load_config, load_credentials


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.station.station_id == "46026"
        assert config.ops.cycle_interval_minutes == 30
        assert config.publisher.enabled is False

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        config = load_config(path)
        assert config.station.record_start == 188
        assert config.station.record_end == 281
        assert config.station.timezone == "America/Los_Angeles"

    def test_shipped_default_config(self):
        path = Path(__file__).parents[3] / "ops" / "configs" / "default.yaml"
        config = load_config(path)
        assert config.station.title == "SF Buoy"

    def test_unknown_key_rejected(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("station:\n  stationid: '46026'\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")


class TestLoadCredentials:
    def test_from_file(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"bearer_token": "abc", "note": "ignored"}))
        assert load_credentials(path).bearer_token == "abc"

    def test_empty_token_in_file_rejected(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"bearer_token": ""}))
        with pytest.raises(ValidationError):
            load_credentials(path)

    def test_env_fallback(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("TWITTER_BEARER_TOKEN", "env-token")
        assert load_credentials(tmp_path / "missing.json").bearer_token == "env-token"

    def test_nothing_available(self, monkeypatch):
        monkeypatch.delenv("TWITTER_BEARER_TOKEN", raising=False)
        with pytest.raises(CredentialsError):
            load_credentials(None)
