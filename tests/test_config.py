"""
Configuration Tests
===================

YAML loading and environment overrides.
"""

import pytest
from pydantic import ValidationError

from card_gate.config import Settings, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "CARDGATE_CONFIG",
        "CARDGATE_MIN_DIMENSION",
        "CARDGATE_SHARPNESS_FLOOR",
        "CARDGATE_MAX_PAYLOAD_BYTES",
        "CARDGATE_PORT",
        "CARDGATE_LOG_LEVEL",
        "PORT",
    ):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, tmp_path):
        settings = load_config(str(tmp_path / "missing.yaml"))
        assert settings == Settings()
        assert settings.thresholds.min_dimension == 200
        assert settings.server.port == 8002

    def test_yaml_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "thresholds:\n"
            "  min_dimension: 320\n"
            "  sharpness_floor: 8.5\n"
            "logging:\n"
            "  format: text\n"
        )
        settings = load_config(str(path))
        assert settings.thresholds.min_dimension == 320
        assert settings.thresholds.sharpness_floor == 8.5
        assert settings.thresholds.variance_floor == 500
        assert settings.logging.format == "text"

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("thresholds:\n  min_dimension: 320\n")
        monkeypatch.setenv("CARDGATE_MIN_DIMENSION", "150")
        monkeypatch.setenv("CARDGATE_SHARPNESS_FLOOR", "2.5")
        monkeypatch.setenv("CARDGATE_MAX_PAYLOAD_BYTES", "2048")
        monkeypatch.setenv("CARDGATE_LOG_LEVEL", "DEBUG")

        settings = load_config(str(path))

        assert settings.thresholds.min_dimension == 150
        assert settings.thresholds.sharpness_floor == 2.5
        assert settings.server.max_payload_bytes == 2048
        assert settings.logging.level == "DEBUG"

    def test_port_precedence(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CARDGATE_PORT", "9000")
        assert load_config(str(tmp_path / "none.yaml")).server.port == 9000

        monkeypatch.setenv("PORT", "8080")
        assert load_config(str(tmp_path / "none.yaml")).server.port == 8080

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("server:\n  validation_timeout_seconds: 3\n")
        monkeypatch.setenv("CARDGATE_CONFIG", str(path))
        assert load_config().server.validation_timeout_seconds == 3.0

    def test_invalid_thresholds_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("thresholds:\n  edge_ratio_min: 0.9\n")
        with pytest.raises(ValidationError):
            load_config(str(path))
