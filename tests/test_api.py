"""
HTTP API Tests
==============

FastAPI surface around the validation engine.
"""

import base64
import time

import pytest
from fastapi.testclient import TestClient

from card_gate.config import settings
from card_gate.engine import ImageValidator
from card_gate.main import app

from conftest import encode_png, make_noise_image


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def as_data_url(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


class TestServiceEndpoints:
    """Tests for informational endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "CardGate"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestValidateEndpoint:
    """Tests for POST /validate."""

    def test_valid_card(self, client, card_png):
        response = client.post("/validate", json={"image": as_data_url(card_png)})
        assert response.status_code == 200
        body = response.json()
        assert body["outcome"] == {"valid": True, "reason": None, "message": None}
        assert body["metrics"]["analysis_height"] == 300

    def test_rejected_image_is_still_200(self, client):
        png = encode_png(make_noise_image())
        response = client.post("/validate", json={"image": as_data_url(png)})
        assert response.status_code == 200
        assert response.json()["outcome"]["reason"] == "NO_CARD_DETECTED"

    def test_unreadable_image(self, client):
        payload = base64.b64encode(b"not an image").decode("ascii")
        response = client.post("/validate", json={"image": payload})
        assert response.status_code == 200
        assert response.json()["outcome"]["reason"] == "UNREADABLE_IMAGE"

    def test_threshold_override(self, client, card_png):
        response = client.post(
            "/validate",
            json={"image": as_data_url(card_png), "thresholds": {"min_dimension": 1000}},
        )
        assert response.json()["outcome"]["reason"] == "TOO_SMALL"

    def test_invalid_threshold_override(self, client, card_png):
        response = client.post(
            "/validate",
            json={"image": as_data_url(card_png), "thresholds": {"min_dimension": 0}},
        )
        assert response.status_code == 422

    def test_missing_image(self, client):
        response = client.post("/validate", json={})
        assert response.status_code == 422

    def test_payload_too_large(self, client, card_png, monkeypatch):
        monkeypatch.setattr(settings.server, "max_payload_bytes", 1024)
        response = client.post("/validate", json={"image": as_data_url(card_png)})
        assert response.status_code == 413
        assert "too large" in response.json()["detail"]

    def test_timeout(self, client, card_png, monkeypatch):
        original = ImageValidator.inspect

        def slow_inspect(self, image):
            time.sleep(0.5)
            return original(self, image)

        monkeypatch.setattr(ImageValidator, "inspect", slow_inspect)
        monkeypatch.setattr(settings.server, "validation_timeout_seconds", 0.05)

        response = client.post("/validate", json={"image": as_data_url(card_png)})
        assert response.status_code == 504
