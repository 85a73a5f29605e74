"""Tests for the /api/analyze endpoint."""

import pytest
import requests
from fastapi.testclient import TestClient

from api.app import app, get_http
from core.config import GEMINI_MODELS

IMAGE = "data:image/png;base64,aGVsbG8="


@pytest.fixture
def client():
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def with_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")


@pytest.fixture
def without_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_GEMINI_API_KEY", raising=False)


@pytest.fixture
def fake_http(make_http):
    """Install a scripted HTTP session for the Gemini calls."""
    def install(outcomes):
        http = make_http(outcomes)
        app.dependency_overrides[get_http] = lambda: http
        return http
    return install


class TestAnalyze:
    def test_success(self, client, with_key, fake_http, gemini):
        http = fake_http([gemini.text("**Likely condition(s)**\nBenign mole.")])
        response = client.post("/api/analyze", json={
            "image": IMAGE,
            "symptoms": ["bleeding"],
            "visionAnalysis": {"label": "mole", "confidences": [{"label": "mole", "confidence": 0.9}]},
        })
        assert response.status_code == 200
        assert response.json() == {"result": "**Likely condition(s)**\nBenign mole."}

        call = http.calls[0]
        parts = call["json"]["contents"][0]["parts"]
        assert "VISION AI result: mole" in parts[0]["text"]
        assert "User symptoms: bleeding" in parts[0]["text"]
        assert parts[1]["inline_data"] == {"mime_type": "image/png", "data": "aGVsbG8="}

    def test_symptoms_as_string(self, client, with_key, fake_http, gemini):
        http = fake_http([gemini.text("ok")])
        response = client.post("/api/analyze", json={"image": IMAGE, "symptoms": "itching, redness"})
        assert response.status_code == 200
        assert "User symptoms: itching, redness" in http.calls[0]["json"]["contents"][0]["parts"][0]["text"]

    def test_missing_context_uses_defaults(self, client, with_key, fake_http, gemini):
        http = fake_http([gemini.text("ok")])
        response = client.post("/api/analyze", json={"image": IMAGE, "visionAnalysis": None})
        assert response.status_code == 200
        text = http.calls[0]["json"]["contents"][0]["parts"][0]["text"]
        assert "VISION AI result: unknown" in text
        assert "User symptoms: not provided" in text

    def test_falls_back_to_later_model(self, client, with_key, fake_http, gemini):
        http = fake_http([gemini.error(429, "quota"), gemini.text("second")])
        response = client.post("/api/analyze", json={"image": IMAGE, "symptoms": ["pain"]})
        assert response.status_code == 200
        assert response.json()["result"] == "second"
        assert GEMINI_MODELS[1] in http.calls[1]["url"]

    def test_missing_image(self, client, with_key, fake_http):
        http = fake_http([])
        response = client.post("/api/analyze", json={"symptoms": ["pain"]})
        assert response.status_code == 400
        assert response.json() == {"error": "Image not provided"}
        assert http.calls == []

    def test_missing_credential(self, client, without_key, fake_http):
        http = fake_http([])
        response = client.post("/api/analyze", json={"image": IMAGE})
        assert response.status_code == 500
        assert response.json() == {"error": "Missing GEMINI_API_KEY"}
        assert http.calls == []

    def test_alternate_credential_name(self, client, without_key, monkeypatch, fake_http, gemini):
        monkeypatch.setenv("GOOGLE_GEMINI_API_KEY", "other-key")
        http = fake_http([gemini.text("ok")])
        response = client.post("/api/analyze", json={"image": IMAGE})
        assert response.status_code == 200
        assert http.calls[0]["params"] == {"key": "other-key"}

    def test_all_models_fail(self, client, with_key, fake_http, gemini):
        outcomes = [gemini.error(500, "boom")] * (len(GEMINI_MODELS) - 1)
        outcomes.append(requests.ConnectionError("network down"))
        http = fake_http(outcomes)
        response = client.post("/api/analyze", json={"image": IMAGE})
        assert response.status_code == 503
        assert response.json() == {"error": "All Gemini models failed. Last error: network down"}
        assert len(http.calls) == len(GEMINI_MODELS)

    def test_malformed_body(self, client, with_key, fake_http):
        fake_http([])
        response = client.post(
            "/api/analyze",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert "error" in response.json()

    def test_unexpected_failure(self, client, with_key):
        class Broken:
            def post(self, url, **kwargs):
                raise RuntimeError("kaboom")

        app.dependency_overrides[get_http] = lambda: Broken()
        response = client.post("/api/analyze", json={"image": IMAGE})
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error: kaboom"}


class TestHealth:
    def test_reports_credential(self, client, with_key):
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "credential_configured": True}

    def test_without_credential(self, client, without_key):
        assert client.get("/healthz").json()["credential_configured"] is False


class TestHttpSession:
    def test_session_closed_after_request(self, client, with_key, monkeypatch, gemini):
        sessions = []

        class RecordingSession:
            def __init__(self):
                self.closed = False
                sessions.append(self)

            def post(self, url, **kwargs):
                return gemini.text("ok")

            def close(self):
                self.closed = True

        monkeypatch.setattr(requests, "Session", RecordingSession)
        response = client.post("/api/analyze", json={"image": IMAGE})
        assert response.status_code == 200
        assert len(sessions) == 1
        assert sessions[0].closed is True

    def test_session_closed_when_all_models_fail(self, client, with_key, monkeypatch, gemini):
        sessions = []

        class FailingSession:
            def __init__(self):
                self.closed = False
                sessions.append(self)

            def post(self, url, **kwargs):
                return gemini.error(500, "boom")

            def close(self):
                self.closed = True

        monkeypatch.setattr(requests, "Session", FailingSession)
        response = client.post("/api/analyze", json={"image": IMAGE})
        assert response.status_code == 503
        assert sessions[0].closed is True
