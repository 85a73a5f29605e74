"""Tests for core.dispatcher module."""

import pytest
import requests

from core.config import GEMINI_MODELS
from core.dispatcher import (
    ModelFallbackDispatcher,
    build_payload,
    build_prompt,
    extract_text,
    format_symptoms,
)
from core.errors import AllBackendsExhausted, ConfigurationError, ValidationError
from core.utils import InlineImage

IMAGE = InlineImage(mime_type="image/png", data="aGVsbG8=")


def _dispatcher(http, api_key="test-key", **kwargs):
    return ModelFallbackDispatcher(api_key=api_key, http=http, **kwargs)


class TestPrompt:
    def test_defaults_when_context_missing(self):
        prompt = build_prompt(None, None)
        assert "VISION AI result: unknown" in prompt
        assert "User symptoms: not provided" in prompt
        assert prompt.startswith("You are a dermatology assistant AI.")

    def test_interpolates_label_and_symptom_list(self):
        prompt = build_prompt("mole", ["itching", "redness"])
        assert "VISION AI result: mole" in prompt
        assert "User symptoms: itching, redness" in prompt

    def test_symptom_string_passes_through(self):
        assert format_symptoms("bleeding since May") == "bleeding since May"

    def test_blank_symptoms_count_as_missing(self):
        assert format_symptoms("   ") == "not provided"
        assert format_symptoms(["", " "]) == "not provided"

    def test_payload_carries_inline_image(self):
        payload = build_payload("prompt", IMAGE)
        parts = payload["contents"][0]["parts"]
        assert parts[0] == {"text": "prompt"}
        assert parts[1] == {"inline_data": {"mime_type": "image/png", "data": "aGVsbG8="}}


class TestExtractText:
    def test_first_part_text(self):
        body = {"candidates": [{"content": {"parts": [{"text": "report"}]}}]}
        assert extract_text(body) == "report"

    def test_missing_candidates(self):
        assert extract_text({}) is None
        assert extract_text({"candidates": []}) is None

    def test_empty_text(self):
        body = {"candidates": [{"content": {"parts": [{"text": ""}]}}]}
        assert extract_text(body) is None


class TestPreconditions:
    def test_missing_credential_makes_no_attempt(self, make_http):
        http = make_http([])
        with pytest.raises(ConfigurationError):
            _dispatcher(http, api_key=None).generate(IMAGE, "itching", "mole")
        assert http.calls == []

    def test_missing_image_makes_no_attempt(self, make_http):
        http = make_http([])
        with pytest.raises(ValidationError):
            _dispatcher(http).generate(InlineImage(mime_type="image/jpeg", data=""), "itching")
        assert http.calls == []

    def test_credential_checked_before_image(self, make_http):
        http = make_http([])
        with pytest.raises(ConfigurationError):
            _dispatcher(http, api_key="").generate(InlineImage(mime_type="image/jpeg", data=""))


class TestFallback:
    def test_first_model_success(self, make_http, gemini):
        http = make_http([gemini.text("all good")])
        assert _dispatcher(http).generate(IMAGE, "itching") == "all good"
        assert len(http.calls) == 1
        assert GEMINI_MODELS[0] in http.calls[0]["url"]

    @pytest.mark.parametrize("k", [1, 2, 3, 4])
    def test_kth_success_stops_after_k_attempts(self, make_http, gemini, k):
        failures = [gemini.error(500, f"fail {i}") for i in range(k - 1)]
        http = make_http(failures + [gemini.text(f"report from {k}")] + [gemini.text("unused")] * 4)
        result = _dispatcher(http).generate(IMAGE)
        assert result == f"report from {k}"
        assert len(http.calls) == k
        tried = [call["url"] for call in http.calls]
        for model, url in zip(GEMINI_MODELS, tried):
            assert f"/v1/models/{model}:generateContent" in url

    def test_transport_failure_moves_on(self, make_http, gemini):
        http = make_http([requests.ConnectionError("connection refused"), gemini.text("ok")])
        assert _dispatcher(http).generate(IMAGE) == "ok"
        assert len(http.calls) == 2

    def test_no_text_moves_on(self, make_http, gemini):
        http = make_http([gemini.response(200, {"candidates": []}), gemini.text("ok")])
        assert _dispatcher(http).generate(IMAGE) == "ok"

    def test_request_shape(self, make_http, gemini):
        http = make_http([gemini.text("ok")])
        _dispatcher(http).generate(IMAGE, ["bleeding"], "mole")
        call = http.calls[0]
        assert call["params"] == {"key": "test-key"}
        assert call["url"].startswith("https://generativelanguage.googleapis.com/v1/models/")
        text = call["json"]["contents"][0]["parts"][0]["text"]
        assert "VISION AI result: mole" in text
        assert "User symptoms: bleeding" in text


class TestExhaustion:
    def test_last_error_is_reported(self, make_http, gemini):
        http = make_http([
            gemini.error(404, "model not found"),
            requests.Timeout("read timed out"),
            gemini.response(200, {"candidates": []}),
            gemini.error(429, "quota exceeded"),
        ])
        with pytest.raises(AllBackendsExhausted) as exc_info:
            _dispatcher(http).generate(IMAGE)
        assert exc_info.value.last_error == "quota exceeded"
        assert str(exc_info.value) == "All Gemini models failed. Last error: quota exceeded"
        assert len(http.calls) == len(GEMINI_MODELS)

    def test_transport_error_as_last(self, make_http, gemini):
        http = make_http([gemini.error(500, "boom"), requests.ConnectionError("unreachable")])
        with pytest.raises(AllBackendsExhausted) as exc_info:
            _dispatcher(http, models=["a", "b"]).generate(IMAGE)
        assert exc_info.value.last_error == "unreachable"

    def test_error_without_message(self, make_http, gemini):
        http = make_http([gemini.response(500, raw_text="<html>")])
        with pytest.raises(AllBackendsExhausted) as exc_info:
            _dispatcher(http, models=["only"]).generate(IMAGE)
        assert exc_info.value.last_error == "Unknown API error"

    def test_no_text_message(self, make_http, gemini):
        http = make_http([gemini.response(200, {})])
        with pytest.raises(AllBackendsExhausted) as exc_info:
            _dispatcher(http, models=["only"]).generate(IMAGE)
        assert exc_info.value.last_error == "Model returned no text"


class TestDeadline:
    def test_stops_when_budget_spent(self, make_http, gemini):
        ticks = iter([0.0, 0.0, 61.0])
        http = make_http([gemini.error(500, "slow failure")])
        dispatcher = _dispatcher(http, deadline_s=60.0, clock=lambda: next(ticks))
        with pytest.raises(AllBackendsExhausted) as exc_info:
            dispatcher.generate(IMAGE)
        assert len(http.calls) == 1
        assert "time limit" in exc_info.value.last_error

    def test_timeout_shrinks_with_remaining_budget(self, make_http, gemini):
        ticks = iter([0.0, 0.0, 50.0])
        http = make_http([gemini.error(500, "x"), gemini.text("ok")])
        dispatcher = _dispatcher(http, deadline_s=60.0, request_timeout_s=30.0, clock=lambda: next(ticks))
        assert dispatcher.generate(IMAGE) == "ok"
        assert http.calls[0]["timeout"] == 30.0
        assert http.calls[1]["timeout"] == 10.0
