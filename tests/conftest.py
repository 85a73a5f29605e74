"""Shared test fixtures for DermaVision AI."""

import io
import os
import tempfile
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from core.session import Session
from core.utils import ClassificationResult, LabelConfidence, encode_data_uri


class FakeResponse:
    """Stands in for ``requests.Response``."""

    def __init__(self, status_code=200, body=None, raw_text=None):
        self.status_code = status_code
        self._body = body
        self._raw_text = raw_text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._raw_text is not None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class FakeHttp:
    """Replays scripted outcomes (responses or exceptions) for ``post``."""

    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if not self._outcomes:
            raise AssertionError(f"Unexpected request to {url}")
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def gemini_text(text):
    """A successful generateContent body."""
    return FakeResponse(200, {"candidates": [{"content": {"parts": [{"text": text}]}}]})


def gemini_error(status, message=None):
    body = {"error": {"code": status, "message": message}} if message else {}
    return FakeResponse(status, body)


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


@pytest.fixture
def sample_rgb_image(tmp_dir):
    """Create a sample 224x224 RGB PNG (simulates a lesion photo)."""
    img = Image.fromarray(np.random.randint(0, 255, (224, 224, 3), dtype=np.uint8))
    path = tmp_dir / "lesion.png"
    img.save(path)
    return str(path)


@pytest.fixture
def sample_jpeg_bytes():
    img = Image.fromarray(np.random.randint(0, 255, (64, 64, 3), dtype=np.uint8))
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def sample_data_uri(sample_jpeg_bytes):
    return encode_data_uri(sample_jpeg_bytes, "image/jpeg")


@pytest.fixture
def sample_classification():
    return ClassificationResult(
        label="mole",
        confidences=(
            LabelConfidence("mole", 0.82),
            LabelConfidence("melanoma", 0.11),
            LabelConfidence("keratosis", 0.07),
        ),
    )


@pytest.fixture
def sample_session(sample_data_uri, sample_classification):
    """A session that has reached a ready report."""
    return Session(
        symptoms=["Itching", "Bleeding"],
        image_url=sample_data_uri,
        vision_result=sample_classification,
        llm_report="**Likely condition(s)**\nBenign mole.\n\n**Risk level**\nLow & stable.",
    )


@pytest.fixture
def make_http():
    """Factory for scripted fake HTTP sessions."""
    return FakeHttp


@pytest.fixture
def gemini():
    """Builders for Gemini-shaped responses."""
    class _Builders:
        text = staticmethod(gemini_text)
        error = staticmethod(gemini_error)
        response = FakeResponse
    return _Builders


@pytest.fixture(autouse=True)
def _init_i18n():
    """Initialize i18n for all tests."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    import i18n
    i18n.init()


@pytest.fixture
def sample_mpo_photo(tmp_dir):
    """A two-frame MPO saved as .jpg, as phone cameras write them."""
    first = Image.fromarray(np.random.randint(0, 255, (64, 64, 3), dtype=np.uint8))
    second = Image.fromarray(np.random.randint(0, 255, (64, 64, 3), dtype=np.uint8))
    path = tmp_dir / "phone_photo.jpg"
    first.save(path, format="MPO", save_all=True, append_images=[second])
    return str(path)
