"""Report generation with priority fallback across Gemini models.

One combined prompt (instructions, classification label, symptoms, and the
inline photo) is sent to each candidate model in turn. The first model that
answers with text wins; every failure is recorded and only the last one is
kept for the final error message.
"""

import logging
import time
from typing import Callable, Iterable, Optional, Sequence, Union

import requests

from core.config import GEMINI_MODELS, REPORT_DEADLINE_S, DEFAULT_GEMINI_API_BASE
from core.errors import (
    AllBackendsExhausted,
    BackendError,
    ConfigurationError,
    TransportError,
    ValidationError,
)
from core.utils import InlineImage

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """You are a dermatology assistant AI.
Analyze this skin image and provide:

1. **Likely condition(s)**
2. **Risk level**
3. **Whether the user should see a doctor**
4. **Possible causes**
5. **Non-medical general advice**

DO NOT give medical diagnosis. Give safe recommendations.

VISION AI result: {label}
User symptoms: {symptoms}"""

Symptoms = Union[str, Sequence[str], None]


def format_symptoms(symptoms: Symptoms) -> str:
    """Flatten the symptom field into prompt text."""
    if not symptoms:
        return "not provided"
    if isinstance(symptoms, str):
        return symptoms.strip() or "not provided"
    joined = ", ".join(s.strip() for s in symptoms if s and s.strip())
    return joined or "not provided"


def build_prompt(label: Optional[str], symptoms: Symptoms) -> str:
    return PROMPT_TEMPLATE.format(
        label=label or "unknown",
        symptoms=format_symptoms(symptoms),
    )


def build_payload(prompt: str, image: InlineImage) -> dict:
    """Request body for ``models/{model}:generateContent``."""
    return {
        "contents": [
            {
                "parts": [
                    {"text": prompt},
                    {
                        "inline_data": {
                            "mime_type": image.mime_type,
                            "data": image.data,
                        }
                    },
                ]
            }
        ]
    }


def extract_text(body: dict) -> Optional[str]:
    """Pull ``candidates[0].content.parts[0].text`` out of a response."""
    try:
        text = body["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text or None


class ModelFallbackDispatcher:
    """Sends one report request to the first Gemini model that answers."""

    def __init__(
        self,
        api_key: Optional[str],
        models: Iterable[str] = GEMINI_MODELS,
        api_base: str = DEFAULT_GEMINI_API_BASE,
        http=None,
        deadline_s: float = REPORT_DEADLINE_S,
        request_timeout_s: float = REPORT_DEADLINE_S,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._api_key = api_key
        self._models = tuple(models)
        self._api_base = api_base.rstrip("/")
        self._http = http or requests.Session()
        self._deadline_s = deadline_s
        self._request_timeout_s = request_timeout_s
        self._clock = clock

    def generate(
        self,
        image: InlineImage,
        symptoms: Symptoms = None,
        label: Optional[str] = None,
    ) -> str:
        """Return the report text from the first model that produces one.

        Raises:
            ConfigurationError: no API key is configured.
            ValidationError: the image payload is empty.
            AllBackendsExhausted: every candidate failed, or the deadline
                ran out first.
        """
        if not self._api_key:
            raise ConfigurationError("Missing GEMINI_API_KEY")
        if image is None or not image.data:
            raise ValidationError("Image not provided")

        payload = build_payload(build_prompt(label, symptoms), image)
        started = self._clock()
        last_error = "Unknown error"

        for model in self._models:
            remaining = self._deadline_s - (self._clock() - started)
            if remaining <= 0:
                last_error = f"Processing time limit of {self._deadline_s:.0f}s exceeded"
                logger.error("Deadline reached before trying %s", model)
                break

            logger.info("Trying model: %s", model)
            try:
                text = self._attempt(model, payload, timeout=min(self._request_timeout_s, remaining))
            except (TransportError, BackendError) as e:
                last_error = e.message
                logger.warning("%s failed: %s", model, e.message)
                continue

            logger.info("Report generated by %s", model)
            return text

        raise AllBackendsExhausted(last_error)

    def _attempt(self, model: str, payload: dict, timeout: float) -> str:
        """One request to one model. Raises TransportError or BackendError."""
        url = f"{self._api_base}/v1/models/{model}:generateContent"
        try:
            response = self._http.post(
                url,
                params={"key": self._api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=timeout,
            )
        except requests.RequestException as e:
            raise TransportError(str(e) or e.__class__.__name__, model=model) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            message = None
            if isinstance(body, dict) and isinstance(body.get("error"), dict):
                message = body["error"].get("message")
            raise BackendError(message or "Unknown API error", model=model, status_code=response.status_code)

        text = extract_text(body) if isinstance(body, dict) else None
        if not text:
            raise BackendError("Model returned no text", model=model, status_code=response.status_code)
        return text
