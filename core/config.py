"""Environment-driven settings for the client and the report endpoint."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from core.errors import ConfigurationError

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")

# Tried in this order; the first model that answers with text wins.
GEMINI_MODELS: Tuple[str, ...] = (
    "gemini-2.0-flash",
    "gemini-2.0-pro",
    "gemini-1.5-flash",
    "gemini-1.5-pro",
)

DEFAULT_GEMINI_API_BASE = "https://generativelanguage.googleapis.com"
DEFAULT_CLASSIFIER_SPACE = "Heckur0009/dermascan-api"
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8000

# Hosting request ceiling for one report generation, in seconds.
REPORT_DEADLINE_S = 60.0
# Pause between symptom submission and the report request, in milliseconds.
REPORT_DELAY_MS = 500


@dataclass
class Settings:
    """Process-wide configuration, read from the environment."""
    gemini_api_key: Optional[str] = None
    gemini_api_base: str = DEFAULT_GEMINI_API_BASE
    gemini_models: Tuple[str, ...] = GEMINI_MODELS
    classifier_space: str = DEFAULT_CLASSIFIER_SPACE
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT
    api_url: str = f"http://{DEFAULT_API_HOST}:{DEFAULT_API_PORT}/api/analyze"
    report_deadline_s: float = REPORT_DEADLINE_S
    report_delay_ms: int = REPORT_DELAY_MS
    log_level: str = "INFO"

    @property
    def client_timeout_s(self) -> float:
        """HTTP timeout for the client, a little above the server deadline."""
        return self.report_deadline_s + 5.0

    def require_api_key(self) -> str:
        """Return the Gemini credential or fail if it is not configured."""
        if not self.gemini_api_key:
            raise ConfigurationError("Missing GEMINI_API_KEY")
        return self.gemini_api_key


def get_settings() -> Settings:
    """Build settings from the current environment.

    Re-read on every call so the endpoint sees credential changes at
    request time.
    """
    host = os.getenv("DERMAVISION_API_HOST", DEFAULT_API_HOST)
    port = int(os.getenv("DERMAVISION_API_PORT", str(DEFAULT_API_PORT)))
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_GEMINI_API_KEY")

    return Settings(
        gemini_api_key=api_key or None,
        gemini_api_base=os.getenv("GEMINI_API_BASE", DEFAULT_GEMINI_API_BASE).rstrip("/"),
        classifier_space=os.getenv("DERMAVISION_CLASSIFIER_SPACE", DEFAULT_CLASSIFIER_SPACE),
        api_host=host,
        api_port=port,
        api_url=os.getenv("DERMAVISION_API_URL", f"http://{host}:{port}/api/analyze"),
        log_level=os.getenv("DERMAVISION_LOG_LEVEL", "INFO"),
    )
