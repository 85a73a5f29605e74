"""Client for the report-generation endpoint."""

import logging
from typing import Optional

import requests

from core.errors import BackendError, TransportError

logger = logging.getLogger(__name__)


class ReportClient:
    """Posts a session snapshot to ``/api/analyze`` and returns the report."""

    def __init__(self, endpoint_url: str, timeout_s: float = 65.0, http=None):
        self._endpoint_url = endpoint_url
        self._timeout_s = timeout_s
        self._http = http or requests.Session()

    def request_report(self, payload: dict) -> str:
        """Send the payload and return the generated report text.

        Raises:
            TransportError: the endpoint could not be reached or timed out.
            BackendError: the endpoint answered with an error, or without
                a report.
        """
        logger.info("Requesting report (%d symptoms, vision=%s)",
                    len(payload.get("symptoms") or []),
                    bool(payload.get("visionAnalysis")))
        try:
            response = self._http.post(self._endpoint_url, json=payload, timeout=self._timeout_s)
        except requests.RequestException as e:
            logger.error("Report request failed: %s", e)
            raise TransportError(str(e) or e.__class__.__name__) from e

        body = _json_or_none(response)

        if not response.ok:
            detail = body.get("error") if isinstance(body, dict) else None
            message = f"API Error: {response.status_code}"
            logger.error("%s (%s)", message, detail or "no detail")
            raise BackendError(message, status_code=response.status_code)

        result = body.get("result") if isinstance(body, dict) else None
        if not result:
            raise BackendError("Empty report", status_code=response.status_code)
        return result


def _json_or_none(response) -> Optional[dict]:
    try:
        return response.json()
    except ValueError:
        return None
