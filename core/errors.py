"""Exception types shared by the client, the dispatcher, and the API."""

from typing import Optional


class DermaVisionError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(DermaVisionError):
    """A required setting (the API credential) is missing."""


class ValidationError(DermaVisionError):
    """Required user input is missing or unusable."""


class TransportError(DermaVisionError):
    """A remote service could not be reached."""

    def __init__(self, message: str, model: Optional[str] = None):
        super().__init__(message)
        self.model = model


class BackendError(DermaVisionError):
    """A remote service answered, but with an error or without usable text."""

    def __init__(self, message: str, model: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.model = model
        self.status_code = status_code


class AllBackendsExhausted(DermaVisionError):
    """Every candidate model failed for one report request."""

    def __init__(self, last_error: str):
        super().__init__(f"All Gemini models failed. Last error: {last_error}")
        self.last_error = last_error


class CollaboratorFailure(DermaVisionError):
    """The image classification service failed."""
