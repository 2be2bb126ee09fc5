"""
Inference error hierarchy.

Adapters raise ProviderHTTPError / ProviderResponseError; the client
classifies them into ConfigurationError, TransientProviderError or
TerminalProviderError and reports the outcome as an InferenceResult.
Nothing here ever carries the API credential.
"""

from typing import Optional

# Upper bound on provider bodies kept for diagnostics
MAX_DETAIL_CHARS = 800


def truncate(text: Optional[str], limit: int = MAX_DETAIL_CHARS) -> Optional[str]:
    if text is None:
        return None
    return text if len(text) <= limit else text[:limit] + "..."


class InferenceError(Exception):
    """Base class for inference failures."""
    pass


class ConfigurationError(InferenceError):
    """Required credential or setting is missing."""
    pass


class ProviderHTTPError(InferenceError):
    """Provider answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = truncate(body) or ""
        super().__init__(f"Provider returned HTTP {status_code}")


class ProviderResponseError(InferenceError):
    """Provider answered 2xx but the envelope could not be read."""
    pass


class TransientProviderError(ProviderHTTPError):
    """Provider signalled temporary unavailability (e.g. model warming up)."""
    pass


class TerminalProviderError(InferenceError):
    """Non-retryable provider or transport failure."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = truncate(body)
        super().__init__(message)
