"""Error types raised by the reranking pipeline."""

from __future__ import annotations

from typing import Any, Dict, Optional


class RerankError(Exception):
    """Base class for reranking failures surfaced to callers."""

    error_code = "RERANK_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RerankValidationError(RerankError, ValueError):
    """Invalid caller input, raised before any network activity."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, parameter: str) -> None:
        super().__init__(message, {"parameter": parameter})
        self.parameter = parameter


class InvalidResponseError(RerankError):
    """The backend answered but the payload has no usable results list."""

    error_code = "INVALID_RESPONSE"


class UpstreamAPIError(RerankError):
    """The backend answered with a non-success status."""

    error_code = "UPSTREAM_API_ERROR"

    def __init__(self, label: str, status_code: int, body: Any) -> None:
        super().__init__(
            f"{label} API Error ({status_code})",
            {"status_code": status_code, "body": body},
        )
        self.status_code = status_code
        self.body = body


class TransportError(RerankError):
    """The request failed without a structured response."""

    error_code = "TRANSPORT_ERROR"


class CredentialError(RerankError):
    """No API credential could be resolved for a backend."""

    error_code = "CREDENTIAL_ERROR"
