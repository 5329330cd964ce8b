"""Shared utilities for MCP tools."""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from logging_config import get_logger
from reranker.errors import RerankError

logger = get_logger("unirerank.tools")


def error_response(
    error_code: str,
    error: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Create a standardized error response."""
    payload = {
        "status": "error",
        "error": error,
        "error_code": error_code,
        "details": details or {},
    }
    return payload


def rerank_error_response(exc: RerankError) -> Dict[str, Any]:
    """Create an error response from a rerank failure."""
    return error_response(exc.error_code, exc.message, exc.details)


def validate_k(name: str, value: Optional[int], minimum: int = 0, maximum: int = 1000) -> Optional[str]:
    """Validate integer bounds for k values; None means use the default."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        return f"{name} must be an integer"
    if value < minimum or value > maximum:
        return f"{name} must be between {minimum} and {maximum}"
    return None


def get_timeout(env_name: str, default: float) -> float:
    """Read timeout seconds from environment."""
    raw = os.getenv(env_name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid %s value: %s", env_name, raw)
        return default
