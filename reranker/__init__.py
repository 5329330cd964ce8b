"""Reranker module: remote scoring, result normalization and caching."""

from .cache import RerankCache, build_cache_key, get_cache
from .documents import extract_text, serialize
from .errors import (
    CredentialError,
    InvalidResponseError,
    RerankError,
    RerankValidationError,
    TransportError,
    UpstreamAPIError,
)
from .models import (
    CacheStatsResponse,
    RerankerSettings,
    RerankPolicy,
    RerankResponse,
    TemplateConfig,
)
from .processing import apply_policy, process_results, resolve_score
from .service import UniversalReranker, build_reranker, get_reranker

__all__ = [
    "RerankCache",
    "build_cache_key",
    "get_cache",
    "extract_text",
    "serialize",
    "CredentialError",
    "InvalidResponseError",
    "RerankError",
    "RerankValidationError",
    "TransportError",
    "UpstreamAPIError",
    "CacheStatsResponse",
    "RerankerSettings",
    "RerankPolicy",
    "RerankResponse",
    "TemplateConfig",
    "apply_policy",
    "process_results",
    "resolve_score",
    "UniversalReranker",
    "build_reranker",
    "get_reranker",
]
