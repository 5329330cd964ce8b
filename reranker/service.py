"""Reranking orchestration: cache lookup, remote scoring and filtering."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from logging_config import get_logger
from reranker.backends import RerankBackend, create_backend
from reranker.cache import RerankCache, build_cache_key, get_cache
from reranker.documents import extract_texts
from reranker.errors import RerankValidationError
from reranker.models import RerankerSettings, RerankPolicy
from reranker.processing import ScoredResult, apply_policy, process_results

logger = get_logger("unirerank.service")


def validate_request(query: Any, documents: Any) -> None:
    """Reject a blank query or a non-list document collection."""
    if not isinstance(query, str) or not query.strip():
        raise RerankValidationError("Query cannot be empty", parameter="query")
    if not isinstance(documents, (list, tuple)):
        raise RerankValidationError(
            "No documents found. Expected an array of documents.",
            parameter="documents",
        )


def require_encodable(texts: Sequence[str], parameter: str) -> None:
    """Reject text that cannot be sent as UTF-8, such as lone surrogates."""
    for text in texts:
        try:
            text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise RerankValidationError(
                f"Invalid {parameter}: text is not valid UTF-8",
                parameter=parameter,
            ) from exc


class UniversalReranker:
    """Reranks documents through one backend, sharing a result cache."""
    
    def __init__(
        self,
        backend: RerankBackend,
        cache: Optional[RerankCache] = None,
        defaults: Optional[RerankPolicy] = None,
    ) -> None:
        """Initialize the reranker.
        
        Args:
            backend: The remote service that scores documents.
            cache: Result cache; a private one is created if omitted.
            defaults: Policy used when a call does not pass one.
        """
        self._backend = backend
        self._cache = cache if cache is not None else RerankCache()
        self._defaults = defaults or RerankPolicy()
    
    @property
    def backend(self) -> RerankBackend:
        return self._backend
    
    @property
    def cache(self) -> RerankCache:
        return self._cache
    
    @property
    def defaults(self) -> RerankPolicy:
        return self._defaults
    
    async def rerank(
        self,
        query: str,
        documents: Sequence[Any],
        policy: Optional[RerankPolicy] = None,
    ) -> List[ScoredResult]:
        """Rerank documents against a query.
        
        Args:
            query: The search query.
            documents: Candidate documents (mappings or strings).
            policy: top_k, threshold and cache settings for this call.
        
        Returns:
            Scored copies of the documents at or above the threshold,
            highest score first, at most ``top_k`` of them.
        """
        validate_request(query, documents)
        policy = policy or self._defaults
        if not documents:
            return []
        require_encodable([query], "query")
        texts = extract_texts(documents)
        require_encodable(texts, "documents")

        cache_key = None
        if policy.enable_cache:
            cache_key = build_cache_key(self._backend.service, self._backend.model, query, documents)
            cached = self._cache.get(cache_key, policy.cache_ttl)
            if cached is not None:
                logger.debug("Rerank cache hit for %s docs", len(documents))
                return apply_policy(cached, policy.threshold, policy.top_k)

        top_n = min(policy.top_k, len(documents))
        raw_results = await self._backend.fetch(query, texts, top_n)
        scored = process_results(
            raw_results,
            documents,
            include_original_scores=policy.include_original_scores,
        )

        if cache_key is not None:
            self._cache.put(cache_key, scored)
        return apply_policy(scored, policy.threshold, policy.top_k)
    
    def clear_cache(self) -> int:
        """Empty the result cache and return how many entries were removed."""
        removed = self._cache.clear()
        logger.info("Cleared %s cached rerank results", removed)
        return removed


def build_reranker(
    settings: RerankerSettings,
    cache: Optional[RerankCache] = None,
    **backend_options: Any,
) -> UniversalReranker:
    """Build a reranker whose defaults come from the settings."""
    backend = create_backend(settings, **backend_options)
    return UniversalReranker(backend, cache=cache, defaults=settings.policy())


# Global reranker instance
_reranker: UniversalReranker | None = None


def get_reranker() -> UniversalReranker:
    """Get or create the process-wide reranker from the loaded config."""
    global _reranker
    if _reranker is None:
        from config import get_reranker_settings, load_config
        from tools.utils import get_timeout

        settings = get_reranker_settings(load_config())
        timeout = get_timeout("RERANK_TIMEOUT", 30.0)
        _reranker = build_reranker(settings, cache=get_cache(), timeout=timeout)
    return _reranker

