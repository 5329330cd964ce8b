"""Pydantic models for reranker settings and tool payloads."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from reranker.errors import RerankValidationError

DEFAULT_ENDPOINT = "http://localhost:8000/v1/rerank"
DEFAULT_MODEL = "BAAI/bge-reranker-v2-m3"
DEFAULT_INSTRUCTION = "Given a web search query, retrieve relevant passages that answer the query"


class TemplateConfig(BaseModel):
    """Prompt wrapping for models that expect chat-formatted input."""
    
    enabled: bool = Field(default=False, description="Wrap query and documents before sending")
    preset: Literal["qwen3", "custom"] = Field(default="qwen3", description="Template preset")
    instruction: str = Field(default=DEFAULT_INSTRUCTION, description="Instruction used by the qwen3 preset")
    query_prefix: str = Field(default="", description="Text added before the query (custom preset)")
    query_suffix: str = Field(default="", description="Text added after the query (custom preset)")
    document_prefix: str = Field(default="", description="Text added before each document (custom preset)")
    document_suffix: str = Field(default="", description="Text added after each document (custom preset)")


class RerankPolicy(BaseModel):
    """Per-call filtering and caching policy."""
    
    top_k: int = Field(default=10, ge=0, description="Maximum number of documents to return")
    threshold: float = Field(default=0.0, description="Minimum relevance score to keep")
    include_original_scores: bool = Field(default=False, description="Carry prior document scores forward")
    enable_cache: bool = Field(default=False, description="Serve repeated requests from the cache")
    cache_ttl: int = Field(default=5, ge=1, description="Cache entry lifetime in minutes")
    
    def policy(self, **overrides: Any) -> RerankPolicy:
        """Build a validated call policy from these defaults, ignoring None overrides.
        
        Raises:
            RerankValidationError: An override is out of range or of the wrong type.
        """
        values = {name: getattr(self, name) for name in RerankPolicy.model_fields}
        values.update({name: value for name, value in overrides.items() if value is not None})
        try:
            return RerankPolicy.model_validate(values)
        except ValidationError as exc:
            first = exc.errors()[0]
            parameter = str(first["loc"][0]) if first.get("loc") else "policy"
            raise RerankValidationError(f"Invalid {parameter}: {first['msg']}", parameter=parameter) from exc


class RerankerSettings(RerankPolicy):
    """Backend selection plus default policy values."""
    
    service: Literal["openai-compatible", "cohere"] = Field(default="openai-compatible")
    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="OpenAI-compatible rerank endpoint URL")
    model: str = Field(default=DEFAULT_MODEL, description="Model for the OpenAI-compatible endpoint")
    cohere_model: Literal["rerank-v3.5", "rerank-english-v3.0", "rerank-multilingual-v3.0", "custom"] = Field(
        default="rerank-v3.5",
    )
    cohere_custom_model: str = Field(default="", description="Model name used when cohere_model is custom")
    templates: TemplateConfig = Field(default_factory=TemplateConfig)


class RerankResponse(BaseModel):
    """Response model for the rerank tool."""
    
    query: str = Field(..., description="The original query")
    results: List[Dict[str, Any]] = Field(default_factory=list, description="Reranked documents")
    original_count: int = Field(default=0, description="Number of candidate documents")
    reranked_count: int = Field(default=0, description="Number of documents returned")


class CacheStatsResponse(BaseModel):
    """Response model for cache statistics."""
    
    hits: int = Field(default=0, description="Cache hit count")
    misses: int = Field(default=0, description="Cache miss count")
    size: int = Field(default=0, description="Current cache size")
    max_size: int = Field(default=0, description="Maximum cache size")
    service: Optional[str] = Field(default=None, description="Configured backend")
