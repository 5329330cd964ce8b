"""Remote reranking backends."""

from .cohere import COHERE_RERANK_URL, CohereBackend, resolve_cohere_api_key
from .factory import create_backend, resolve_cohere_model
from .interface import RerankBackend
from .openai_compatible import OpenAICompatibleBackend
from .templates import PromptTemplate, build_template, qwen3_template

__all__ = [
    "COHERE_RERANK_URL",
    "CohereBackend",
    "OpenAICompatibleBackend",
    "PromptTemplate",
    "RerankBackend",
    "build_template",
    "create_backend",
    "qwen3_template",
    "resolve_cohere_api_key",
    "resolve_cohere_model",
]
