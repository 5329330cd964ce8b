"""Backend for OpenAI-compatible rerank endpoints (vLLM, LocalAI, Infinity)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from reranker.backends.interface import DEFAULT_TIMEOUT, RerankBackend
from reranker.backends.templates import PromptTemplate


class OpenAICompatibleBackend(RerankBackend):
    """POSTs ``{model, query, documents, top_n}`` and reads ``relevance_score``."""

    service = "openai-compatible"
    label = "OpenAI-compatible"

    def __init__(
        self,
        endpoint: str,
        model: str,
        api_key: Optional[str] = None,
        template: Optional[PromptTemplate] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(client=client, timeout=timeout)
        self._endpoint = endpoint
        self._model = model
        self._api_key = api_key
        self._template = template

    @property
    def model(self) -> str:
        return self._model

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def template(self) -> Optional[PromptTemplate]:
        return self._template

    def headers(self) -> Dict[str, str]:
        headers = super().headers()
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def build_payload(self, query: str, documents: List[str], top_n: int) -> Dict[str, Any]:
        if self._template is not None:
            query = self._template.format_query(query)
            documents = [self._template.format_document(text) for text in documents]
        return {
            "model": self._model,
            "query": query,
            "documents": documents,
            "top_n": top_n,
        }
