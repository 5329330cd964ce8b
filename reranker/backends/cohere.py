"""Backend for the Cohere rerank API."""

from __future__ import annotations

import os
from typing import Any, Callable, Dict, List, Optional

import httpx

from reranker.backends.interface import DEFAULT_TIMEOUT, RerankBackend
from reranker.errors import CredentialError

COHERE_RERANK_URL = "https://api.cohere.ai/v1/rerank"

# Primary credential first, then the legacy name.
COHERE_CREDENTIAL_ENV_VARS = ("COHERE_API_KEY", "COHERE_RERANKER_API_KEY")

CredentialLookup = Callable[[str], Optional[str]]


def resolve_cohere_api_key(lookup: CredentialLookup = os.getenv) -> str:
    """Return the first Cohere API key that resolves.

    Raises:
        CredentialError: If none of the credential names resolve.
    """
    for name in COHERE_CREDENTIAL_ENV_VARS:
        value = lookup(name)
        if value:
            return value
    raise CredentialError(
        "No Cohere API key found",
        {"checked": list(COHERE_CREDENTIAL_ENV_VARS)},
    )


class CohereBackend(RerankBackend):
    """POSTs to the fixed Cohere endpoint with bearer authentication."""

    service = "cohere"
    label = "Cohere"

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        credential_lookup: CredentialLookup = os.getenv,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(client=client, timeout=timeout)
        self._model = model
        self._api_key = api_key
        self._credential_lookup = credential_lookup

    @property
    def model(self) -> str:
        return self._model

    @property
    def endpoint(self) -> str:
        return COHERE_RERANK_URL

    def headers(self) -> Dict[str, str]:
        api_key = self._api_key or resolve_cohere_api_key(self._credential_lookup)
        headers = super().headers()
        headers["Authorization"] = f"Bearer {api_key}"
        return headers

    def build_payload(self, query: str, documents: List[str], top_n: int) -> Dict[str, Any]:
        return {
            "model": self._model,
            "query": query,
            "documents": documents,
            "top_n": top_n,
        }
