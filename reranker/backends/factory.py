"""Factory for creating rerank backends from settings."""

from __future__ import annotations

import os
from typing import Optional

import httpx

from reranker.backends.cohere import CohereBackend, CredentialLookup
from reranker.backends.interface import DEFAULT_TIMEOUT, RerankBackend
from reranker.backends.openai_compatible import OpenAICompatibleBackend
from reranker.backends.templates import build_template
from reranker.errors import RerankValidationError
from reranker.models import RerankerSettings


def resolve_cohere_model(settings: RerankerSettings) -> str:
    if settings.cohere_model != "custom":
        return settings.cohere_model
    custom = settings.cohere_custom_model.strip()
    if not custom:
        raise RerankValidationError(
            "cohere_custom_model must be set when cohere_model is custom",
            parameter="cohere_custom_model",
        )
    return custom


def create_backend(
    settings: RerankerSettings,
    client: Optional[httpx.AsyncClient] = None,
    credential_lookup: CredentialLookup = os.getenv,
    timeout: float = DEFAULT_TIMEOUT,
) -> RerankBackend:
    if settings.service == "cohere":
        return CohereBackend(
            model=resolve_cohere_model(settings),
            credential_lookup=credential_lookup,
            client=client,
            timeout=timeout,
        )
    return OpenAICompatibleBackend(
        endpoint=settings.endpoint,
        model=settings.model,
        api_key=credential_lookup("RERANK_API_KEY"),
        template=build_template(settings.templates),
        client=client,
        timeout=timeout,
    )
