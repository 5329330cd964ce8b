"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import httpx
import pytest


# Ensure repo root is importable during test collection.
_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))


@pytest.fixture(autouse=True)
def _set_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure credentials and timeouts come from the test, not the host."""
    monkeypatch.delenv("COHERE_API_KEY", raising=False)
    monkeypatch.delenv("COHERE_RERANKER_API_KEY", raising=False)
    monkeypatch.delenv("RERANK_API_KEY", raising=False)
    monkeypatch.setenv("RERANK_TIMEOUT", "5")


class FakeRerankServer:
    """Records requests and answers with a canned payload."""

    def __init__(self, payload: Any = None, status_code: int = 200) -> None:
        self.payload = payload if payload is not None else {"results": []}
        self.status_code = status_code
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.payload, (str, bytes)):
            return httpx.Response(self.status_code, content=self.payload)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def body(self, index: int = -1) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def sample_documents() -> List[Dict[str, Any]]:
    return [
        {"pageContent": "The quick brown fox jumps over the lazy dog", "metadata": {"source": "doc1"}},
        {"text": "Machine learning is a subset of artificial intelligence", "metadata": {"source": "doc2"}},
        {"content": "Natural language processing enables computers to understand human language", "metadata": {"source": "doc3"}},
        {"document": "Deep learning uses neural networks with multiple layers", "metadata": {"source": "doc4"}},
        {"title": "Custom Document", "data": {"value": "This should be stringified"}, "metadata": {"source": "doc5"}},
    ]


@pytest.fixture
def openai_payload() -> Dict[str, Any]:
    return {
        "results": [
            {"index": 1, "relevance_score": 0.95},
            {"index": 2, "relevance_score": 0.87},
            {"index": 0, "relevance_score": 0.65},
            {"index": 3, "relevance_score": 0.42},
            {"index": 4, "relevance_score": 0.15},
        ]
    }


@pytest.fixture
def cohere_payload() -> Dict[str, Any]:
    return {
        "results": [
            {"index": 1, "score": 0.92},
            {"index": 2, "score": 0.84},
            {"index": 0, "score": 0.71},
            {"index": 3, "score": 0.38},
            {"index": 4, "score": 0.12},
        ]
    }


@pytest.fixture
def make_server():
    """Factory for fake rerank servers backed by ``httpx.MockTransport``."""
    return FakeRerankServer
