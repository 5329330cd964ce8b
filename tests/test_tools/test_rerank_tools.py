"""Tests for the rerank MCP tools."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict

import pytest

from config.loader import load_config
from reranker.backends import OpenAICompatibleBackend
from reranker.models import RerankPolicy
from reranker.processing import SCORE_FIELD
from reranker.service import UniversalReranker
from tools.rerank_tools import register_rerank_tools

ENDPOINT = "http://localhost:8000/v1/rerank"


class FakeMCP:
    """Collects functions registered through ``@mcp.tool()``."""

    def __init__(self) -> None:
        self.tools: Dict[str, Callable[..., Any]] = {}

    def tool(self):
        def decorator(fn):
            self.tools[fn.__name__] = fn
            return fn
        return decorator


@pytest.fixture
def config(tmp_path):
    return load_config(tmp_path / "missing.yaml")


def _register(config, server, **defaults) -> FakeMCP:
    backend = OpenAICompatibleBackend(ENDPOINT, "bge", client=server.client())
    reranker = UniversalReranker(backend, defaults=RerankPolicy(**defaults))
    mcp = FakeMCP()
    register_rerank_tools(mcp, config, reranker_factory=lambda: reranker)
    return mcp


def test_all_tools_registered(config, make_server) -> None:
    mcp = _register(config, make_server())
    assert set(mcp.tools) == {"rerank", "rerank_item", "clear_rerank_cache", "rerank_cache_stats"}


def test_disabled_tools_are_skipped(make_server) -> None:
    mcp = _register({"tools": {"rerank": {"enabled": True}}}, make_server())
    assert set(mcp.tools) == {"rerank"}


def test_rerank_tool(config, make_server, sample_documents, openai_payload) -> None:
    mcp = _register(config, make_server(openai_payload))
    response = asyncio.run(mcp.tools["rerank"]("ai", sample_documents, top_k=3, threshold=0.5))
    assert response["query"] == "ai"
    assert response["original_count"] == 5
    assert response["reranked_count"] == 3
    assert [result[SCORE_FIELD] for result in response["results"]] == [0.95, 0.87, 0.65]


def test_rerank_tool_uses_defaults(config, make_server, sample_documents, openai_payload) -> None:
    mcp = _register(config, make_server(openai_payload), top_k=1)
    response = asyncio.run(mcp.tools["rerank"]("ai", sample_documents))
    assert response["reranked_count"] == 1


def test_rerank_tool_validation_error(config, make_server, sample_documents) -> None:
    server = make_server()
    mcp = _register(config, server)
    response = asyncio.run(mcp.tools["rerank"]("", sample_documents))
    assert response["status"] == "error"
    assert response["error_code"] == "VALIDATION_ERROR"
    assert response["details"] == {"parameter": "query"}

    response = asyncio.run(mcp.tools["rerank"]("ai", sample_documents, top_k=-1))
    assert response["details"] == {"parameter": "top_k"}
    assert server.calls == 0


def test_rerank_tool_rejects_invalid_override(config, make_server, sample_documents) -> None:
    server = make_server()
    mcp = _register(config, server)
    response = asyncio.run(mcp.tools["rerank"]("ai", sample_documents, threshold="high"))
    assert response["error_code"] == "VALIDATION_ERROR"
    assert response["details"] == {"parameter": "threshold"}
    assert server.calls == 0


def test_rerank_tool_upstream_error(config, make_server, sample_documents) -> None:
    mcp = _register(config, make_server({"error": "overloaded"}, status_code=503))
    response = asyncio.run(mcp.tools["rerank"]("ai", sample_documents))
    assert response["error_code"] == "UPSTREAM_API_ERROR"
    assert response["error"] == "OpenAI-compatible API Error (503)"
    assert response["details"]["body"] == {"error": "overloaded"}


def test_rerank_item_merges_fields(config, make_server, sample_documents, openai_payload) -> None:
    mcp = _register(config, make_server(openai_payload))
    item = {"id": "item-1", "hits": sample_documents}
    response = asyncio.run(
        mcp.tools["rerank_item"](item, "ai", documents_field="hits", threshold=0.7)
    )
    assert response["id"] == "item-1"
    assert response["hits"] == sample_documents
    assert response["original_count"] == 5
    assert response["reranked_count"] == 2
    assert response["query"] == "ai"
    assert [doc[SCORE_FIELD] for doc in response["reranked_docs"]] == [0.95, 0.87]


def test_rerank_item_missing_field(config, make_server) -> None:
    server = make_server()
    mcp = _register(config, server)
    response = asyncio.run(mcp.tools["rerank_item"]({"other": []}, "ai"))
    assert response["error_code"] == "VALIDATION_ERROR"
    assert "No documents found in field: documents" in response["error"]
    assert server.calls == 0


def test_rerank_item_empty_documents(config, make_server) -> None:
    server = make_server()
    mcp = _register(config, server)
    response = asyncio.run(mcp.tools["rerank_item"]({"documents": []}, "ai"))
    assert response["reranked_docs"] == []
    assert response["original_count"] == 0
    assert response["reranked_count"] == 0
    assert server.calls == 0


def test_cache_tools(config, make_server, sample_documents, openai_payload) -> None:
    server = make_server(openai_payload)
    mcp = _register(config, server, enable_cache=True)

    asyncio.run(mcp.tools["rerank"]("ai", sample_documents))
    asyncio.run(mcp.tools["rerank"]("ai", sample_documents))
    stats = asyncio.run(mcp.tools["rerank_cache_stats"]())
    assert server.calls == 1
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["size"] == 1
    assert stats["service"] == "openai-compatible"

    cleared = asyncio.run(mcp.tools["clear_rerank_cache"]())
    assert cleared == {"status": "ok", "cleared": 1}
    asyncio.run(mcp.tools["rerank"]("ai", sample_documents))
    assert server.calls == 2
