"""MCP tools for reranking documents and managing the result cache."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional

from config import is_tool_enabled
from logging_config import get_logger
from reranker.errors import RerankError
from reranker.models import CacheStatsResponse, RerankResponse
from reranker.service import UniversalReranker, get_reranker
from tools.utils import error_response, get_timeout, rerank_error_response, validate_k

logger = get_logger("unirerank.tools.rerank")


async def _guarded(name: str, run: Callable[[], Awaitable[Dict[str, Any]]]) -> Dict[str, Any]:
    timeout = get_timeout("RERANK_TIMEOUT", 30.0)
    try:
        return await asyncio.wait_for(run(), timeout=timeout)
    except asyncio.TimeoutError:
        return error_response(
            "TIMEOUT_ERROR",
            "Rerank request timed out",
            {"timeout_seconds": timeout},
        )
    except RerankError as e:
        logger.error("%s failed: %s", name, e)
        return rerank_error_response(e)
    except Exception as e:
        logger.error("%s failed: %s", name, e)
        return error_response("RERANK_ERROR", f"Reranking failed: {e}")


def register_rerank_tools(
    mcp: Any,
    config: Dict[str, Any],
    reranker_factory: Callable[[], UniversalReranker] = get_reranker,
) -> None:
    """Register rerank tools with the MCP server.
    
    Args:
        mcp: The FastMCP server instance.
        config: Configuration dictionary.
        reranker_factory: Returns the reranker shared by all tools.
    """
    
    if is_tool_enabled(config, "rerank"):
        @mcp.tool()
        async def rerank(
            query: str,
            documents: List[Any],
            top_k: Optional[int] = None,
            threshold: Optional[float] = None,
            include_original_scores: Optional[bool] = None,
        ) -> Dict[str, Any]:
            """Rerank documents by relevance to a query.
            
            Args:
                query: The search query.
                documents: Documents as strings or objects with a
                    pageContent/text/content/document field.
                top_k: Maximum number of documents to return.
                threshold: Minimum relevance score to keep.
                include_original_scores: Keep each document's prior score.
            
            Returns:
                Dictionary with query, results and counts.
            """
            error = validate_k("top_k", top_k)
            if error:
                return error_response("VALIDATION_ERROR", error, {"parameter": "top_k"})

            async def _run() -> Dict[str, Any]:
                reranker = reranker_factory()
                policy = reranker.defaults.policy(
                    top_k=top_k, threshold=threshold, include_original_scores=include_original_scores
                )
                results = await reranker.rerank(query, documents, policy)
                return RerankResponse(
                    query=query,
                    results=results,
                    original_count=len(documents) if isinstance(documents, list) else 0,
                    reranked_count=len(results),
                ).model_dump()

            return await _guarded("rerank", _run)
    
    if is_tool_enabled(config, "rerank_item"):
        @mcp.tool()
        async def rerank_item(
            item: Dict[str, Any],
            query: str,
            documents_field: str = "documents",
            top_k: Optional[int] = None,
            threshold: Optional[float] = None,
            include_original_scores: Optional[bool] = None,
        ) -> Dict[str, Any]:
            """Rerank the document list held in one field of an item.
            
            Args:
                item: Object carrying the documents and any other fields.
                query: The search query.
                documents_field: Name of the field holding the documents.
                top_k: Maximum number of documents to return.
                threshold: Minimum relevance score to keep.
                include_original_scores: Keep each document's prior score.
            
            Returns:
                The item's fields plus reranked_docs, original_count,
                reranked_count and query.
            """
            error = validate_k("top_k", top_k)
            if error:
                return error_response("VALIDATION_ERROR", error, {"parameter": "top_k"})
            if not isinstance(query, str) or not query.strip():
                return error_response("VALIDATION_ERROR", "Query cannot be empty", {"parameter": "query"})
            docs = item.get(documents_field) if isinstance(item, dict) else None
            if not isinstance(docs, list):
                return error_response(
                    "VALIDATION_ERROR",
                    f"No documents found in field: {documents_field}. Expected an array of documents.",
                    {"parameter": documents_field},
                )

            async def _run() -> Dict[str, Any]:
                reranked: List[Dict[str, Any]] = []
                if docs:
                    reranker = reranker_factory()
                    policy = reranker.defaults.policy(
                    top_k=top_k, threshold=threshold, include_original_scores=include_original_scores
                )
                    reranked = await reranker.rerank(query, docs, policy)
                return {
                    **item,
                    "reranked_docs": reranked,
                    "original_count": len(docs),
                    "reranked_count": len(reranked),
                    "query": query,
                }

            return await _guarded("rerank_item", _run)
    
    if is_tool_enabled(config, "clear_rerank_cache"):
        @mcp.tool()
        async def clear_rerank_cache() -> Dict[str, Any]:
            """Remove every cached rerank result.
            
            Returns:
                Dictionary with status and number of entries cleared.
            """
            cleared = reranker_factory().clear_cache()
            return {"status": "ok", "cleared": cleared}
    
    if is_tool_enabled(config, "rerank_cache_stats"):
        @mcp.tool()
        async def rerank_cache_stats() -> Dict[str, Any]:
            """Report cache hits, misses and size."""
            reranker = reranker_factory()
            return CacheStatsResponse(
                service=reranker.backend.service,
                **reranker.cache.stats(),
            ).model_dump()
