"""Document-compressor style wrapper for vector-store pipelines."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.documents import Document

from reranker.documents import extract_text
from reranker.processing import INDEX_FIELD, ORIGINAL_SCORE_FIELD, SCORE_FIELD, ScoredResult
from reranker.service import UniversalReranker


def _as_record(document: Any) -> Any:
    if isinstance(document, Document):
        return {"page_content": document.page_content, "metadata": dict(document.metadata or {})}
    return document


def _page_content(result: ScoredResult) -> str:
    page_content = result.get("page_content")
    if isinstance(page_content, str):
        return page_content
    return extract_text(strip_markers(result))


class RerankerProvider:
    """Exposes a ``UniversalReranker`` to retrievers that compress documents."""

    def __init__(self, reranker: UniversalReranker) -> None:
        self._reranker = reranker

    async def arerank(
        self,
        query: str,
        documents: Sequence[Any],
        top_n: Optional[int] = None,
        threshold: Optional[float] = None,
    ) -> List[ScoredResult]:
        """Rerank dicts, strings or LangChain documents."""
        policy = self._reranker.defaults.policy(top_k=top_n, threshold=threshold)
        records = [_as_record(document) for document in documents or []]
        return await self._reranker.rerank(query, records, policy)

    async def acompress_documents(
        self,
        documents: Sequence[Document],
        query: str,
        top_n: Optional[int] = None,
    ) -> List[Document]:
        """Return the documents in reranked order, scores in metadata."""
        ranked = await self.arerank(query, documents, top_n=top_n)
        compressed: List[Document] = []
        for result in ranked:
            metadata: Dict[str, Any] = dict(result.get("metadata") or {})
            metadata["relevance_score"] = result[SCORE_FIELD]
            if ORIGINAL_SCORE_FIELD in result:
                metadata["original_score"] = result[ORIGINAL_SCORE_FIELD]
            compressed.append(Document(page_content=_page_content(result), metadata=metadata))
        return compressed

    def compress_documents(
        self,
        documents: Sequence[Document],
        query: str,
        top_n: Optional[int] = None,
    ) -> List[Document]:
        return asyncio.run(self.acompress_documents(documents, query, top_n=top_n))


def strip_markers(result: ScoredResult) -> Dict[str, Any]:
    """Remove the rerank marker fields from a scored result."""
    return {
        key: value
        for key, value in result.items()
        if key not in (SCORE_FIELD, INDEX_FIELD, ORIGINAL_SCORE_FIELD)
    }
