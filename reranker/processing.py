"""Normalization of backend responses into scored results."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Optional, Sequence

from logging_config import get_logger
from reranker.documents import extract_text, is_present
from reranker.errors import InvalidResponseError

logger = get_logger("unirerank.processing")

SCORE_FIELD = "_rerank_score"
INDEX_FIELD = "_original_index"
ORIGINAL_SCORE_FIELD = "_original_score"

# Fields on an input document that hold a score from an earlier stage.
PRIOR_SCORE_FIELDS = ("_original_score", "score")

ScoredResult = Dict[str, Any]


def resolve_score(entry: Mapping[str, Any]) -> float:
    """Return ``relevance_score``, else ``score``, else 0.

    Missing, zero, non-numeric and non-finite values all fall through, so
    a literal 0 from the backend is indistinguishable from a missing one.
    """
    for field in ("relevance_score", "score"):
        value = entry.get(field)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if is_present(value) and math.isfinite(value):
            return float(value)
    return 0.0


def _resolve_index(entry: Mapping[str, Any], count: int) -> Optional[int]:
    index = entry.get("index")
    if isinstance(index, bool) or not isinstance(index, int):
        return None
    if index < 0 or index >= count:
        return None
    return index


def _scored_copy(document: Any, score: float, index: int, include_original_scores: bool) -> ScoredResult:
    if isinstance(document, Mapping):
        result: ScoredResult = dict(document)
    else:
        result = {"page_content": extract_text(document), "metadata": {}}
    result[SCORE_FIELD] = score
    result[INDEX_FIELD] = index
    if include_original_scores and isinstance(document, Mapping):
        for field in PRIOR_SCORE_FIELDS:
            if document.get(field) is not None:
                result[ORIGINAL_SCORE_FIELD] = document[field]
                break
    return result


def process_results(
    raw_results: Any,
    documents: Sequence[Any],
    threshold: Optional[float] = None,
    include_original_scores: bool = False,
) -> List[ScoredResult]:
    """Map raw backend results back onto the original documents.
    
    Args:
        raw_results: The ``results`` list from the backend response.
        documents: The documents sent, in request order.
        threshold: Minimum score to keep; None keeps every result.
        include_original_scores: Carry a document's prior score forward
            as ``_original_score``.
    
    Returns:
        Scored copies of the documents, sorted by descending score. Equal
        scores keep their response order.
    
    Raises:
        InvalidResponseError: If ``raw_results`` is not a list.
    """
    if not isinstance(raw_results, list):
        raise InvalidResponseError(
            "Invalid reranking results: expected array of results",
            {"received": type(raw_results).__name__},
        )

    scored: List[ScoredResult] = []
    for entry in raw_results:
        if not isinstance(entry, Mapping):
            logger.warning("Skipping malformed result entry: %r", entry)
            continue
        score = resolve_score(entry)
        if threshold is not None and score < threshold:
            continue
        index = _resolve_index(entry, len(documents))
        if index is None:
            logger.warning(
                "Skipping result with index %r outside %s documents",
                entry.get("index"),
                len(documents),
            )
            continue
        scored.append(_scored_copy(documents[index], score, index, include_original_scores))

    return sorted(scored, key=lambda result: result[SCORE_FIELD], reverse=True)


def apply_policy(results: List[ScoredResult], threshold: float, top_k: int) -> List[ScoredResult]:
    """Filter sorted results by threshold and keep at most ``top_k``."""
    kept = [dict(result) for result in results if result[SCORE_FIELD] >= threshold]
    return kept[: max(top_k, 0)]
