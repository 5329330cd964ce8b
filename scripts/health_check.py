#!/usr/bin/env python3
"""Health check script for the Universal Reranker MCP Server."""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Dict, List

from config import get_reranker_settings, load_config, validate_env
from logging_config import get_logger

logger = get_logger("unirerank.health")


def _check_config() -> Dict[str, Any]:
    try:
        settings = get_reranker_settings(load_config())
        return {"ok": True, "service": settings.service}
    except Exception as exc:
        return {"ok": False, "error": str(exc)}


async def _check_backend() -> Dict[str, Any]:
    from reranker import RerankError, RerankPolicy, build_reranker

    try:
        reranker = build_reranker(get_reranker_settings(load_config()))
        results = await reranker.rerank(
            "test",
            ["This is a test document"],
            RerankPolicy(top_k=1, threshold=float("-inf")),
        )
        return {
            "ok": True,
            "service": reranker.backend.service,
            "model": reranker.backend.model,
            "results": len(results),
        }
    except RerankError as exc:
        return {"ok": False, "error": exc.message, "error_code": exc.error_code}


async def run() -> int:
    errors: List[str] = []

    results: Dict[str, Any] = {"config": _check_config()}
    if not results["config"]["ok"]:
        errors.append("Config health check failed")
        logger.error("Health check failed: %s", results)
        return 1

    env_errors = validate_env()
    results["env"] = {"ok": not env_errors, "errors": env_errors}
    if env_errors:
        errors.extend(env_errors)

    results["backend"] = await _check_backend()
    if not results["backend"]["ok"]:
        errors.append("Reranker backend health check failed")

    logger.info("Health check results: %s", results)
    if errors:
        logger.error("Health check failed: %s", errors)
        return 1

    logger.info("Health check passed")
    return 0


if __name__ == "__main__":
    exit_code = asyncio.run(run())
    sys.exit(exit_code)
