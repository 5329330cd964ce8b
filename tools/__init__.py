"""MCP tools module."""

from .rerank_tools import register_rerank_tools

__all__ = [
    "register_rerank_tools",
]
