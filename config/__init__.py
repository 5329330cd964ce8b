"""Configuration module."""

from .loader import (
    get_reranker_settings,
    get_server_config,
    is_tool_enabled,
    load_config,
    validate_env,
)

__all__ = [
    "load_config",
    "is_tool_enabled",
    "get_server_config",
    "get_reranker_settings",
    "validate_env",
]
