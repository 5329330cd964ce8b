"""YAML configuration loader for tool toggles and reranker settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, Field, ValidationError

from logging_config import get_logger
from reranker.models import RerankerSettings

logger = get_logger("unirerank.config")


_CONFIG_CACHE: Dict[str, Any] | None = None

TOOL_NAMES = ("rerank", "rerank_item", "clear_rerank_cache", "rerank_cache_stats")


class ToolConfig(BaseModel):
    """Tool configuration schema."""

    enabled: bool = False
    description: str | None = None


class ServerConfig(BaseModel):
    """Server configuration schema."""

    name: str = "Universal Reranker MCP Server"
    transport: str = Field(default="stdio", pattern="^(stdio|streamable-http)$")


class AppConfig(BaseModel):
    """Top-level configuration schema."""

    server: ServerConfig = ServerConfig()
    tools: Dict[str, ToolConfig] = Field(default_factory=dict)
    reranker: RerankerSettings = Field(default_factory=RerankerSettings)


def load_config(config_path: str | Path | None = None) -> Dict[str, Any]:
    """Load configuration from YAML file.
    
    Args:
        config_path: Path to config file. If None, uses config.yaml in package root.
    
    Returns:
        Configuration dictionary.
    """
    global _CONFIG_CACHE
    
    if _CONFIG_CACHE is not None and config_path is None:
        return _CONFIG_CACHE
    
    if config_path is None:
        config_path = Path(__file__).parent.parent / "config.yaml"
    else:
        config_path = Path(config_path)
    
    if not config_path.exists():
        _CONFIG_CACHE = _default_config()
        return _CONFIG_CACHE
    
    with open(config_path, "r") as f:
        raw_config = yaml.safe_load(f) or {}

    try:
        validated = AppConfig.model_validate(raw_config)
        _CONFIG_CACHE = validated.model_dump()
    except ValidationError as exc:
        logger.error("Invalid config.yaml: %s", exc)
        raise ValueError("Invalid configuration file") from exc

    return _CONFIG_CACHE


def _default_config() -> Dict[str, Any]:
    """Return default configuration with all tools enabled."""
    default = {
        "tools": {name: {"enabled": True} for name in TOOL_NAMES},
    }
    validated = AppConfig.model_validate(default)
    return validated.model_dump()


def is_tool_enabled(config: Dict[str, Any], tool_name: str) -> bool:
    """Check if a tool is enabled in the configuration.
    
    Args:
        config: Configuration dictionary.
        tool_name: Name of the tool to check.
    
    Returns:
        True if the tool is enabled, False otherwise.
    """
    tools = config.get("tools", {})
    tool_config = tools.get(tool_name, {})
    return tool_config.get("enabled", False)


def get_server_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Get server configuration.
    
    Args:
        config: Configuration dictionary.
    
    Returns:
        Server configuration dictionary.
    """
    return config.get("server", {
        "name": "Universal Reranker MCP Server",
        "transport": "stdio",
    })


def get_reranker_settings(config: Dict[str, Any]) -> RerankerSettings:
    """Get validated reranker settings from the configuration."""
    return RerankerSettings.model_validate(config.get("reranker", {}))


def reload_config() -> Dict[str, Any]:
    """Force reload of configuration from file."""
    global _CONFIG_CACHE
    _CONFIG_CACHE = None
    return load_config()


def validate_env(config: Dict[str, Any] | None = None) -> List[str]:
    """Validate environment variables required by the configured backend."""
    errors: List[str] = []
    settings = get_reranker_settings(config if config is not None else load_config())

    if settings.service == "cohere":
        if not (os.getenv("COHERE_API_KEY") or os.getenv("COHERE_RERANKER_API_KEY")):
            errors.append("COHERE_API_KEY (or legacy COHERE_RERANKER_API_KEY) is required for service=cohere")
        if settings.cohere_model == "custom" and not settings.cohere_custom_model.strip():
            errors.append("reranker.cohere_custom_model is required when cohere_model=custom")

    timeout = os.getenv("RERANK_TIMEOUT")
    if timeout is not None:
        try:
            float(timeout)
        except ValueError:
            errors.append(f"RERANK_TIMEOUT must be a number, got {timeout!r}")

    return errors
