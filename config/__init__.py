"""Configuration package for the Crosscheck Orchestrator."""

from .config import (
    ModelConfig,
    Bounds,
    CrosscheckConfig,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_OPENROUTER_MODEL,
    DEFAULT_GEMINI_MODEL,
    OPENROUTER_BASE_URL,
    load_config,
    parse_model_list,
    validate_api_keys
)

__all__ = [
    "ModelConfig",
    "Bounds",
    "CrosscheckConfig",
    "DEFAULT_OPENAI_MODEL",
    "DEFAULT_OPENROUTER_MODEL",
    "DEFAULT_GEMINI_MODEL",
    "OPENROUTER_BASE_URL",
    "load_config",
    "parse_model_list",
    "validate_api_keys"
]
