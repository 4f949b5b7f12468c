"""
Configuration module for the Crosscheck Orchestrator.
Handles API keys, model settings, and orchestrator bounds.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


DEFAULT_OPENAI_MODEL = "gpt-4.1-mini"
DEFAULT_OPENROUTER_MODEL = "anthropic/claude-3.5-sonnet"
DEFAULT_GEMINI_MODEL = "gemini-1.5-pro"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


@dataclass
class ModelConfig:
    """Configuration for a specific LLM model."""
    name: str
    api_key: Optional[str]
    model_id: str
    max_tokens: int = 900
    temperature: float = 0.2
    base_url: Optional[str] = None


@dataclass
class Bounds:
    """Inclusive integer range with a default used when the caller sends nothing."""
    minimum: int
    maximum: int
    default: int

    def clamp(self, value) -> int:
        # bool is an int subclass; treat it as "not supplied"
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            value = self.default
        elif value != value or value in (float("inf"), float("-inf")):
            value = self.default
        return max(self.minimum, min(self.maximum, int(value)))

    def is_valid(self) -> bool:
        return self.minimum <= self.default <= self.maximum


@dataclass
class CrosscheckConfig:
    """Everything the orchestrator reads from the process environment."""
    openai: ModelConfig
    openrouter: ModelConfig
    gemini: ModelConfig
    synthesis: ModelConfig

    # Downstream models the aggregation gateway fans out to
    openrouter_models: List[str] = field(default_factory=lambda: [DEFAULT_OPENROUTER_MODEL])
    gemini_enabled: bool = True

    # Per-call deadline in milliseconds
    timeout_ms: Bounds = field(default_factory=lambda: Bounds(8_000, 120_000, 45_000))

    # Per-call completion budget for provider adapters
    max_tokens: Bounds = field(default_factory=lambda: Bounds(200, 2_000, 900))

    # Completion budget for the synthesis call
    synthesis_max_tokens: Bounds = field(default_factory=lambda: Bounds(256, 1_200, 900))

    # Characters of each provider output handed to the synthesizer
    synthesis_char_budget: int = 12_000

    # Shared secret for the HTTP boundary
    crosscheck_key: Optional[str] = None

    # Character ceilings applied by the request boundary
    max_question_chars: int = 4_000
    max_facts_chars: int = 12_000
    max_constraints_chars: int = 2_000
    max_jurisdiction_chars: int = 200

    debug: bool = False


def _env(name: str) -> str:
    return os.getenv(name, "").strip()


def _env_int(name: str, fallback: int) -> int:
    raw = _env(name)
    if not raw:
        return fallback
    try:
        return int(raw)
    except ValueError:
        return fallback


def _env_flag(name: str, fallback: bool) -> bool:
    raw = _env(name).lower()
    if not raw:
        return fallback
    return raw in ("1", "true", "yes", "on")


def parse_model_list(raw: Optional[str]) -> List[str]:
    """
    Split a comma-separated model list.

    Example: "anthropic/claude-3.5-sonnet, deepseek/deepseek-chat"
    An empty list falls back to the conservative default model.
    """
    models = [m.strip() for m in (raw or "").split(",")]
    models = [m for m in models if m]
    return models or [DEFAULT_OPENROUTER_MODEL]


def load_config() -> CrosscheckConfig:
    """
    Build a configuration from the current environment.

    Called per process or per run; nothing is cached here, so changes to the
    environment are picked up by the next call.
    """
    openai_model = _env("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL
    openai_key = _env("OPENAI_API_KEY") or None

    config = CrosscheckConfig(
        openai=ModelConfig(
            name="openai",
            api_key=openai_key,
            model_id=openai_model,
        ),
        openrouter=ModelConfig(
            name="openrouter",
            api_key=_env("OPENROUTER_API_KEY") or None,
            model_id=DEFAULT_OPENROUTER_MODEL,
            base_url=OPENROUTER_BASE_URL,
        ),
        gemini=ModelConfig(
            name="gemini",
            api_key=_env("GEMINI_API_KEY") or None,
            model_id=_env("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
        ),
        synthesis=ModelConfig(
            name="openai",
            api_key=openai_key,
            model_id=_env("OPENAI_SYNTH_MODEL") or openai_model,
            temperature=0.1,
        ),
        openrouter_models=parse_model_list(_env("OPENROUTER_MODELS") or _env("OPENROUTER_MODEL")),
        gemini_enabled=_env_flag("GEMINI_ENABLED", True),
        crosscheck_key=_env("CROSSCHECK_KEY") or None,
        debug=_env_flag("DEBUG", False),
    )
    config.timeout_ms.default = _env_int("CROSSCHECK_TIMEOUT_MS", config.timeout_ms.default)
    return config


def validate_api_keys(config: Optional[CrosscheckConfig] = None) -> Dict[str, bool]:
    """Check which API keys are configured."""
    config = config or load_config()
    return {
        "openai": bool(config.openai.api_key),
        "openrouter": bool(config.openrouter.api_key),
        "gemini": bool(config.gemini.api_key),
    }
