"""LLM Client implementations for the crosscheck providers."""

from .base_client import BaseLLMClient, build_user_prompt, classify_error
from .openai_client import OpenAIClient
from .openrouter_client import OpenRouterClient
from .google_client import GoogleClient

__all__ = [
    "BaseLLMClient",
    "build_user_prompt",
    "classify_error",
    "OpenAIClient",
    "OpenRouterClient",
    "GoogleClient"
]
