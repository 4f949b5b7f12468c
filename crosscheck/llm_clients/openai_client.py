"""
OpenAI GPT client implementation.
Supports newer models that require max_completion_tokens parameter.
"""

from typing import Any, Dict, Optional, Tuple
from openai import APIStatusError, AsyncOpenAI

from .base_client import BaseLLMClient
from config.config import ModelConfig
from crosscheck.models.schemas import ProviderId


def describe_status_error(exc: Exception) -> str:
    """HTTP errors carry the status code and a truncated body."""
    if isinstance(exc, APIStatusError):
        body = exc.body if exc.body is not None else exc.message
        return f"HTTP {exc.status_code}: {str(body)[:800]}"
    return str(exc) or exc.__class__.__name__


def usage_to_dict(usage: Any) -> Optional[Dict[str, Any]]:
    if usage is None:
        return None
    return usage.model_dump(exclude_none=True)


class OpenAIClient(BaseLLMClient):
    """Client for OpenAI's GPT API."""

    provider = ProviderId.OPENAI
    api_key_env = "OPENAI_API_KEY"

    def __init__(self, config: ModelConfig):
        """
        Initialize the OpenAI client.

        Args:
            config: Model configuration; the API key is checked when a call runs
        """
        super().__init__(config)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.config.api_key)
        return self._client

    def describe_error(self, exc: Exception) -> str:
        return describe_status_error(exc)

    async def _complete(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        max_tokens: int,
        model: str
    ) -> Tuple[str, Optional[Dict[str, Any]]]:
        messages = []

        if system_prompt:
            messages.append({
                "role": "system",
                "content": system_prompt
            })

        messages.append({
            "role": "user",
            "content": prompt
        })

        # Use max_completion_tokens for newer models (required for o-series, gpt-5, etc.)
        response = await self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_completion_tokens=max_tokens
        )

        text = response.choices[0].message.content if response.choices else ""
        return text or "", usage_to_dict(response.usage)
