"""
OpenRouter aggregation gateway client.
Uses the OpenAI-compatible API endpoint; one client serves many downstream models.
"""

from typing import Any, Dict, Optional, Tuple
from openai import AsyncOpenAI

from .base_client import BaseLLMClient
from .openai_client import describe_status_error, usage_to_dict
from config.config import ModelConfig, OPENROUTER_BASE_URL
from crosscheck.models.schemas import ProviderId


class OpenRouterClient(BaseLLMClient):
    """Client for the OpenRouter gateway (OpenAI-compatible)."""

    provider = ProviderId.OPENROUTER
    api_key_env = "OPENROUTER_API_KEY"

    # Attribution headers shown in OpenRouter analytics
    DEFAULT_HEADERS = {
        "HTTP-Referer": "https://ai-tax-rag.local",
        "X-Title": "ai-tax-rag-crosscheck"
    }

    def __init__(self, config: ModelConfig):
        """
        Initialize the OpenRouter client.

        Args:
            config: Model configuration; `model_id` is only the default, the
                fan-out passes each downstream model explicitly
        """
        super().__init__(config)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url or OPENROUTER_BASE_URL,
                default_headers=self.DEFAULT_HEADERS
            )
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

        response = await self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens
        )

        # Gateways occasionally return 200 with an error payload and no choices
        if not response.choices:
            raise ValueError(f"No choices returned for model {model}")

        text = response.choices[0].message.content
        return text or "", usage_to_dict(response.usage)
