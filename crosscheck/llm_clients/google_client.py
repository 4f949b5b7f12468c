"""
Google Gemini client implementation using the google-genai SDK.
"""

from typing import Any, Dict, Optional, Tuple
from google import genai
from google.genai import errors, types

from .base_client import BaseLLMClient
from config.config import ModelConfig
from crosscheck.models.schemas import ProviderId


class GoogleClient(BaseLLMClient):
    """Client for Google's Gemini API."""

    provider = ProviderId.GEMINI
    api_key_env = "GEMINI_API_KEY"

    def __init__(self, config: ModelConfig):
        """
        Initialize the Google Gemini client.

        Args:
            config: Model configuration; the API key is checked when a call runs
        """
        super().__init__(config)

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self.config.api_key)
        return self._client

    def describe_error(self, exc: Exception) -> str:
        if isinstance(exc, errors.APIError):
            return f"HTTP {exc.code}: {str(exc.message or exc)[:800]}"
        return str(exc) or exc.__class__.__name__

    async def _complete(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        max_tokens: int,
        model: str
    ) -> Tuple[str, Optional[Dict[str, Any]]]:
        generation_config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
            system_instruction=system_prompt if system_prompt else None
        )

        response = await self.client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=generation_config
        )

        usage = response.usage_metadata
        return response.text or "", usage.model_dump(exclude_none=True) if usage else None
