"""
Abstract base class for provider adapters.
Provides a unified interface for interacting with different LLM providers
and the no-throw `call` contract the fan-out relies on.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple
import json
import logging
import re
import time

from config.config import ModelConfig
from crosscheck.errors import SynthesisParseError
from crosscheck.models.schemas import (
    CrosscheckRequest,
    ProviderId,
    ProviderOutput,
    ProviderStatus
)

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


def classify_error(message: str) -> Tuple[ProviderStatus, str]:
    """Tag an error message as timeout when it mentions one, error otherwise."""
    status = ProviderStatus.TIMEOUT if "timeout" in message.lower() else ProviderStatus.ERROR
    return status, message


def build_user_prompt(request: CrosscheckRequest) -> str:
    """Lay out the shared request fields, skipping the empty ones."""
    sections = [
        f"Jurisdiction focus: {request.jurisdiction}" if request.jurisdiction else "",
        f"Constraints:\n{request.constraints}" if request.constraints else "",
        f"Facts:\n{request.facts}" if request.facts else "",
        f"Question:\n{request.question}",
    ]
    return "\n\n".join(s for s in sections if s)


class BaseLLMClient(ABC):
    """Abstract base class for LLM API clients."""

    provider: ProviderId
    api_key_env: str = ""

    ADVISOR_SYSTEM_PROMPT = """You are a senior international tax advisor.
Answer with: (1) direct answer first, (2) key assumptions, (3) risks/edge cases, (4) missing facts needed, (5) authorities only if you are confident they apply.
Do NOT invent citations. If unsure, say so and ask for the missing facts.
Be conservative; avoid overclaiming. Keep it concise but professional."""

    def __init__(self, config: ModelConfig):
        """
        Initialize the LLM client.

        Args:
            config: Model configuration including API key and settings
        """
        self.config = config
        self.name = config.name
        self.model_id = config.model_id
        self._client = None

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key)

    @abstractmethod
    async def _complete(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        max_tokens: int,
        model: str
    ) -> Tuple[str, Optional[Dict[str, Any]]]:
        """
        Run one completion against the vendor API.

        Returns:
            The generated text and the vendor's token usage, if reported
        """

    def describe_error(self, exc: Exception) -> str:
        """Turn a vendor exception into a one-line message."""
        return str(exc) or exc.__class__.__name__

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None
    ) -> str:
        """
        Generate a text response from the LLM.

        Unlike `call`, failures propagate to the caller.

        Args:
            prompt: The user prompt/question
            system_prompt: Optional system prompt to set context
            temperature: Override default temperature
            max_tokens: Override default max tokens
            model: Override the configured model identifier

        Returns:
            The generated text response
        """
        if not self.is_configured:
            raise ValueError(f"Missing env var: {self.api_key_env}")

        text, _usage = await self._complete(
            prompt=prompt,
            system_prompt=system_prompt,
            temperature=self.config.temperature if temperature is None else temperature,
            max_tokens=max_tokens or self.config.max_tokens,
            model=model or self.model_id
        )
        return text or ""

    async def call(
        self,
        request: CrosscheckRequest,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None
    ) -> ProviderOutput:
        """
        Answer a crosscheck request. Never raises for provider failures.

        Args:
            request: The validated request
            max_tokens: Completion budget, already clamped by the caller
            model: Override the configured model identifier

        Returns:
            ProviderOutput with status ok or error
        """
        model_id = model or self.model_id
        start = time.monotonic()

        if not self.is_configured:
            return self._output(
                model_id, start,
                status=ProviderStatus.ERROR,
                error=f"Missing env var: {self.api_key_env}"
            )

        try:
            text, usage = await self._complete(
                prompt=build_user_prompt(request),
                system_prompt=self.ADVISOR_SYSTEM_PROMPT,
                temperature=self.config.temperature,
                max_tokens=max_tokens or self.config.max_tokens,
                model=model_id
            )
        except Exception as e:
            status, message = classify_error(self.describe_error(e))
            logger.warning("%s (%s) failed: %s", self.provider.value, model_id, message)
            return self._output(model_id, start, status=status, error=message)

        return self._output(
            model_id, start,
            status=ProviderStatus.OK,
            text=text or "",
            usage=usage
        )

    def _output(self, model: str, start: float, **fields) -> ProviderOutput:
        return ProviderOutput(
            provider=self.provider,
            model=model,
            elapsed_ms=int((time.monotonic() - start) * 1000),
            **fields
        )

    def parse_json_response(self, response: str) -> dict:
        """
        Parse JSON from LLM response, handling common formatting issues.

        Args:
            response: Raw response string from LLM

        Returns:
            Parsed dictionary
        """
        text = (response or "").strip()
        if not text:
            raise SynthesisParseError("Empty response")

        # Many models wrap JSON in ```json ... ``` fences
        fence = _FENCE_RE.search(text)
        if fence and fence.group(1):
            text = fence.group(1).strip()
        else:
            start_idx = text.find('{')
            end_idx = text.rfind('}')
            if start_idx != -1 and end_idx > start_idx:
                text = text[start_idx:end_idx + 1]

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise SynthesisParseError(f"Failed to parse JSON response: {e}\nResponse: {response[:500]}") from e

        if not isinstance(parsed, dict):
            raise SynthesisParseError(f"Expected a JSON object, got {type(parsed).__name__}")
        return parsed

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name}, model={self.model_id})"
