import asyncio
from typing import Any, Dict, Optional

from config.config import OPENROUTER_BASE_URL, CrosscheckConfig, ModelConfig
from crosscheck.llm_clients.base_client import BaseLLMClient
from crosscheck.models.schemas import CrosscheckRequest, ProviderId
from crosscheck.orchestrator import CrosscheckOrchestrator


class StubClient(BaseLLMClient):
    """Client with canned behaviour per model.

    A response is a string (returned as text), an exception (raised), or a
    ``(delay_seconds, response)`` tuple.
    """

    def __init__(
        self,
        provider: ProviderId,
        model_id: str = "stub-model",
        responses: Optional[Dict[str, Any]] = None,
        api_key: Optional[str] = "test-key",
        api_key_env: str = "STUB_API_KEY",
    ) -> None:
        super().__init__(ModelConfig(name=provider.value, api_key=api_key, model_id=model_id))
        self.provider = provider
        self.api_key_env = api_key_env
        self.responses = responses or {}
        self.requests: list = []

    async def _complete(self, prompt, system_prompt, temperature, max_tokens, model):
        self.requests.append({
            "prompt": prompt,
            "system_prompt": system_prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "model": model,
        })
        behaviour = self.responses.get(model, self.responses.get("*", "stub answer"))
        if isinstance(behaviour, tuple):
            delay, behaviour = behaviour
            await asyncio.sleep(delay)
        if isinstance(behaviour, BaseException):
            raise behaviour
        return behaviour, {"total_tokens": 42}


def make_config(**overrides: Any) -> CrosscheckConfig:
    config = CrosscheckConfig(
        openai=ModelConfig(name="openai", api_key="test-key", model_id="gpt-test"),
        openrouter=ModelConfig(
            name="openrouter",
            api_key="test-key",
            model_id="anthropic/claude-3.5-sonnet",
            base_url=OPENROUTER_BASE_URL,
        ),
        gemini=ModelConfig(name="gemini", api_key="test-key", model_id="gemini-test"),
        synthesis=ModelConfig(name="openai", api_key="test-key", model_id="synth-test", temperature=0.1),
    )
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


def make_request(**fields: Any) -> CrosscheckRequest:
    fields.setdefault("question", "What is a permanent establishment?")
    return CrosscheckRequest(**fields)


def build_orchestrator(
    openai: Optional[Dict[str, Any]] = None,
    gemini: Optional[Dict[str, Any]] = None,
    openrouter: Optional[Dict[str, Any]] = None,
    synthesis: Any = None,
    config: Optional[CrosscheckConfig] = None,
) -> CrosscheckOrchestrator:
    config = config or make_config()
    clients = {
        ProviderId.OPENAI: StubClient(ProviderId.OPENAI, "gpt-test", openai),
        ProviderId.GEMINI: StubClient(ProviderId.GEMINI, "gemini-test", gemini),
        ProviderId.OPENROUTER: StubClient(ProviderId.OPENROUTER, "anthropic/claude-3.5-sonnet", openrouter),
    }
    if not isinstance(synthesis, BaseLLMClient):
        synthesis = StubClient(ProviderId.OPENAI, "synth-test", {"*": synthesis if synthesis is not None else ""})
    return CrosscheckOrchestrator(
        config=config,
        clients=clients,
        synthesis_client=synthesis,
        verbose=False,
    )
