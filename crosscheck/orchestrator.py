"""
Main Orchestrator for the Crosscheck system.
Fans one question out to several providers and reconciles their answers.
"""

import logging
import time
from typing import Dict, Optional

from config.config import CrosscheckConfig, load_config
from crosscheck.errors import ConfigurationError, InvalidRequestError
from crosscheck.llm_clients.base_client import BaseLLMClient
from crosscheck.llm_clients.openai_client import OpenAIClient
from crosscheck.llm_clients.openrouter_client import OpenRouterClient
from crosscheck.llm_clients.google_client import GoogleClient
from crosscheck.models.schemas import (
    CrosscheckRequest,
    CrosscheckResult,
    ProviderId
)
from crosscheck.stages.assembler import assemble_result
from crosscheck.stages.fan_out import FanOutExecutor, summarize_outcomes
from crosscheck.stages.synthesizer import Synthesizer

logger = logging.getLogger(__name__)


class CrosscheckOrchestrator:
    """
    Orchestrates one crosscheck run.

    Workflow:
    1. Clamp the timeout and token budget
    2. Fan out to every configured provider/model under a per-call deadline
    3. Synthesize a consensus over all outputs under the same deadline
    4. Assemble the result, falling back to the best raw answer if needed

    The orchestrator holds no per-run state, so one instance can serve
    concurrent runs.
    """

    def __init__(
        self,
        config: Optional[CrosscheckConfig] = None,
        clients: Optional[Dict[ProviderId, BaseLLMClient]] = None,
        synthesis_client: Optional[BaseLLMClient] = None,
        verbose: bool = True
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Configuration; loaded from the environment if None
            clients: Optional client per provider kind. If None, built from config.
            synthesis_client: Optional client for the synthesis call
            verbose: Whether to log progress messages
        """
        self.config = config or load_config()
        self.verbose = verbose
        self._check_bounds()

        self.clients = clients if clients is not None else self._initialize_clients()
        self.fan_out = FanOutExecutor(
            self.clients,
            openrouter_models=self.config.openrouter_models,
            gemini_enabled=self.config.gemini_enabled
        )
        self.synthesizer = Synthesizer(
            synthesis_client or OpenAIClient(self.config.synthesis),
            max_tokens=self.config.synthesis_max_tokens,
            char_budget=self.config.synthesis_char_budget
        )

    def _check_bounds(self):
        for name in ("timeout_ms", "max_tokens", "synthesis_max_tokens"):
            bounds = getattr(self.config, name)
            if not bounds.is_valid():
                raise ConfigurationError(
                    f"Invalid {name} bounds: min={bounds.minimum} "
                    f"default={bounds.default} max={bounds.maximum}"
                )
        if not self.config.openrouter_models:
            raise ConfigurationError("openrouter_models must not be empty")

    def _initialize_clients(self) -> Dict[ProviderId, BaseLLMClient]:
        """
        Build clients from configuration.

        Credentials are not checked here; a client without a key reports an
        error output when called.
        """
        return {
            ProviderId.OPENAI: OpenAIClient(self.config.openai),
            ProviderId.GEMINI: GoogleClient(self.config.gemini),
            ProviderId.OPENROUTER: OpenRouterClient(self.config.openrouter),
        }

    def _log(self, message: str, *args):
        """Log message if verbose mode is enabled."""
        if self.verbose:
            logger.info(message, *args)

    async def run(self, request: CrosscheckRequest) -> CrosscheckResult:
        """
        Run one crosscheck.

        Args:
            request: The validated request

        Returns:
            CrosscheckResult; provider failures never raise

        Raises:
            InvalidRequestError: if the question is empty
        """
        if not request.question.strip():
            raise InvalidRequestError("Missing 'question'.")

        start = time.monotonic()
        timeout_ms = self.config.timeout_ms.clamp(request.timeout_ms)
        max_tokens = self.config.max_tokens.clamp(request.max_tokens)

        self._log("Crosscheck started (timeout=%dms, max_tokens=%d)", timeout_ms, max_tokens)

        attempted, outputs = await self.fan_out.run(request, timeout_ms, max_tokens)
        self._log(
            "Fan-out settled: %d attempted, outcomes=%s",
            len(attempted), summarize_outcomes(outputs)
        )

        consensus = await self.synthesizer.synthesize(request, outputs, timeout_ms)
        self._log("Synthesis confidence: %s", consensus.confidence.value)

        runtime_ms = int((time.monotonic() - start) * 1000)
        result = assemble_result(attempted, outputs, consensus, runtime_ms)

        self._log(
            "Crosscheck finished in %dms: %d succeeded, %d failed",
            runtime_ms, len(result.meta.succeeded), len(result.meta.failed)
        )
        if not result.ok:
            logger.warning("No provider succeeded: %s", ", ".join(c.label for c in attempted))

        return result


async def run_crosscheck(
    request: CrosscheckRequest,
    config: Optional[CrosscheckConfig] = None
) -> CrosscheckResult:
    """Convenience wrapper: build an orchestrator from config and run once."""
    orchestrator = CrosscheckOrchestrator(config=config)
    return await orchestrator.run(request)
