"""
Fan-out executor: issues one call per configured provider/model concurrently
and collects every outcome.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from crosscheck.llm_clients.base_client import BaseLLMClient, classify_error
from crosscheck.models.schemas import (
    CrosscheckRequest,
    ProviderCall,
    ProviderId,
    ProviderOutput
)
from crosscheck.stages.deadline import with_deadline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedCall:
    """A provider call paired with the client that will serve it."""
    call: ProviderCall
    client: BaseLLMClient


class FanOutExecutor:
    """Runs every planned provider call under the same deadline."""

    def __init__(
        self,
        clients: Mapping[ProviderId, BaseLLMClient],
        openrouter_models: Sequence[str],
        gemini_enabled: bool = True
    ):
        """
        Initialize the executor.

        Args:
            clients: Client per provider kind; a missing kind is skipped
            openrouter_models: Downstream models the gateway fans out to
            gemini_enabled: Whether the Gemini adapter is attempted
        """
        self.clients = dict(clients)
        self.openrouter_models = list(openrouter_models)
        self.gemini_enabled = gemini_enabled

    def build_calls(self) -> List[PlannedCall]:
        """
        Expand the configuration into the list of calls to attempt.

        Order is fixed: OpenAI, Gemini, then one OpenRouter call per
        downstream model in configured order.
        """
        planned: List[PlannedCall] = []

        openai_client = self.clients.get(ProviderId.OPENAI)
        if openai_client is not None:
            planned.append(PlannedCall(
                ProviderCall(provider=ProviderId.OPENAI, model=openai_client.model_id),
                openai_client
            ))

        gemini_client = self.clients.get(ProviderId.GEMINI)
        if gemini_client is not None and self.gemini_enabled:
            planned.append(PlannedCall(
                ProviderCall(provider=ProviderId.GEMINI, model=gemini_client.model_id),
                gemini_client
            ))

        openrouter_client = self.clients.get(ProviderId.OPENROUTER)
        if openrouter_client is not None:
            for model in self.openrouter_models:
                planned.append(PlannedCall(
                    ProviderCall(provider=ProviderId.OPENROUTER, model=model),
                    openrouter_client
                ))

        return planned

    async def _invoke(
        self,
        planned: PlannedCall,
        request: CrosscheckRequest,
        timeout_ms: int,
        max_tokens: int
    ) -> ProviderOutput:
        call = planned.call
        start = time.monotonic()
        try:
            output = await with_deadline(
                call,
                planned.client.call(request, max_tokens=max_tokens, model=call.model),
                timeout_ms
            )
        except Exception as e:
            # Adapters should never raise; keep the slot anyway
            status, message = classify_error(str(e) or e.__class__.__name__)
            logger.error("%s raised despite the no-throw contract: %s", call.label, message)
            return ProviderOutput(
                provider=call.provider,
                model=call.model,
                status=status,
                elapsed_ms=int((time.monotonic() - start) * 1000),
                error=message
            )

        if output.provider != call.provider or output.model != call.model:
            output = output.model_copy(update={"provider": call.provider, "model": call.model})
        return output

    async def run(
        self,
        request: CrosscheckRequest,
        timeout_ms: int,
        max_tokens: int
    ) -> Tuple[List[ProviderCall], List[ProviderOutput]]:
        """
        Run all planned calls concurrently and wait for every one to settle.

        Args:
            request: The validated request
            timeout_ms: Clamped per-call deadline
            max_tokens: Clamped per-call completion budget

        Returns:
            Tuple of (attempted calls, outputs in the same order)
        """
        planned = self.build_calls()
        tasks = [
            self._invoke(p, request, timeout_ms, max_tokens)
            for p in planned
        ]
        outputs = await asyncio.gather(*tasks)
        return [p.call for p in planned], list(outputs)


def partition_calls(
    outputs: Sequence[ProviderOutput]
) -> Tuple[List[ProviderCall], List[ProviderCall]]:
    """
    Split outputs into succeeded (status ok) and failed (error or timeout).

    Returns:
        Tuple of (succeeded, failed), each preserving output order
    """
    succeeded = [o.call for o in outputs if o.ok]
    failed = [o.call for o in outputs if not o.ok]
    return succeeded, failed


def summarize_outcomes(outputs: Sequence[ProviderOutput]) -> Dict[str, int]:
    """Count outputs per status, for logging."""
    counts: Dict[str, int] = {}
    for output in outputs:
        counts[output.status.value] = counts.get(output.status.value, 0) + 1
    return counts
