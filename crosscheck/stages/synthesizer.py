"""
Synthesis: a second LLM pass that merges every provider output into one
structured consensus.
"""

import asyncio
import logging
from typing import Any, Iterable, List, Optional, Sequence

from config.config import Bounds
from crosscheck.errors import SynthesisParseError
from crosscheck.llm_clients.base_client import BaseLLMClient
from crosscheck.models.schemas import (
    Confidence,
    ConsensusResult,
    CrosscheckRequest,
    ProviderOutput
)
from crosscheck.stages.fallback import pick_best

logger = logging.getLogger(__name__)

PARSE_FAILURE_CAVEAT = "Synthesis did not return valid JSON; returning raw output."


def uniq_strings(items: Iterable[Any]) -> List[str]:
    """Trim, drop empties and collapse duplicates, keeping first-seen order."""
    seen = set()
    result = []
    for item in items:
        if item is None:
            continue
        value = str(item).strip()
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def normalize_consensus(parsed: dict) -> ConsensusResult:
    """
    Coerce a loosely-shaped dict into a ConsensusResult.

    Non-list list fields become empty, unknown confidence becomes low.
    """
    answer = parsed.get("answer")
    confidence_raw = str(parsed.get("confidence") or "").strip().lower()
    try:
        confidence = Confidence(confidence_raw)
    except ValueError:
        confidence = Confidence.LOW

    return ConsensusResult(
        answer=str(answer).strip() if answer is not None else "",
        caveats=uniq_strings(_as_list(parsed.get("caveats"))),
        followups=uniq_strings(_as_list(parsed.get("followups"))),
        disagreements=uniq_strings(_as_list(parsed.get("disagreements"))),
        confidence=confidence
    )


class Synthesizer:
    """Merges all provider outputs into a single conservative consensus."""

    SYNTH_SYSTEM_PROMPT = """You are the Crosscheck Orchestrator for a tax AI product.
Your job: synthesize a conservative consensus answer from multiple model outputs.
Do NOT invent citations. If you reference an authority, name it only if it was mentioned by providers or is truly standard/common doctrine.
Be explicit about assumptions, caveats, and missing facts needed to confirm.
If providers disagree, summarize the disagreement in plain language.
Return STRICT JSON ONLY with keys: answer, caveats, followups, disagreements, confidence.
caveats/followups/disagreements must be arrays of strings. confidence must be one of: low, medium, high."""

    SYNTH_PROMPT_TEMPLATE = """{request_block}

Provider outputs:

{provider_block}

Identify where the providers agree, flag contradictions, list the facts still needed,
and give a conservative best answer. Respond with ONLY the JSON object:
{{
    "answer": "Conservative best answer",
    "caveats": ["Assumptions and risks"],
    "followups": ["Facts still needed to confirm"],
    "disagreements": ["Where providers contradict each other"],
    "confidence": "low|medium|high"
}}"""

    def __init__(
        self,
        client: BaseLLMClient,
        max_tokens: Optional[Bounds] = None,
        char_budget: int = 12_000
    ):
        """
        Initialize the synthesizer.

        Args:
            client: Client used for the synthesis call; any BaseLLMClient works
            max_tokens: Bounds for the synthesis completion budget
            char_budget: Characters of each provider output included in the prompt
        """
        self.client = client
        self.max_tokens = max_tokens or Bounds(256, 1_200, 900)
        self.char_budget = char_budget

    def pack_outputs(self, outputs: Sequence[ProviderOutput]) -> str:
        """Label each output by provider/model/status and truncate its body."""
        blocks = []
        for o in outputs:
            head = f"=== PROVIDER {o.provider.value} ({o.model}) status={o.status.value} ==="
            body = (o.text or o.error or "")[:self.char_budget]
            blocks.append(f"{head}\n{body}")
        return "\n\n".join(blocks)

    def build_prompt(self, request: CrosscheckRequest, outputs: Sequence[ProviderOutput]) -> str:
        sections = [
            f"Jurisdiction: {request.jurisdiction}" if request.jurisdiction else "",
            f"Constraints: {request.constraints}" if request.constraints else "",
            f"Facts:\n{request.facts}" if request.facts else "",
            f"Question:\n{request.question}",
        ]
        return self.SYNTH_PROMPT_TEMPLATE.format(
            request_block="\n\n".join(s for s in sections if s),
            provider_block=self.pack_outputs(outputs)
        )

    def _unavailable(self, outputs: Sequence[ProviderOutput]) -> ConsensusResult:
        best = pick_best(outputs)
        reason = f"Synthesis model unavailable (missing {self.client.api_key_env or 'credentials'})."
        if best is not None:
            caveat = f"{reason} Returned best single-provider output."
        else:
            caveat = f"{reason} No successful provider output."
        return normalize_consensus({
            "answer": best.text if best else "",
            "caveats": [caveat],
            "confidence": "low"
        })

    def _failed(self, message: str) -> ConsensusResult:
        return ConsensusResult(
            answer="",
            caveats=[f"Synthesis call failed: {message}"],
            confidence=Confidence.LOW
        )

    async def synthesize(
        self,
        request: CrosscheckRequest,
        outputs: Sequence[ProviderOutput],
        timeout_ms: Optional[int] = None
    ) -> ConsensusResult:
        """
        Produce the consensus for one run. Never raises for model failures.

        Args:
            request: The validated request
            outputs: Every provider output, successful or not
            timeout_ms: Deadline for the synthesis call; None waits on the
                client's own timeout

        Returns:
            ConsensusResult; degraded (low confidence) when the synthesis
            call is unavailable, fails, or returns unparseable content
        """
        if not self.client.is_configured:
            logger.warning("Synthesis client not configured; using fallback selection")
            return self._unavailable(outputs)

        generation = self.client.generate(
            prompt=self.build_prompt(request, outputs),
            system_prompt=self.SYNTH_SYSTEM_PROMPT,
            temperature=0.1,
            max_tokens=self.max_tokens.clamp(request.max_tokens)
        )
        try:
            raw = await asyncio.wait_for(
                generation,
                timeout=timeout_ms / 1000 if timeout_ms else None
            )
        except Exception as e:
            if timeout_ms and isinstance(e, asyncio.TimeoutError):
                message = f"timeout after {timeout_ms}ms"
            else:
                message = self.client.describe_error(e)
            logger.warning("Synthesis call failed: %s", message)
            return self._failed(message)

        try:
            parsed = self.client.parse_json_response(raw)
        except SynthesisParseError as e:
            # Raw text is kept as the answer; only an empty answer triggers the fallback pick
            logger.warning("Synthesis output was not valid JSON: %s", str(e).splitlines()[0])
            return normalize_consensus({
                "answer": raw,
                "caveats": [PARSE_FAILURE_CAVEAT],
                "confidence": "low"
            })

        return normalize_consensus(parsed)
